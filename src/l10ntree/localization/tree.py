"""Key-path cache trees.

A :class:`CacheTree` mirrors the key structure of a template store and holds
values (parsed messages or compiled formatters) at its leaves. Every node is
the tagged variant ``Leaf[T] | Branch[T]``, so walking the tree is a pattern
match instead of an isinstance check on the cached value.

Walks never mutate. :meth:`CacheTree.probe` reports one of three outcomes:

- :class:`Found`: a leaf sits exactly at the path (cache hit)
- :class:`Vacant`: nothing is stored there yet; carries the deepest existing
  branch and the missing segments so :meth:`CacheTree.fill` can graft the
  value without walking again
- :class:`Blocked`: the path runs into a leaf before its last segment, or
  names a branch; the path can never hold a value in this tree

Invariants:
    - A position is a leaf or a branch, never both
    - Positions are never converted, removed, or overwritten
    - Branches exist only on the way to at least one leaf

Not thread-safe; the owning LocaleMessages serializes access.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from l10ntree.localization.types import KeyPath

__all__ = [
    "Blocked",
    "Branch",
    "CacheTree",
    "Found",
    "Leaf",
    "Node",
    "Probe",
    "Vacant",
]


@dataclass(frozen=True, slots=True)
class Leaf[T]:
    """Cached value at the end of a key path."""

    value: T


@dataclass(slots=True)
class Branch[T]:
    """Interior node: children by key segment."""

    children: dict[str, Node[T]] = field(default_factory=dict)


type Node[T] = Leaf[T] | Branch[T]


@dataclass(frozen=True, slots=True)
class Found[T]:
    """Probe outcome: a value is cached at the path."""

    value: T


@dataclass(frozen=True, slots=True)
class Vacant[T]:
    """Probe outcome: nothing cached at the path yet.

    Attributes:
        anchor: Deepest existing branch along the path
        missing: Segments below the anchor, ending with the leaf segment
    """

    anchor: Branch[T]
    missing: KeyPath


@dataclass(frozen=True, slots=True)
class Blocked:
    """Probe outcome: the tree shape rules the path out.

    Attributes:
        depth: Number of segments consumed when the walk stopped
    """

    depth: int


type Probe[T] = Found[T] | Vacant[T] | Blocked


class CacheTree[T]:
    """Append-only tree of cached values addressed by key path.

    Example:
        >>> tree: CacheTree[str] = CacheTree()
        >>> probe = tree.probe(("menu", "open"))
        >>> isinstance(probe, Vacant)
        True
        >>> tree.fill(probe, "Open")
        'Open'
        >>> tree.probe(("menu", "open"))
        Found(value='Open')
        >>> tree.probe(("menu", "open", "tooltip"))
        Blocked(depth=2)
        >>> tree.probe(("menu",))
        Blocked(depth=1)
    """

    __slots__ = ("_root", "_size")

    def __init__(self) -> None:
        self._root: Branch[T] = Branch()
        self._size = 0

    def __len__(self) -> int:
        """Number of cached leaves."""
        return self._size

    def __repr__(self) -> str:
        return f"CacheTree(leaves={self._size})"

    def probe(self, path: KeyPath) -> Probe[T]:
        """Walk the tree along ``path`` without mutating it.

        Args:
            path: Non-empty key path

        Returns:
            Found, Vacant, or Blocked (see module docstring)
        """
        node: Branch[T] = self._root
        for depth, segment in enumerate(path):
            match node.children.get(segment):
                case None:
                    return Vacant(node, path[depth:])
                case Leaf(value=value):
                    if depth == len(path) - 1:
                        return Found(value)
                    return Blocked(depth + 1)
                case Branch() as child:
                    if depth == len(path) - 1:
                        return Blocked(depth + 1)
                    node = child
        return Blocked(0)

    def fill(self, vacancy: Vacant[T], value: T) -> T:
        """Store ``value`` at the vacancy found by :meth:`probe`.

        Creates the missing branches below the anchor, then the leaf. Must be
        called before any other mutation of the tree (the caller's lock
        guarantees this).

        Returns:
            The stored value
        """
        node = vacancy.anchor
        *branches, last = vacancy.missing
        for segment in branches:
            child: Branch[T] = Branch()
            node.children[segment] = child
            node = child
        node.children[last] = Leaf(value)
        self._size += 1
        return value

    def leaves(self) -> Iterator[tuple[KeyPath, T]]:
        """Iterate ``(path, value)`` pairs depth-first."""
        yield from _walk(self._root, ())


def _walk[T](branch: Branch[T], prefix: KeyPath) -> Iterator[tuple[KeyPath, T]]:
    for segment, child in branch.children.items():
        match child:
            case Leaf(value=value):
                yield (*prefix, segment), value
            case Branch():
                yield from _walk(child, (*prefix, segment))

"""Message AST (Abstract Syntax Tree) node definitions.

Nodes for ICU MessageFormat templates as produced by
:func:`l10ntree.syntax.parse_message`. All nodes are frozen, so a parsed
message can be cached and shared between threads and locales.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from typing import TypeIs

from l10ntree.enums import ArgumentType, DateTimeStyle

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Message structure
    "Message",
    "Pattern",
    # Pattern elements
    "TextElement",
    "ArgumentElement",
    "NumberElement",
    "DateTimeElement",
    "PluralElement",
    "SelectElement",
    "PoundElement",
    "Option",
    # Type aliases
    "PatternElement",
]

# ============================================================================
# MESSAGE STRUCTURE
# ============================================================================


@dataclass(frozen=True, slots=True)
class Pattern:
    """Sequence of text and argument elements."""

    elements: tuple["PatternElement", ...]


@dataclass(frozen=True, slots=True)
class Message:
    """Parsed template: the intermediate form cached per key path.

    Attributes:
        pattern: Top-level pattern
        source: Template source the pattern was parsed from

    Example:
        "Hello, {name}!" parses to
        Message(
            pattern=Pattern((TextElement("Hello, "), ArgumentElement("name"),
                             TextElement("!"))),
            source="Hello, {name}!",
        )
    """

    pattern: Pattern
    source: str

    @staticmethod
    def guard(node: object) -> TypeIs["Message"]:
        """Type guard for Message."""
        return isinstance(node, Message)

    @property
    def argument_names(self) -> frozenset[str]:
        """Names of every argument the message reads, at any depth."""
        names: set[str] = set()
        _collect_names(self.pattern, names)
        return frozenset(names)


# ============================================================================
# PATTERN ELEMENTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class TextElement:
    """Plain text segment (quoting already resolved)."""

    value: str

    @staticmethod
    def guard(elem: object) -> TypeIs["TextElement"]:
        """Type guard for TextElement."""
        return isinstance(elem, TextElement)


@dataclass(frozen=True, slots=True)
class ArgumentElement:
    """Simple argument: {name}"""

    name: str


@dataclass(frozen=True, slots=True)
class NumberElement:
    """Number argument: {name, number} or {name, number, percent}

    Attributes:
        name: Argument name
        style: None, "integer", "percent", or a Babel decimal pattern
    """

    name: str
    style: str | None = None


@dataclass(frozen=True, slots=True)
class DateTimeElement:
    """Date or time argument: {when, date, long} / {when, time}"""

    name: str
    type: ArgumentType
    style: DateTimeStyle = DateTimeStyle.MEDIUM


@dataclass(frozen=True, slots=True)
class Option:
    """One branch of a plural or select argument.

    Example:
        one {# item}  ->  Option(selector="one", value=Pattern(...))
        =0 {none}     ->  Option(selector="=0", value=Pattern(...))
    """

    selector: str
    value: Pattern

    @property
    def is_exact(self) -> bool:
        """True for explicit numeric selectors such as ``=0``."""
        return self.selector.startswith("=")


@dataclass(frozen=True, slots=True)
class PluralElement:
    """Plural or ordinal argument.

    Example:
        {count, plural, offset:1 =0 {nobody} one {# other} other {# others}}
    """

    name: str
    options: tuple[Option, ...]
    offset: int = 0
    ordinal: bool = False

    @staticmethod
    def guard(elem: object) -> TypeIs["PluralElement"]:
        """Type guard for PluralElement."""
        return isinstance(elem, PluralElement)


@dataclass(frozen=True, slots=True)
class SelectElement:
    """Keyword select argument.

    Example:
        {gender, select, female {she} male {he} other {they}}
    """

    name: str
    options: tuple[Option, ...]


@dataclass(frozen=True, slots=True)
class PoundElement:
    """``#`` inside a plural option: the offset-adjusted plural value."""


# ============================================================================
# TYPE ALIASES
# ============================================================================

type PatternElement = (
    TextElement
    | ArgumentElement
    | NumberElement
    | DateTimeElement
    | PluralElement
    | SelectElement
    | PoundElement
)


def _collect_names(pattern: Pattern, names: set[str]) -> None:
    for elem in pattern.elements:
        match elem:
            case ArgumentElement(name=name) | NumberElement(name=name) | DateTimeElement(
                name=name
            ):
                names.add(name)
            case PluralElement(name=name, options=options) | SelectElement(
                name=name, options=options
            ):
                names.add(name)
                for option in options:
                    _collect_names(option.value, names)

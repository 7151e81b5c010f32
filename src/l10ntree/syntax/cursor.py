"""Position tracking for the message parser.

A Cursor is a frozen (source, pos) pair. Sub-parsers never move a cursor in
place; they return a new one inside a ParseResult, so a failed branch can
simply keep using the cursor it started from.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

__all__ = ["Cursor", "ParseResult"]

# Separators allowed inside braces: {count , plural , one {..}}
_WHITESPACE: frozenset[str] = frozenset(" \t\n\r")


@dataclass(frozen=True, slots=True)
class Cursor:
    """Read position in a template source.

    Example:
        >>> start = Cursor("{n}", 0)
        >>> start.current, start.advance().current
        ('{', 'n')
        >>> Cursor("{n}", 3).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """True once every character has been consumed."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Character under the cursor.

        Raises:
            EOFError: At end of input; check is_eof first
        """
        if self.is_eof:
            msg = f"No character at position {self.pos} (end of template)"
            raise EOFError(msg)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Character ``offset`` positions ahead, or None past the end."""
        index = self.pos + offset
        return self.source[index] if index < len(self.source) else None

    def advance(self, count: int = 1) -> "Cursor":
        """New cursor ``count`` characters further, clamped to the end."""
        return Cursor(self.source, min(self.pos + count, len(self.source)))

    def slice_to(self, end_pos: int) -> str:
        """Source text from this cursor up to ``end_pos``."""
        return self.source[self.pos : end_pos]

    def skip_whitespace(self) -> "Cursor":
        """New cursor past any run of spaces, tabs and line breaks."""
        pos = self.pos
        while pos < len(self.source) and self.source[pos] in _WHITESPACE:
            pos += 1
        return self if pos == self.pos else Cursor(self.source, pos)

    def expect(self, char: str) -> "Cursor | None":
        """Cursor past ``char`` if it is next, else None.

        Example:
            >>> Cursor("}", 0).expect("}").is_eof
            True
            >>> Cursor("}", 0).expect(",") is None
            True
        """
        if self.peek() == char:
            return self.advance()
        return None

    def compute_line_col(self) -> tuple[int, int]:
        """1-based (line, column) of the cursor, for error reports.

        Example:
            >>> Cursor("ab\\ncd", 4).compute_line_col()
            (2, 2)
        """
        line = self.source.count("\n", 0, self.pos) + 1
        line_start = self.source.rfind("\n", 0, self.pos) + 1
        return (line, self.pos - line_start + 1)


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Value produced by a sub-parser plus the cursor after it.

    Sub-parsers share the shape
    ``def _parse_x(cursor: Cursor, ...) -> ParseResult[X]`` and raise
    MessageSyntaxError instead of returning failures.
    """

    value: T
    cursor: Cursor

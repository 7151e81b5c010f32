"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages carried by
l10ntree exceptions.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Key errors (lookup key rejected before resolution)
        2000-2999: Formatting errors (rendering a compiled message)
        3000-3999: Syntax errors (message parser failures)
    """

    # Key errors (1000-1999)
    KEY_POLLUTION = 1001

    # Formatting errors (2000-2999)
    ARGUMENT_NOT_PROVIDED = 2001
    ARGUMENT_NOT_NUMERIC = 2002
    ARGUMENT_NOT_TEMPORAL = 2003

    # Syntax errors (3000-3999)
    UNEXPECTED_EOF = 3001
    UNEXPECTED_CHARACTER = 3002
    INVALID_ARGUMENT_NAME = 3003
    INVALID_ARGUMENT_TYPE = 3004
    INVALID_ARGUMENT_STYLE = 3005
    MISSING_OTHER_CLAUSE = 3006
    DUPLICATE_SELECTOR = 3007
    INVALID_OFFSET = 3008
    INVALID_SELECTOR = 3009
    NESTING_DEPTH_EXCEEDED = 3010
    SOURCE_TOO_LARGE = 3011


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Where in a template a syntax error was detected.

    ``start``/``end`` are 0-based character offsets (end exclusive);
    ``line``/``column`` are 1-based, as editors show them.
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        problems = [
            f"start {self.start} < 0" if self.start < 0 else "",
            f"end {self.end} < start {self.start}" if self.end < self.start else "",
            f"line {self.line} < 1" if self.line < 1 else "",
            f"column {self.column} < 1" if self.column < 1 else "",
        ]
        invalid = [problem for problem in problems if problem]
        if invalid:
            msg = f"Invalid SourceSpan: {', '.join(invalid)}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Error details shared by every l10ntree exception.

    Attributes:
        code: What went wrong, as a stable enum member
        message: One-line description
        span: Template location (syntax errors only)
        hint: How to fix it, when there is an obvious fix
        argument_name: Message argument involved in a formatting error
        locale_code: Locale the formatter was compiled for
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    argument_name: str | None = None
    locale_code: str | None = None

    def __str__(self) -> str:
        return self.message

    def format_error(self) -> str:
        """Render a multi-line report in the style of rustc.

        Example output:
            error[MISSING_OTHER_CLAUSE]: Argument 'count' has no 'other' option
              --> line 1, column 40
              = help: Add an 'other {...}' option

        Line breaks and tabs inside the text are escaped, so one diagnostic
        is always one report in a log.
        """
        lines = [f"error[{self.code.name}]: {_escape(self.message)}"]
        if self.span is not None:
            lines.append(f"  --> line {self.span.line}, column {self.span.column}")
        if self.argument_name is not None:
            lines.append(f"  = argument: {_escape(self.argument_name)}")
        if self.locale_code is not None:
            lines.append(f"  = locale: {_escape(self.locale_code)}")
        if self.hint is not None:
            lines.append(f"  = help: {self.hint}")
        return "\n".join(lines)


def _escape(text: str) -> str:
    return text.replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t")

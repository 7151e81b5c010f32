"""l10ntree exception hierarchy with structured diagnostics.

Only two conditions are failures of a lookup: a malformed template and a
lookup key carrying the reserved pollution segment. Everything else (unknown
package, missing locale data, path shape mismatch) is a miss and is handled
by fallback rendering, never by raising.

Hierarchy:
    LocalizationError (base)
    ├─ MessageSyntaxError (template rejected by the parser)
    ├─ MessageFormatError (compiled message could not render its arguments)
    └─ KeyPollutionError (reserved segment in a lookup key)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import final

from l10ntree.diagnostics import Diagnostic

__all__ = [
    "KeyPollutionError",
    "LocalizationError",
    "MessageFormatError",
    "MessageSyntaxError",
]


class LocalizationError(Exception):
    """Base exception for all l10ntree errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LocalizationError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class MessageSyntaxError(LocalizationError):
    """Template source rejected by the message parser.

    Propagates out of lookups unchanged; no cache entry is written for the
    failing key path, so fixing the source and retrying works.

    Attributes:
        source: The template source that failed to parse
        position: Character offset of the failure
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        source: str = "",
        position: int = 0,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.position = position


class MessageFormatError(LocalizationError):
    """Runtime error while rendering a compiled message.

    Examples:
    - Argument referenced by the message was not provided
    - Non-numeric value passed to a plural or number argument

    Attributes:
        argument_name: Name of the offending argument
    """

    def __init__(self, message: str | Diagnostic, *, argument_name: str = "") -> None:
        super().__init__(message)
        self.argument_name = argument_name


@final
class KeyPollutionError(LocalizationError):
    """Lookup key contains the reserved pollution-guard segment.

    This is a security boundary, not a miss: the key is rejected before any
    cache or template store access and the error must reach the caller.

    Attributes:
        key: The rejected key
    """

    def __init__(self, message: str | Diagnostic, *, key: str = "") -> None:
        super().__init__(message)
        self.key = key

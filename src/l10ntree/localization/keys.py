"""Lookup key splitting and the pollution guard.

Python 3.13+. Zero external dependencies.
"""

from l10ntree.constants import KEY_SEPARATOR, POLLUTION_SENTINEL
from l10ntree.diagnostics import Diagnostic, DiagnosticCode
from l10ntree.errors import KeyPollutionError
from l10ntree.localization.types import KeyPath

__all__ = ["guard_key_path", "split_key"]


def split_key(key: str) -> KeyPath:
    """Split a dotted key into its segments and reject reserved segments.

    Example:
        >>> split_key("settings.title")
        ('settings', 'title')

    Raises:
        KeyPollutionError: If any segment is the reserved sentinel
    """
    path = tuple(key.split(KEY_SEPARATOR))
    guard_key_path(path)
    return path


def guard_key_path(path: KeyPath) -> None:
    """Raise KeyPollutionError if the path contains the reserved sentinel."""
    if POLLUTION_SENTINEL in path:
        key = KEY_SEPARATOR.join(path)
        diagnostic = Diagnostic(
            code=DiagnosticCode.KEY_POLLUTION,
            message=f"Key '{key}' contains reserved segment '{POLLUTION_SENTINEL}'",
            hint="Lookup keys are data paths; never build them from untrusted input",
        )
        raise KeyPollutionError(diagnostic, key=key)

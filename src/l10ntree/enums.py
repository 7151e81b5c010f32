"""Enumerations for l10ntree type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class ArgumentType(StrEnum):
    """Type keyword of a formatted message argument.

    StrEnum provides automatic string conversion: str(ArgumentType.NUMBER) == "number"
    """

    NUMBER = "number"
    """Locale number: {n, number}"""

    DATE = "date"
    """Locale date: {d, date, short}"""

    TIME = "time"
    """Locale time: {t, time}"""

    PLURAL = "plural"
    """Cardinal plural: {n, plural, one {..} other {..}}"""

    SELECTORDINAL = "selectordinal"
    """Ordinal plural: {n, selectordinal, one {#st} other {#th}}"""

    SELECT = "select"
    """Keyword select: {g, select, male {..} other {..}}"""


class DateTimeStyle(StrEnum):
    """CLDR width of a date or time argument.

    Values match Babel's ``format`` keyword for format_date/format_time.
    """

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    FULL = "full"


__all__ = [
    "ArgumentType",
    "DateTimeStyle",
]

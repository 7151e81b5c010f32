"""CLDR plural category selection backed by Babel.

Python 3.13+. Depends on Babel for CLDR data.
"""

from decimal import Decimal

from babel.core import UnknownLocaleError

from l10ntree.locale_utils import get_babel_locale

__all__ = ["select_plural_category"]

_ONE = "one"
_OTHER = "other"


def select_plural_category(
    n: int | float | Decimal, locale: str, *, ordinal: bool = False
) -> str:
    """Map a number to the CLDR category that picks a plural option.

    Args:
        n: Value being pluralized (already offset-adjusted)
        locale: Locale code in BCP-47 or POSIX spelling
        ordinal: Use ordinal rules, as ``selectordinal`` does

    Returns:
        One of "zero", "one", "two", "few", "many", "other"

    Examples:
        >>> select_plural_category(21, "lv")
        'one'
        >>> select_plural_category(3, "en", ordinal=True)
        'few'

    Locales Babel cannot load get the English cardinal rule and a constant
    "other" for ordinals.
    """
    try:
        rules = get_babel_locale(locale)
    except (UnknownLocaleError, ValueError):
        if ordinal:
            return _OTHER
        return _ONE if abs(n) == 1 else _OTHER

    form = rules.ordinal_form if ordinal else rules.plural_form
    return form(n)

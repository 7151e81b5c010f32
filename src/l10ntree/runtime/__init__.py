"""Runtime: compiling parsed messages into locale-bound formatters.

Exports:
    MessageFormatter: Renders one parsed message for one locale
    compile_message: Build a MessageFormatter from a Message and locale
    FormatValue: Type alias for argument values
    LocaleContext: Babel-backed number/date formatting per locale
    select_plural_category: CLDR plural category selection

Python 3.13+.
"""

from .formatter import FormatValue, MessageFormatter, compile_message
from .locale_context import LocaleContext
from .plural_rules import select_plural_category

__all__ = [
    "FormatValue",
    "LocaleContext",
    "MessageFormatter",
    "compile_message",
    "select_plural_category",
]

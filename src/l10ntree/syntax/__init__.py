"""Message syntax: ICU MessageFormat parser and AST.

Exports:
    parse_message: Parse a template string into a Message
    Message, Pattern and the pattern element node types

Python 3.13+. Zero external dependencies.
"""

from .ast import (
    ArgumentElement,
    DateTimeElement,
    Message,
    NumberElement,
    Option,
    Pattern,
    PatternElement,
    PluralElement,
    PoundElement,
    SelectElement,
    TextElement,
)
from .parser import parse_message

__all__ = [
    "ArgumentElement",
    "DateTimeElement",
    "Message",
    "NumberElement",
    "Option",
    "Pattern",
    "PatternElement",
    "PluralElement",
    "PoundElement",
    "SelectElement",
    "TextElement",
    "parse_message",
]

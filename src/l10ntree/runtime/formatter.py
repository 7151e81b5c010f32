"""Compiled message formatter.

Turns a parsed :class:`~l10ntree.syntax.ast.Message` plus a locale into a
reusable :class:`MessageFormatter`. Compilation binds the CLDR data of the
locale once; every ``format()`` call afterwards only walks the AST.

Rendering rules:
    - {name}: strings verbatim, numbers through the locale decimal format
    - {name, number[, style]}: LocaleContext.format_number
    - {name, date|time[, style]}: LocaleContext.format_date / format_time
    - {name, plural|selectordinal, ...}: exact ``=N`` options first, then
      the CLDR category of (value - offset), then ``other``
    - {name, select, ...}: option named by the value, else ``other``
    - #: offset-adjusted plural value in the locale decimal format

Python 3.13+. Uses Babel through LocaleContext and plural_rules.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import NoReturn

from l10ntree.diagnostics import Diagnostic, DiagnosticCode
from l10ntree.enums import ArgumentType
from l10ntree.errors import MessageFormatError
from l10ntree.runtime.locale_context import LocaleContext
from l10ntree.runtime.plural_rules import select_plural_category
from l10ntree.syntax.ast import (
    ArgumentElement,
    DateTimeElement,
    Message,
    NumberElement,
    Option,
    Pattern,
    PluralElement,
    PoundElement,
    SelectElement,
    TextElement,
)

__all__ = ["FormatValue", "MessageFormatter", "compile_message"]

logger = logging.getLogger(__name__)

type FormatValue = str | int | float | Decimal | bool | date | time | None
"""Value accepted for a message argument (datetime is a date subclass)."""

type Number = int | float | Decimal

_OTHER: str = "other"


class MessageFormatter:
    """Locale-bound renderer for one parsed message.

    Instances are immutable after construction and safe to share between
    threads; the localization caches keep exactly one per key path.

    Example:
        >>> from l10ntree.syntax import parse_message
        >>> message = parse_message("{n, plural, one {# file} other {# files}}")
        >>> formatter = compile_message(message, "en")
        >>> formatter.format({"n": 1})
        '1 file'
        >>> formatter.format({"n": 1200})
        '1,200 files'
    """

    __slots__ = ("_context", "_message")

    def __init__(self, message: Message, locale: str) -> None:
        self._message = message
        self._context = LocaleContext.create(locale)

    @property
    def message(self) -> Message:
        """The parsed message this formatter renders."""
        return self._message

    @property
    def locale(self) -> str:
        """Locale code the formatter was compiled for."""
        return self._context.locale_code

    def __repr__(self) -> str:
        return f"MessageFormatter(locale={self.locale!r}, source={self._message.source!r})"

    def format(self, args: Mapping[str, FormatValue] | None = None) -> str:
        """Render the message with the given arguments.

        Args:
            args: Argument values by name

        Returns:
            Rendered text (may be empty)

        Raises:
            MessageFormatError: If a referenced argument is missing or has a
                value the argument type cannot format
        """
        parts: list[str] = []
        self._render(self._message.pattern, args or {}, parts, None)
        return "".join(parts)

    def _render(
        self,
        pattern: Pattern,
        args: Mapping[str, FormatValue],
        parts: list[str],
        pound: Number | None,
    ) -> None:
        ctx = self._context
        for elem in pattern.elements:
            match elem:
                case TextElement(value=text):
                    parts.append(text)
                case ArgumentElement(name=name):
                    parts.append(self._stringify(_lookup(args, name, ctx)))
                case NumberElement(name=name, style=style):
                    number = _to_number(_lookup(args, name, ctx), name, ctx)
                    try:
                        parts.append(ctx.format_number(number, style))
                    except ValueError as e:
                        msg = f"Number style '{style}' of argument '{name}' is invalid: {e}"
                        raise MessageFormatError(msg, argument_name=name) from e
                case DateTimeElement(name=name, type=arg_type, style=style):
                    value = _to_temporal(_lookup(args, name, ctx), name, arg_type, ctx)
                    if arg_type is ArgumentType.DATE:
                        parts.append(ctx.format_date(value, style))  # type: ignore[arg-type]
                    else:
                        parts.append(ctx.format_time(value, style))  # type: ignore[arg-type]
                case PluralElement(name=name):
                    number = _to_number(_lookup(args, name, ctx), name, ctx)
                    option = self._select_plural(elem, number)
                    self._render(option.value, args, parts, number - elem.offset)
                case SelectElement(name=name, options=options):
                    key = _select_key(_lookup(args, name, ctx))
                    self._render(_pick(options, key).value, args, parts, pound)
                case PoundElement():
                    if pound is not None:
                        parts.append(ctx.format_number(pound))
                    else:
                        parts.append("#")

    def _stringify(self, value: FormatValue) -> str:
        match value:
            case None:
                return ""
            case bool():
                return _select_key(value)
            case int() | float() | Decimal():
                return self._context.format_number(value)
            case _:
                return str(value)

    def _select_plural(self, elem: PluralElement, number: Number) -> Option:
        exact = Decimal(str(number))
        for option in elem.options:
            if option.is_exact and Decimal(option.selector[1:]) == exact:
                return option
        category = select_plural_category(
            number - elem.offset, self._context.plural_locale, ordinal=elem.ordinal
        )
        return _pick(elem.options, category)


def compile_message(message: Message, locale: str) -> MessageFormatter:
    """Build a formatter for a parsed message and locale.

    Args:
        message: Parsed message
        locale: Locale code (BCP-47 or POSIX); unknown locales format with
            en_US CLDR data

    Returns:
        Reusable MessageFormatter
    """
    formatter = MessageFormatter(message, locale)
    logger.debug("Compiled message for locale %s: %r", locale, message.source[:50])
    return formatter


def _pick(options: tuple[Option, ...], key: str) -> Option:
    fallback: Option | None = None
    for option in options:
        if option.selector == key:
            return option
        if option.selector == _OTHER:
            fallback = option
    if fallback is None:
        # Parser guarantees an 'other' option; hand-built ASTs may not.
        msg = f"No option matches '{key}' and no '{_OTHER}' option exists"
        raise MessageFormatError(msg)
    return fallback


def _select_key(value: FormatValue) -> str:
    match value:
        case bool():
            return "true" if value else "false"
        case None:
            return ""
        case _:
            return str(value)


def _fail(
    code: DiagnosticCode, message: str, name: str, ctx: LocaleContext
) -> NoReturn:
    diagnostic = Diagnostic(
        code=code, message=message, argument_name=name, locale_code=ctx.locale_code
    )
    raise MessageFormatError(diagnostic, argument_name=name)


def _lookup(args: Mapping[str, FormatValue], name: str, ctx: LocaleContext) -> FormatValue:
    if name not in args:
        _fail(
            DiagnosticCode.ARGUMENT_NOT_PROVIDED,
            f"Argument '{name}' was not provided",
            name,
            ctx,
        )
    return args[name]


def _to_number(value: FormatValue, name: str, ctx: LocaleContext) -> Number:
    """Coerce an argument to a finite number (numeric strings accepted)."""
    match value:
        case bool() | None:
            number: Number | None = None
        case int() | float() | Decimal():
            number = value
        case str():
            try:
                number = Decimal(value.strip())
            except InvalidOperation:
                number = None
        case _:
            number = None

    if number is None or not Decimal(str(number)).is_finite():
        _fail(
            DiagnosticCode.ARGUMENT_NOT_NUMERIC,
            f"Argument '{name}' is not a finite number: {value!r}",
            name,
            ctx,
        )
    return number


def _to_temporal(
    value: FormatValue, name: str, arg_type: ArgumentType, ctx: LocaleContext
) -> date | time:
    """Coerce an argument to a date/datetime/time for date or time formatting.

    Accepts date/datetime/time objects, ISO 8601 strings, and epoch
    millisecond numbers.
    """
    converted: date | time | None
    match value:
        case bool() | None:
            converted = None
        case datetime():
            converted = value
        case date():
            converted = value if arg_type is ArgumentType.DATE else None
        case time():
            converted = value if arg_type is ArgumentType.TIME else None
        case int() | float() | Decimal():
            try:
                converted = LocaleContext.from_timestamp(value)
            except (OverflowError, OSError, ValueError):
                converted = None
        case str():
            try:
                converted = datetime.fromisoformat(value)
            except ValueError:
                converted = None
        case _:
            converted = None

    if converted is None:
        _fail(
            DiagnosticCode.ARGUMENT_NOT_TEMPORAL,
            f"Argument '{name}' cannot be formatted as {arg_type}: {value!r}",
            name,
            ctx,
        )
    return converted

"""ICU MessageFormat parser.

Parses a template string into a :class:`~l10ntree.syntax.ast.Message`.
Every sub-parser takes a :class:`~l10ntree.syntax.cursor.Cursor` and returns
a :class:`~l10ntree.syntax.cursor.ParseResult`; malformed input raises
:class:`~l10ntree.errors.MessageSyntaxError` immediately. There is no
error recovery: a template either parses completely or not at all.

Grammar (informal):
    message  := pattern
    pattern  := (text | '#' | argument)*
    argument := '{' name '}'
              | '{' name ',' ('number' | 'date' | 'time') [',' style] '}'
              | '{' name ',' ('plural' | 'selectordinal') ',' ['offset:' int] option+ '}'
              | '{' name ',' 'select' ',' option+ '}'
    option   := selector '{' pattern '}'

Quoting follows ICU "DOUBLE_OPTIONAL" apostrophe mode: ``''`` is a literal
apostrophe, and an apostrophe directly before a syntax character starts a
quoted literal that ends at the next lone apostrophe.

Security:
    Source size and option nesting depth are bounded (MAX_SOURCE_SIZE,
    MAX_DEPTH) so hostile translation data cannot exhaust memory or stack.
"""

from typing import NoReturn

from l10ntree.constants import MAX_DEPTH, MAX_SOURCE_SIZE
from l10ntree.diagnostics import Diagnostic, DiagnosticCode, SourceSpan
from l10ntree.enums import ArgumentType, DateTimeStyle
from l10ntree.errors import MessageSyntaxError
from l10ntree.syntax.ast import (
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
from l10ntree.syntax.cursor import Cursor, ParseResult

__all__ = ["parse_message"]

# Characters that terminate an argument name or selector token.
_NAME_STOP: frozenset[str] = frozenset("{},#' \t\n\r")

# CLDR plural categories accepted as plural/selectordinal selectors.
_PLURAL_CATEGORIES: frozenset[str] = frozenset(
    ("zero", "one", "two", "few", "many", "other")
)

_OTHER: str = "other"


def parse_message(source: str) -> Message:
    """Parse a template string into a Message AST.

    Args:
        source: ICU MessageFormat template

    Returns:
        Parsed message

    Raises:
        MessageSyntaxError: If the template is malformed or too large

    Example:
        >>> message = parse_message("Hello, {name}!")
        >>> message.pattern.elements[1]
        ArgumentElement(name='name')
    """
    if len(source) > MAX_SOURCE_SIZE:
        diagnostic = Diagnostic(
            code=DiagnosticCode.SOURCE_TOO_LARGE,
            message=f"Template of {len(source)} characters exceeds limit of {MAX_SOURCE_SIZE}",
        )
        raise MessageSyntaxError(diagnostic, source=source, position=0)

    result = _parse_pattern(Cursor(source, 0), depth=0, in_plural=False, nested=False)
    return Message(pattern=result.value, source=source)


def _fail(
    cursor: Cursor, code: DiagnosticCode, message: str, hint: str | None = None
) -> NoReturn:
    line, column = cursor.compute_line_col()
    diagnostic = Diagnostic(
        code=code,
        message=message,
        span=SourceSpan(start=cursor.pos, end=cursor.pos, line=line, column=column),
        hint=hint,
    )
    raise MessageSyntaxError(diagnostic, source=cursor.source, position=cursor.pos)


def _require(cursor: Cursor, char: str) -> Cursor:
    """Consume ``char`` or fail with an EOF/unexpected-character error."""
    if cursor.is_eof:
        _fail(
            cursor,
            DiagnosticCode.UNEXPECTED_EOF,
            f"Expected '{char}' but reached end of template",
        )
    advanced = cursor.expect(char)
    if advanced is None:
        _fail(
            cursor,
            DiagnosticCode.UNEXPECTED_CHARACTER,
            f"Expected '{char}' but found '{cursor.current}'",
        )
    return advanced


def _parse_pattern(
    cursor: Cursor, *, depth: int, in_plural: bool, nested: bool
) -> ParseResult[Pattern]:
    """Parse elements until EOF (top level) or the closing '}' (nested).

    The closing brace is left for the caller to consume.
    """
    elements: list[PatternElement] = []
    text: list[str] = []

    def flush() -> None:
        if text:
            elements.append(TextElement("".join(text)))
            text.clear()

    while not cursor.is_eof:
        char = cursor.current
        if char == "{":
            flush()
            argument = _parse_argument(cursor, depth=depth + 1, in_plural=in_plural)
            elements.append(argument.value)
            cursor = argument.cursor
        elif char == "}":
            if nested:
                break
            _fail(
                cursor,
                DiagnosticCode.UNEXPECTED_CHARACTER,
                "Unmatched '}'",
                hint="Quote literal braces as '}'",
            )
        elif char == "#" and in_plural:
            flush()
            elements.append(PoundElement())
            cursor = cursor.advance()
        elif char == "'":
            quoted = _parse_apostrophe(cursor, in_plural=in_plural)
            text.append(quoted.value)
            cursor = quoted.cursor
        else:
            text.append(char)
            cursor = cursor.advance()

    if nested and cursor.is_eof:
        _fail(cursor, DiagnosticCode.UNEXPECTED_EOF, "Unclosed option body, expected '}'")

    flush()
    return ParseResult(Pattern(tuple(elements)), cursor)


def _parse_apostrophe(cursor: Cursor, *, in_plural: bool) -> ParseResult[str]:
    """Resolve an apostrophe at the cursor into literal text.

    Example:
        "''"       -> "'"
        "'{x}'"    -> "{x}"
        "don't"    -> "don't" (apostrophe before a plain letter is literal)
    """
    following = cursor.peek(1)
    if following == "'":
        return ParseResult("'", cursor.advance(2))

    syntax = "{}#" if in_plural else "{}"
    if following is None or following not in syntax:
        return ParseResult("'", cursor.advance())

    # Quoted literal: runs to the next lone apostrophe (or end of template).
    cursor = cursor.advance()
    chars: list[str] = []
    while not cursor.is_eof:
        if cursor.current == "'":
            if cursor.peek(1) == "'":
                chars.append("'")
                cursor = cursor.advance(2)
                continue
            cursor = cursor.advance()
            break
        chars.append(cursor.current)
        cursor = cursor.advance()
    return ParseResult("".join(chars), cursor)


def _parse_token(cursor: Cursor) -> ParseResult[str]:
    """Read a name-like token (argument name, type keyword, selector)."""
    start = cursor
    while not cursor.is_eof and cursor.current not in _NAME_STOP:
        cursor = cursor.advance()
    return ParseResult(start.slice_to(cursor.pos), cursor)


def _parse_argument(
    cursor: Cursor, *, depth: int, in_plural: bool
) -> ParseResult[PatternElement]:
    """Parse ``{name ...}`` starting at the opening brace."""
    if depth > MAX_DEPTH:
        _fail(
            cursor,
            DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            f"Arguments nested deeper than {MAX_DEPTH} levels",
        )

    cursor = cursor.advance().skip_whitespace()
    name_result = _parse_token(cursor)
    name = name_result.value
    if not name:
        if cursor.is_eof:
            _fail(cursor, DiagnosticCode.UNEXPECTED_EOF, "Unclosed argument, expected a name")
        _fail(
            cursor,
            DiagnosticCode.INVALID_ARGUMENT_NAME,
            f"Expected argument name but found '{cursor.current}'",
        )
    cursor = name_result.cursor.skip_whitespace()

    if not cursor.is_eof and cursor.current == "}":
        return ParseResult(ArgumentElement(name), cursor.advance())

    cursor = _require(cursor, ",").skip_whitespace()
    keyword = _parse_token(cursor)
    try:
        arg_type = ArgumentType(keyword.value)
    except ValueError:
        _fail(
            cursor,
            DiagnosticCode.INVALID_ARGUMENT_TYPE,
            f"Unknown argument type '{keyword.value}'",
            hint="Use number, date, time, plural, selectordinal or select",
        )
    cursor = keyword.cursor.skip_whitespace()

    match arg_type:
        case ArgumentType.NUMBER | ArgumentType.DATE | ArgumentType.TIME:
            return _parse_simple_format(cursor, name, arg_type)
        case ArgumentType.PLURAL | ArgumentType.SELECTORDINAL:
            return _parse_plural(
                cursor, name, ordinal=arg_type is ArgumentType.SELECTORDINAL, depth=depth
            )
        case ArgumentType.SELECT:
            cursor = _require(cursor, ",")
            options = _parse_options(cursor, name, plural=False, depth=depth, in_plural=in_plural)
            return ParseResult(SelectElement(name, options.value), options.cursor)


def _parse_simple_format(
    cursor: Cursor, name: str, arg_type: ArgumentType
) -> ParseResult[PatternElement]:
    """Parse the optional style of a number/date/time argument."""
    style: str | None = None
    if not cursor.is_eof and cursor.current == ",":
        cursor = cursor.advance()
        start = cursor
        while not cursor.is_eof and cursor.current != "}":
            cursor = cursor.advance()
        style = start.slice_to(cursor.pos).strip()
        if not style:
            _fail(
                start,
                DiagnosticCode.INVALID_ARGUMENT_STYLE,
                f"Empty style for argument '{name}'",
            )
    cursor = _require(cursor, "}")

    if arg_type is ArgumentType.NUMBER:
        return ParseResult(NumberElement(name, style), cursor)

    if style is None:
        return ParseResult(DateTimeElement(name, arg_type), cursor)
    try:
        width = DateTimeStyle(style)
    except ValueError:
        _fail(
            cursor,
            DiagnosticCode.INVALID_ARGUMENT_STYLE,
            f"Unknown {arg_type} style '{style}'",
            hint="Use short, medium, long or full",
        )
    return ParseResult(DateTimeElement(name, arg_type, width), cursor)


def _parse_plural(
    cursor: Cursor, name: str, *, ordinal: bool, depth: int
) -> ParseResult[PatternElement]:
    cursor = _require(cursor, ",").skip_whitespace()

    offset = 0
    if cursor.source.startswith("offset:", cursor.pos):
        cursor = cursor.advance(len("offset:")).skip_whitespace()
        start = cursor
        while not cursor.is_eof and cursor.current.isascii() and cursor.current.isdigit():
            cursor = cursor.advance()
        digits = start.slice_to(cursor.pos)
        if not digits:
            _fail(
                start, DiagnosticCode.INVALID_OFFSET, "Plural offset must be a non-negative integer"
            )
        offset = int(digits)

    options = _parse_options(cursor, name, plural=True, depth=depth, in_plural=True)
    element = PluralElement(name, options.value, offset=offset, ordinal=ordinal)
    return ParseResult(element, options.cursor)


def _parse_options(
    cursor: Cursor, name: str, *, plural: bool, depth: int, in_plural: bool
) -> ParseResult[tuple[Option, ...]]:
    """Parse ``selector {pattern}`` pairs up to and including the closing '}'."""
    options: list[Option] = []
    seen: set[str] = set()

    while True:
        cursor = cursor.skip_whitespace()
        if cursor.is_eof:
            _fail(cursor, DiagnosticCode.UNEXPECTED_EOF, f"Unclosed argument '{name}'")
        if cursor.current == "}":
            cursor = cursor.advance()
            break

        selector_start = cursor
        selector = _parse_selector(cursor, plural=plural)
        if selector.value in seen:
            _fail(
                selector_start,
                DiagnosticCode.DUPLICATE_SELECTOR,
                f"Duplicate option '{selector.value}' in argument '{name}'",
            )
        seen.add(selector.value)

        cursor = _require(selector.cursor.skip_whitespace(), "{")
        body = _parse_pattern(cursor, depth=depth, in_plural=in_plural, nested=True)
        cursor = _require(body.cursor, "}")
        options.append(Option(selector.value, body.value))

    if _OTHER not in seen:
        _fail(
            cursor,
            DiagnosticCode.MISSING_OTHER_CLAUSE,
            f"Argument '{name}' has no '{_OTHER}' option",
            hint="Add an 'other {...}' option",
        )
    return ParseResult(tuple(options), cursor)


def _parse_selector(cursor: Cursor, *, plural: bool) -> ParseResult[str]:
    if plural and cursor.current == "=":
        start = cursor
        cursor = cursor.advance()
        token = _parse_token(cursor)
        if not _is_number(token.value):
            _fail(
                cursor,
                DiagnosticCode.INVALID_SELECTOR,
                f"Exact selector must be a number, got '={token.value}'",
            )
        return ParseResult(start.slice_to(token.cursor.pos), token.cursor)

    token = _parse_token(cursor)
    if not token.value:
        _fail(
            cursor,
            DiagnosticCode.INVALID_SELECTOR,
            f"Expected option selector but found '{cursor.current}'",
        )
    if plural and token.value not in _PLURAL_CATEGORIES:
        _fail(
            cursor,
            DiagnosticCode.INVALID_SELECTOR,
            f"Unknown plural category '{token.value}'",
            hint="Use zero, one, two, few, many, other or =N",
        )
    return ParseResult(token.value, token.cursor)


def _is_number(text: str) -> bool:
    """Check an exact-selector body: optional '-', digits, optional fraction."""
    integer, _, fraction = text.removeprefix("-").partition(".")
    return (
        integer.isascii()
        and integer.isdigit()
        and (not fraction or (fraction.isascii() and fraction.isdigit()))
    )

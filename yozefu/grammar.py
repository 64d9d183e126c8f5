"""Building blocks of the search query grammar.

Every parser takes the text to parse and returns a pair made of the text that
is left and the value that was read. A parser that cannot read its input
raises :class:`ParseFailure`.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, TypeVar

from .operators import NumberOperator, StringOperator

T = TypeVar("T")
Parser = Callable[[str], tuple[str, T]]

_USIZE_MAX = 2**64 - 1
_I64_MAX = 2**63 - 1


class ParseFailure(ValueError):
    """The input does not match the grammar; ``remaining`` is where it failed."""

    def __init__(self, remaining: str, message: str = "") -> None:
        super().__init__(message or f"unexpected input at {remaining!r}")
        self.remaining = remaining


class SymbolKind(Enum):
    """Attributes of a record that a query can refer to."""

    OFFSET = "Offset"
    TOPIC = "Topic"
    PARTITION = "Partition"
    OFFSET_TAIL = "OffsetTail"
    KEY = "Key"
    SIZE = "Size"
    TIMESTAMP = "Timestamp"
    VALUE = "Value"
    HEADER = "Header"


@dataclass(frozen=True)
class Symbol:
    """A built-in variable; values carry an optional path, headers a name."""

    kind: SymbolKind
    path: str | None = None


def _tag(literal: str, ignore_case: bool = False) -> Parser[str]:
    size = len(literal)
    folded = literal.lower()

    def parse(text: str) -> tuple[str, str]:
        head = text[:size]
        matches = head.lower() == folded if ignore_case else head == literal
        if len(head) == size and matches:
            return text[size:], head
        raise ParseFailure(text)

    return parse


def _alt(*parsers: Parser) -> Parser:
    def parse(text: str):
        failure: ParseFailure | None = None
        for parser in parsers:
            try:
                return parser(text)
            except ParseFailure as error:
                failure = error
        raise failure if failure is not None else ParseFailure(text)

    return parse


_WHITESPACE = re.compile(r"(?:\\\r?\n|\r?\n|[ \t]+)*")


def skip_whitespace(text: str) -> str:
    """Drop leading spaces, tabs, line endings and backslash-newlines."""
    return text[_WHITESPACE.match(text).end():]


def wsi(parser: Parser[T]) -> Parser[T]:
    """Wrap ``parser`` so that leading whitespace is skipped first."""

    def parse(text: str) -> tuple[str, T]:
        return parser(skip_whitespace(text))

    return parse


def parse_string(text: str) -> tuple[str, str]:
    """A string between double or single quotes."""
    for quote in ('"', "'"):
        if text.startswith(quote):
            end = text.find(quote, 1)
            if end == -1:
                break
            return text[end + 1:], text[1:end]
    raise ParseFailure(text)


_UNSIGNED = re.compile(r"[0-9]+(?:_[0-9]+)*")


def parse_unsigned_number_as_string(text: str) -> tuple[str, str]:
    """Digits, possibly grouped with '_' for readability."""
    match = _UNSIGNED.match(text)
    if match is None:
        raise ParseFailure(text)
    return text[match.end():], match.group()


def parse_unsigned_number(text: str) -> tuple[str, int]:
    rest, digits = parse_unsigned_number_as_string(text)
    value = int(digits.replace("_", ""))
    if value > _USIZE_MAX:
        raise ParseFailure(text, f"number too large: {digits}")
    return rest, value


def parse_number(text: str) -> tuple[str, int]:
    """A signed 64-bit number, possibly grouped with '_'."""
    negative = text.startswith("-")
    rest, digits = parse_unsigned_number_as_string(text[1:] if negative else text)
    value = int(digits.replace("_", ""))
    if value > _I64_MAX:
        raise ParseFailure(text, f"number too large: {digits}")
    return rest, -value if negative else value


_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))",
    re.ASCII,
)


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"not an RFC 3339 date time: {text}")
    year, month, day, hour, minute, second = (int(g) for g in match.group(1, 2, 3, 4, 5, 6))
    micro = int((match.group(7) or "0")[:6].ljust(6, "0"))
    if match.group(8):
        tz = timezone.utc
    else:
        offset = timedelta(hours=int(match.group(10)), minutes=int(match.group(11)))
        tz = timezone(-offset if match.group(9) == "-" else offset)
    return datetime(year, month, day, hour, minute, min(second, 59), micro, tzinfo=tz)


_UNITS = {
    "s": "second", "sec": "second", "second": "second",
    "min": "minute", "minute": "minute",
    "h": "hour", "hr": "hour", "hour": "hour",
    "d": "day", "day": "day",
    "w": "week", "week": "week",
    "month": "month",
    "y": "year", "yr": "year", "year": "year",
}
_AGO = re.compile(r"(\d+|an?) ([a-z]+) ago")
_IN = re.compile(r"in (\d+|an?) ([a-z]+)")
_FROM_NOW = re.compile(r"(\d+|an?) ([a-z]+) (?:from now|later)")
_DATE = re.compile(
    r"(\d{4})-(\d{1,2})-(\d{1,2})(?:[ t](\d{1,2}):(\d{2})(?::(\d{2}))?)?", re.ASCII
)


def _unit(word: str) -> str:
    if word in _UNITS:
        return _UNITS[word]
    if word.endswith("s") and word[:-1] in _UNITS:
        return _UNITS[word[:-1]]
    raise ValueError(f"unknown time unit: {word}")


def _amount(word: str) -> int:
    return 1 if word in ("a", "an") else int(word)


def _shift(base: datetime, amount: int, unit: str) -> datetime:
    try:
        if unit in ("month", "year"):
            months = amount * 12 if unit == "year" else amount
            year, month = divmod(base.year * 12 + base.month - 1 + months, 12)
            month += 1
            if not 1 <= year <= 9999:
                raise ValueError("year out of range")
            day = min(base.day, calendar.monthrange(year, month)[1])
            return base.replace(year=year, month=month, day=day)
        return base + timedelta(**{f"{unit}s": amount})
    except OverflowError as error:
        raise ValueError(str(error)) from error


def parse_fuzzy_date(text: str, now: datetime | None = None) -> datetime:
    """A naive date time from phrases such as '3 hours ago', 'yesterday' or '2024-01-05'."""
    base = now if now is not None else datetime.now()
    phrase = " ".join(text.lower().split())
    midnight = base.replace(hour=0, minute=0, second=0, microsecond=0)
    fixed = {
        "now": base,
        "today": midnight,
        "midnight": midnight,
        "noon": midnight.replace(hour=12),
        "yesterday": midnight - timedelta(days=1),
        "tomorrow": midnight + timedelta(days=1),
    }
    if phrase in fixed:
        return fixed[phrase]
    if match := _AGO.fullmatch(phrase):
        return _shift(base, -_amount(match.group(1)), _unit(match.group(2)))
    if match := _IN.fullmatch(phrase) or _FROM_NOW.fullmatch(phrase):
        return _shift(base, _amount(match.group(1)), _unit(match.group(2)))
    if match := _DATE.fullmatch(phrase):
        parts = [int(g) if g is not None else 0 for g in match.groups()]
        return datetime(*parts)
    raise ValueError(f"cannot understand the date '{text}'")


def parse_timestamp(text: str) -> tuple[str, datetime]:
    """A quoted RFC 3339 or fuzzy date, or the keyword 'now', in local time."""
    try:
        rest, content = parse_string(text)
    except ParseFailure:
        pass
    else:
        try:
            return rest, _parse_rfc3339(content).astimezone()
        except (ValueError, OverflowError, OSError):
            pass
        try:
            return rest, parse_fuzzy_date(content).astimezone()
        except (ValueError, OverflowError, OSError):
            pass
    rest, _ = wsi(_tag("now", ignore_case=True))(text)
    return rest, datetime.now().astimezone()


def _symbol(text: str, kind: SymbolKind, *names: str) -> tuple[str, Symbol]:
    rest, _ = wsi(_alt(*(_tag(name) for name in names)))(text)
    return rest, Symbol(kind)


def parse_offset(text: str) -> tuple[str, Symbol]:
    return _symbol(text, SymbolKind.OFFSET, "offset", "o")


def parse_size(text: str) -> tuple[str, Symbol]:
    return _symbol(text, SymbolKind.SIZE, "size", "si")


def parse_partition(text: str) -> tuple[str, Symbol]:
    return _symbol(text, SymbolKind.PARTITION, "partition", "p")


def parse_value(text: str) -> tuple[str, Symbol]:
    return _symbol(text, SymbolKind.VALUE, "value", "v")


def parse_topic(text: str) -> tuple[str, Symbol]:
    return _symbol(text, SymbolKind.TOPIC, "topic", "t")


def parse_key(text: str) -> tuple[str, Symbol]:
    return _symbol(text, SymbolKind.KEY, "key", "k")


def parse_timestamp_symbol(text: str) -> tuple[str, Symbol]:
    return _symbol(text, SymbolKind.TIMESTAMP, "timestamp", "ts")


def parse_json_path(text: str) -> tuple[str, str]:
    """Everything up to the next space; it must not be empty."""
    end = text.find(" ")
    end = len(text) if end == -1 else end
    if end == 0:
        raise ParseFailure(text)
    return text[end:], text[:end]


def parse_value_symbol(text: str) -> tuple[str, tuple[Symbol, str | None]]:
    """The value symbol followed by an optional path into the value."""
    rest, _ = wsi(_alt(_tag("value"), _tag("v")))(text)
    try:
        rest, path = parse_json_path(rest)
    except ParseFailure:
        path = None
    return rest, (Symbol(SymbolKind.VALUE, path), path)


def parse_header_symbol(text: str) -> tuple[str, tuple[Symbol, str]]:
    """The headers symbol followed by the name of a header."""
    rest, _ = _alt(wsi(_tag("headers")), wsi(_tag("h")))(text)
    rest, path = parse_json_path(rest)
    name = path.replace(".", "")
    return rest, (Symbol(SymbolKind.HEADER, name), name)


def parse_end_keyword(text: str) -> tuple[str, None]:
    rest, _ = wsi(_alt(_tag("end", True), _tag("now", True)))(text)
    return rest, None


def parse_equal(text: str) -> tuple[str, str]:
    """The equal operator, '==' or '='."""
    return wsi(_alt(_tag("=="), _tag("=")))(text)


def _operator(value: T, parser: Parser) -> Parser[T]:
    def parse(text: str) -> tuple[str, T]:
        rest, _ = parser(text)
        return rest, value

    return parse


_NUMBER_OPERATOR = _alt(
    _operator(NumberOperator.GREATER_OR_EQUAL, wsi(_tag(">="))),
    _operator(NumberOperator.LOWER_OR_EQUAL, wsi(_tag("<="))),
    _operator(NumberOperator.GREATER_THAN, wsi(_tag(">"))),
    _operator(NumberOperator.LOWER_THAN, wsi(_tag("<"))),
    _operator(NumberOperator.EQUAL, parse_equal),
    _operator(NumberOperator.NOT_EQUAL, wsi(_tag("!="))),
)


def _pair(first: Parser, second: Parser) -> Parser:
    def parse(text: str):
        rest, left = first(text)
        rest, right = second(rest)
        return rest, (left, right)

    return parse


_STRING_OPERATOR = _alt(
    _operator(StringOperator.CONTAIN, wsi(_alt(_tag("~="), _tag("=~")))),
    _operator(
        StringOperator.CONTAIN,
        wsi(
            _alt(
                _tag("contains", True),
                _tag("c", True),
                _tag("contain", True),
                _tag("include", True),
                _tag("includes", True),
            )
        ),
    ),
    _operator(
        StringOperator.START_WITH,
        wsi(
            _pair(
                wsi(_alt(_tag("starts", True), _tag("start", True))),
                wsi(_tag("with", True)),
            )
        ),
    ),
    _operator(StringOperator.EQUAL, parse_equal),
    _operator(StringOperator.NOT_EQUAL, wsi(_tag("!="))),
)


def parse_number_operator(text: str) -> tuple[str, NumberOperator]:
    return _NUMBER_OPERATOR(text)


def parse_string_operator(text: str) -> tuple[str, StringOperator]:
    return _STRING_OPERATOR(text)
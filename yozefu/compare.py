"""Comparison expressions such as ``offset != 234`` or ``key == "my-key"``."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from .grammar import (
    ParseFailure,
    parse_equal,
    parse_header_symbol,
    parse_key,
    parse_number,
    parse_number_operator,
    parse_offset,
    parse_partition,
    parse_size,
    parse_string,
    parse_string_operator,
    parse_timestamp,
    parse_timestamp_symbol,
    parse_topic,
    parse_value_symbol,
    skip_whitespace,
    wsi,
)
from .operators import NumberOperator, StringOperator


class CompareKind(Enum):
    """The attribute of a record a comparison is about."""

    PARTITION = "partition"
    OFFSET_TAIL = "offset_tail"
    OFFSET = "offset"
    TOPIC = "topic"
    KEY = "key"
    VALUE = "value"
    HEADER = "header"
    SIZE = "size"
    TIMESTAMP = "timestamp"
    TIMESTAMP_BETWEEN = "timestamp_between"


def _to_i32(number: int) -> int:
    return (number + 2**31) % 2**32 - 2**31


def _millis(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds")


@dataclass(frozen=True)
class CompareExpression:
    """A comparison between an attribute of a record and a constant.

    ``value`` is the right operand; ``path`` is the path into the value or the
    name of the header; ``until`` is the upper bound of a 'between' comparison,
    whose lower bound is ``value``.
    """

    kind: CompareKind
    operator: NumberOperator | StringOperator | None = None
    value: int | str | datetime | None = None
    path: str | None = None
    until: datetime | None = None

    def __str__(self) -> str:
        op, right = self.operator, self.value
        match self.kind:
            case CompareKind.PARTITION:
                return f"partition {op} {right}"
            case CompareKind.OFFSET_TAIL:
                return f"offsetTail - {right}"
            case CompareKind.OFFSET:
                return f"offset {op} {right}"
            case CompareKind.TOPIC:
                return f"topic {op} {right}"
            case CompareKind.KEY:
                return f"key {op} {right}"
            case CompareKind.VALUE:
                return f"value{self.path or ''} {op} {right}"
            case CompareKind.HEADER:
                return f"headers.{self.path} {op} {right}"
            case CompareKind.SIZE:
                return f"size {op} {right}"
            case CompareKind.TIMESTAMP:
                return f'timestamp {op} "{_millis(right)}"'
            case CompareKind.TIMESTAMP_BETWEEN:
                return f'timestamp between "{_millis(right)}" and "{_millis(self.until)}'
        raise AssertionError(self.kind)


def _keyword(text: str, word: str, ignore_case: bool = True) -> str:
    rest = skip_whitespace(text)
    head = rest[: len(word)]
    if (head.lower() == word.lower()) if ignore_case else (head == word):
        return rest[len(word):]
    raise ParseFailure(rest)


def _number_compare(symbol: Callable, kind: CompareKind) -> Callable:
    def parse(text: str) -> tuple[str, CompareExpression]:
        rest, _ = symbol(text)
        rest, op = parse_number_operator(rest)
        rest, number = wsi(parse_number)(rest)
        if kind is CompareKind.PARTITION:
            number = _to_i32(number)
        return rest, CompareExpression(kind, op, number)

    return parse


def _string_compare(symbol: Callable, kind: CompareKind) -> Callable:
    def parse(text: str) -> tuple[str, CompareExpression]:
        rest, _ = symbol(text)
        rest, op = parse_string_operator(rest)
        rest, right = wsi(parse_string)(rest)
        return rest, CompareExpression(kind, op, right)

    return parse


def _offset_tail(text: str) -> tuple[str, CompareExpression]:
    rest = _keyword(text, "offsetTail", ignore_case=False)
    rest, _ = parse_equal(rest)
    rest, number = wsi(parse_number)(rest)
    return rest, CompareExpression(CompareKind.OFFSET_TAIL, None, number)


def _value(text: str) -> tuple[str, CompareExpression]:
    rest, (_, path) = parse_value_symbol(text)
    rest, op = parse_string_operator(rest)
    rest, right = wsi(parse_string)(rest)
    return rest, CompareExpression(CompareKind.VALUE, op, right, path)


def _header(text: str) -> tuple[str, CompareExpression]:
    rest, (_, name) = parse_header_symbol(text)
    rest, op = parse_string_operator(rest)
    rest, right = wsi(parse_string)(rest)
    return rest, CompareExpression(CompareKind.HEADER, op, right, name)


def _timestamp(text: str) -> tuple[str, CompareExpression]:
    rest, _ = parse_timestamp_symbol(text)
    rest, op = parse_number_operator(rest)
    rest, moment = wsi(parse_timestamp)(rest)
    return rest, CompareExpression(CompareKind.TIMESTAMP, op, moment)


def _timestamp_between(text: str) -> tuple[str, CompareExpression]:
    rest, _ = parse_timestamp_symbol(text)
    rest = _keyword(rest, "between")
    rest, start = wsi(parse_timestamp)(rest)
    rest = _keyword(rest, "and")
    rest, end = wsi(parse_timestamp)(rest)
    return rest, CompareExpression(CompareKind.TIMESTAMP_BETWEEN, None, start, until=end)


_BRANCHES = (
    _number_compare(parse_offset, CompareKind.OFFSET),
    _number_compare(parse_size, CompareKind.SIZE),
    _offset_tail,
    _number_compare(parse_partition, CompareKind.PARTITION),
    _string_compare(parse_topic, CompareKind.TOPIC),
    _string_compare(parse_key, CompareKind.KEY),
    _value,
    _header,
    _timestamp,
    _timestamp_between,
)


def parse_compare(text: str) -> tuple[str, CompareExpression]:
    """Parse a comparison between an attribute of a record and a constant."""
    failure = ParseFailure(text)
    for branch in _BRANCHES:
        try:
            return branch(text)
        except ParseFailure as error:
            failure = error
    raise failure
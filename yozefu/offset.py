"""Where the consumer starts reading records: the 'from' clause."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable

from .grammar import (
    ParseFailure,
    parse_end_keyword,
    parse_equal,
    parse_number,
    parse_offset,
    parse_timestamp,
    skip_whitespace,
    wsi,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class OffsetKind(Enum):
    """The ways a starting offset can be given."""

    BEGINNING = "beginning"
    END = "end"
    OFFSET = "offset"
    OFFSET_TAIL = "offset_tail"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class FromOffset:
    """A starting point: an offset, an offset from the end, or a timestamp in ms."""

    kind: OffsetKind
    value: int | None = None

    def __str__(self) -> str:
        match self.kind:
            case OffsetKind.BEGINNING:
                return "beginning"
            case OffsetKind.END:
                return "end"
            case OffsetKind.OFFSET:
                return str(self.value)
            case OffsetKind.OFFSET_TAIL:
                return f"end - {self.value}"
        return ""


def _timestamp(text: str) -> tuple[str, FromOffset]:
    rest, moment = wsi(parse_timestamp)(text)
    millis = (moment - _EPOCH) // timedelta(milliseconds=1)
    return rest, FromOffset(OffsetKind.TIMESTAMP, millis)


def _beginning(text: str) -> tuple[str, FromOffset]:
    rest = skip_whitespace(text)
    if rest.startswith("beginning"):
        return rest[len("beginning"):], FromOffset(OffsetKind.BEGINNING)
    if rest[:5].lower() == "begin":
        return rest[5:], FromOffset(OffsetKind.BEGINNING)
    raise ParseFailure(rest)


def _offset_equal(text: str) -> tuple[str, FromOffset]:
    rest, _ = parse_offset(text)
    rest, _ = parse_equal(rest)
    rest, number = wsi(parse_number)(rest)
    return rest, FromOffset(OffsetKind.OFFSET, number)


def _number(text: str) -> tuple[str, FromOffset]:
    rest, number = wsi(parse_number)(text)
    return rest, FromOffset(OffsetKind.OFFSET, number)


def _tail(text: str) -> tuple[str, FromOffset]:
    rest, _ = parse_end_keyword(text)
    rest = skip_whitespace(rest)
    if not rest.startswith("-"):
        raise ParseFailure(rest)
    rest, number = wsi(parse_number)(rest[1:])
    return rest, FromOffset(OffsetKind.OFFSET_TAIL, number)


def _end(text: str) -> tuple[str, FromOffset]:
    rest, _ = parse_end_keyword(text)
    return rest, FromOffset(OffsetKind.END)


_BRANCHES: tuple[Callable[[str], tuple[str, FromOffset]], ...] = (
    _timestamp,
    _beginning,
    _offset_equal,
    _number,
    _tail,
    _end,
)


def parse_from_offset(text: str) -> tuple[str, FromOffset]:
    """Parse 'from begin', 'from end', 'from end - 10', 'from 42' or 'from "3 hours ago"'."""
    rest = skip_whitespace(text)
    if rest[:4].lower() != "from":
        raise ParseFailure(rest)
    rest = rest[4:]
    failure = ParseFailure(rest)
    for branch in _BRANCHES:
        try:
            return branch(rest)
        except ParseFailure as error:
            failure = error
    raise failure
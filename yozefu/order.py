"""Ordering of records in the user interface: the 'order by' clause."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .grammar import (
    ParseFailure,
    SymbolKind,
    parse_key,
    parse_offset,
    parse_partition,
    parse_size,
    parse_timestamp_symbol,
    parse_topic,
    parse_value,
    skip_whitespace,
)


class Order(Enum):
    """Fields records can be ordered by."""

    TIMESTAMP = "timestamp"
    KEY = "key"
    VALUE = "value"
    PARTITION = "partition"
    OFFSET = "offset"
    SIZE = "size"
    TOPIC = "topic"

    def __str__(self) -> str:
        return self.value


class OrderKeyword(Enum):
    """Direction of the ordering."""

    DESC = "desc"
    ASC = "asc"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OrderBy:
    """A field and a direction, as in 'order by key desc'."""

    order: Order = Order.TIMESTAMP
    keyword: OrderKeyword = OrderKeyword.ASC

    def is_descending(self) -> bool:
        return self.keyword is OrderKeyword.DESC

    def __str__(self) -> str:
        return f"order by {self.order} {self.keyword}"


_SYMBOL_PARSERS = (
    parse_size,
    parse_timestamp_symbol,
    parse_offset,
    parse_key,
    parse_value,
    parse_topic,
    parse_partition,
)

_ORDERS = {
    SymbolKind.OFFSET: Order.OFFSET,
    SymbolKind.KEY: Order.KEY,
    SymbolKind.TOPIC: Order.TOPIC,
    SymbolKind.VALUE: Order.VALUE,
    SymbolKind.PARTITION: Order.PARTITION,
    SymbolKind.SIZE: Order.SIZE,
    SymbolKind.TIMESTAMP: Order.TIMESTAMP,
}


def parse_order(text: str) -> tuple[str, Order]:
    """The field to order by."""
    start = skip_whitespace(text)
    failure = ParseFailure(start)
    for parser in _SYMBOL_PARSERS:
        try:
            rest, symbol = parser(start)
        except ParseFailure as error:
            failure = error
            continue
        return rest, _ORDERS[symbol.kind]
    raise failure


def parse_order_keyword(text: str) -> tuple[str, OrderKeyword]:
    """'asc' or 'desc'."""
    rest = skip_whitespace(text)
    for keyword in (OrderKeyword.ASC, OrderKeyword.DESC):
        if rest.startswith(keyword.value):
            return rest[len(keyword.value):], keyword
    raise ParseFailure(rest)
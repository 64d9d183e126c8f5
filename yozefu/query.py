"""Search queries: an expression with optional 'from', 'limit' and 'order by' clauses."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable

from .errors import SearchParseError
from .expression import OrExpression, parse_or_expression
from .grammar import ParseFailure, parse_unsigned_number, skip_whitespace, wsi
from .offset import FromOffset, parse_from_offset
from .order import OrderBy, OrderKeyword, parse_order, parse_order_keyword

_Clause = Callable[[str], tuple[str, dict[str, Any]]]


@dataclass(frozen=True)
class SearchQuery:
    """An expression, a limit, a starting offset and an ordering."""

    expression: OrExpression = field(default_factory=OrExpression)
    limit: int | None = None
    from_: FromOffset | None = None
    order_by: OrderBy = field(default_factory=OrderBy)

    def is_empty(self) -> bool:
        """True when the query neither filters, limits nor moves the start."""
        return self.limit is None and self.from_ is None and self.expression.is_empty()

    def __str__(self) -> str:
        clauses = [
            f"from {self.from_}" if self.from_ is not None else "",
            str(self.expression),
            str(self.order_by),
            f"limit {self.limit}" if self.limit is not None else "",
        ]
        return " ".join(clause for clause in clauses if clause)


def _keyword(text: str, word: str) -> str:
    rest = skip_whitespace(text)
    if rest[: len(word)].lower() == word:
        return rest[len(word):]
    raise ParseFailure(rest)


def _from_clause(text: str) -> tuple[str, dict[str, Any]]:
    rest, offset = parse_from_offset(text)
    return rest, {"from_": offset}


def _limit_clause(text: str) -> tuple[str, dict[str, Any]]:
    rest = _keyword(text, "limit")
    rest, limit = wsi(parse_unsigned_number)(rest)
    return rest, {"limit": limit}


def _expression_clause(text: str) -> tuple[str, dict[str, Any]]:
    try:
        rest = _keyword(text, "where")
    except ParseFailure:
        rest = text
    rest, expression = wsi(parse_or_expression)(rest)
    return rest, {"expression": expression}


def _order_by_clause(text: str) -> tuple[str, dict[str, Any]]:
    try:
        rest = _keyword(text, "order")
    except ParseFailure:
        rest = _keyword(text, "sort")
    rest = _keyword(rest, "by")
    rest, order = parse_order(rest)
    try:
        rest, keyword = parse_order_keyword(rest)
    except ParseFailure:
        keyword = OrderKeyword.ASC
    return rest, {"order_by": OrderBy(order, keyword)}


_CLAUSES: tuple[_Clause, ...] = (
    _from_clause,
    _limit_clause,
    _expression_clause,
    _order_by_clause,
)


def parse_search_query(text: str) -> SearchQuery:
    """Parse a whole search query; later clauses override earlier ones."""
    query = SearchQuery()
    rest = text
    while skip_whitespace(rest):
        failure = ParseFailure(rest)
        for clause in _CLAUSES:
            try:
                after, changes = clause(rest)
            except ParseFailure as error:
                failure = error
                continue
            break
        else:
            raise SearchParseError(failure.remaining) from failure
        if len(after) == len(rest):
            raise SearchParseError(after)
        query = replace(query, **changes)
        rest = after
    return query
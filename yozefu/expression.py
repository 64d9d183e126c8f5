"""Boolean search expressions made of atoms joined by 'and', 'or' and '!'."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from .compare import CompareExpression, parse_compare
from .filter import Filter, parse_filter
from .grammar import ParseFailure, Symbol, skip_whitespace, wsi


@dataclass(frozen=True)
class Parenthesis:
    """An expression between parentheses."""

    expression: OrExpression

    def __str__(self) -> str:
        return str(self.expression)


Atom = Union[Symbol, CompareExpression, Filter, Parenthesis]


@dataclass(frozen=True)
class Term:
    """An atom, possibly negated with '!'."""

    atom: Atom
    negated: bool = False

    def __str__(self) -> str:
        return f"!{self.atom}" if self.negated else str(self.atom)


@dataclass(frozen=True)
class AndExpression:
    """Terms that must all hold."""

    terms: tuple[Term, ...] = ()

    def __init__(self, terms: Iterable[Term] = ()) -> None:
        object.__setattr__(self, "terms", tuple(terms))

    def __str__(self) -> str:
        return " && ".join(str(t) for t in self.terms)


@dataclass(frozen=True)
class OrExpression:
    """Clauses of which at least one must hold; empty means no condition."""

    clauses: tuple[AndExpression, ...] = ()

    def __init__(self, clauses: Iterable[AndExpression] = ()) -> None:
        object.__setattr__(self, "clauses", tuple(clauses))

    def __str__(self) -> str:
        return " || ".join(str(c) for c in self.clauses)

    def is_empty(self) -> bool:
        return not self.clauses


def _expect(text: str, literal: str, ignore_case: bool = False) -> str:
    rest = skip_whitespace(text)
    head = rest[: len(literal)]
    if (head.lower() == literal.lower()) if ignore_case else (head == literal):
        return rest[len(literal):]
    raise ParseFailure(rest)


def parse_atom(text: str) -> tuple[str, Atom]:
    """A filter, a comparison or an expression between parentheses."""
    try:
        return wsi(parse_filter)(text)
    except ParseFailure:
        pass
    try:
        return wsi(parse_compare)(text)
    except ParseFailure:
        pass
    rest = _expect(text, "(")
    rest, expression = parse_or_expression(rest)
    rest = _expect(rest, ")")
    return rest, Parenthesis(expression)


def parse_term(text: str) -> tuple[str, Term]:
    """An atom, possibly preceded by '!'."""
    try:
        rest = _expect(text, "!")
        rest, atom = parse_atom(rest)
        return rest, Term(atom, negated=True)
    except ParseFailure:
        pass
    rest, atom = parse_atom(text)
    return rest, Term(atom)


def _and_operator(text: str) -> str:
    try:
        return _expect(text, "&&")
    except ParseFailure:
        return _expect(text, "and", ignore_case=True)


def _or_operator(text: str) -> str:
    try:
        return _expect(text, "||")
    except ParseFailure:
        return _expect(text, "or")


def parse_and_expression(text: str) -> tuple[str, AndExpression]:
    """Terms joined by '&&' or 'and'."""
    rest, first = wsi(parse_term)(text)
    terms = [first]
    while True:
        try:
            after = _and_operator(rest)
            after, term = wsi(parse_term)(after)
        except ParseFailure:
            return rest, AndExpression(terms)
        terms.append(term)
        rest = after


def parse_or_expression(text: str) -> tuple[str, OrExpression]:
    """And-expressions joined by '||' or 'or'; blank input is the empty expression."""
    if not text.strip():
        return "", OrExpression()
    rest, first = wsi(parse_and_expression)(text)
    clauses = [first]
    while True:
        try:
            after = _or_operator(rest)
            after, clause = wsi(parse_and_expression)(after)
        except ParseFailure:
            return rest, OrExpression(clauses)
        clauses.append(clause)
        rest = after
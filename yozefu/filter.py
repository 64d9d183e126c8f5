"""Filters: function-like calls that extend the search engine, like ``contains("rust")``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from .grammar import ParseFailure, parse_number, parse_string, skip_whitespace
from .kafka_record import KafkaRecord

_NAME = re.compile(r"[A-Za-z0-9_-]+")


@dataclass(frozen=True)
class Parameter:
    """A parameter of a filter: a number or a string."""

    value: int | str

    def __str__(self) -> str:
        if isinstance(self.value, str):
            return f"'{self.value}'"
        return str(self.value)

    def json(self) -> int | str:
        """The parameter as a JSON-compatible value."""
        return self.value


@dataclass
class Filter:
    """A named filter and its parameters."""

    name: str = ""
    parameters: list[Parameter] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(p) for p in self.parameters)})"


@dataclass
class FilterInput:
    """What a filter receives: the record and its parameters as JSON."""

    record: KafkaRecord
    params: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"record": self.record.to_dict(), "params": list(self.params)}


@dataclass
class FilterResult:
    """Whether a record matches a filter."""

    match: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"match": self.match}


def _expect(text: str, literal: str) -> str:
    rest = skip_whitespace(text)
    if rest.startswith(literal):
        return rest[len(literal):]
    raise ParseFailure(rest)


def _parse_filter_name(text: str) -> tuple[str, str]:
    stripped = skip_whitespace(text)
    match = _NAME.match(stripped)
    if match is None:
        raise ParseFailure(stripped)
    rest = stripped[match.end():]
    return rest, text[: len(text) - len(rest)]


def _parse_parameter(text: str) -> tuple[str, Parameter]:
    rest = skip_whitespace(text)
    try:
        rest, number = parse_number(rest)
        return rest, Parameter(number)
    except ParseFailure:
        pass
    rest, string = parse_string(rest)
    return rest, Parameter(string)


def _parse_parameters(text: str) -> tuple[str, list[Parameter]]:
    try:
        rest, first = _parse_parameter(text)
    except ParseFailure:
        return text, []
    parameters = [first]
    while True:
        try:
            after = _expect(rest, ",")
            after, parameter = _parse_parameter(after)
        except ParseFailure:
            return rest, parameters
        parameters.append(parameter)
        rest = after


def parse_filter(text: str) -> tuple[str, Filter]:
    """Parse a filter call such as ``contains("rust", 2)``."""
    rest, name = _parse_filter_name(text)
    rest = _expect(rest, "(")
    rest, parameters = _parse_parameters(rest)
    rest = _expect(rest, ")")
    return rest, Filter(name, parameters)
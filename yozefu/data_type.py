"""Human readable representation of the key or the value of a record."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .operators import StringOperator

_MISSING = object()


def _compact(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _scalar_text(value: Any) -> str | None:
    """Text of a JSON scalar, or None for arrays and objects."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, str):
        return value
    return None


def _parse_index(segment: str) -> int | None:
    if segment.startswith("+") or (segment.startswith("0") and len(segment) != 1):
        return None
    if not (segment.isascii() and segment.isdigit()):
        return None
    return int(segment)


def _resolve_pointer(value: Any, pointer: str) -> Any:
    """Follow a JSON pointer; return _MISSING when it leads nowhere."""
    if pointer == "":
        return value
    if not pointer.startswith("/"):
        return _MISSING
    target = value
    for raw in pointer.split("/")[1:]:
        segment = raw.replace("~1", "/").replace("~0", "~")
        if isinstance(target, dict):
            if segment not in target:
                return _MISSING
            target = target[segment]
        elif isinstance(target, list):
            index = _parse_index(segment)
            if index is None or index >= len(target):
                return _MISSING
            target = target[index]
        else:
            return _MISSING
    return target


@dataclass(frozen=True)
class DataType:
    """Either a decoded JSON document or a plain string."""

    value: Any = ""
    is_json: bool = False

    @classmethod
    def json(cls, value: Any) -> DataType:
        return cls(value, True)

    @classmethod
    def string(cls, text: str) -> DataType:
        return cls(text, False)

    def compare(
        self, json_pointer: str | None, operator: StringOperator, right: str
    ) -> bool:
        """Compare the data, or the field the path points at, with ``right``."""
        if not self.is_json:
            return operator.apply(self.value, right)
        if json_pointer is None:
            left = _compact(self.value)
        else:
            path = json_pointer.replace(".", "/").replace("[", "/").replace("]", "")
            found = _resolve_pointer(self.value, path)
            if found is _MISSING:
                return False
            left = _scalar_text(found)
            if left is None:
                return False
        return operator.apply(left, right)

    def raw(self) -> str:
        """The data as text, without quotes around JSON strings."""
        if not self.is_json:
            return self.value
        text = _scalar_text(self.value)
        return text if text is not None else _compact(self.value)

    def to_string_pretty(self) -> str:
        if not self.is_json:
            return self.value
        return json.dumps(self.value, indent=2, ensure_ascii=False)

    def to_json(self) -> Any:
        """The data as a JSON-compatible value."""
        return self.value

    def __str__(self) -> str:
        return _compact(self.value) if self.is_json else self.value
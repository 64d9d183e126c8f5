"""Decoding of Avro binary data into JSON-compatible values."""

from __future__ import annotations

import json
import math
import struct
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

_PRIMITIVES = frozenset(
    {"null", "boolean", "int", "long", "float", "double", "bytes", "string"}
)
_DECIMAL_MESSAGE = (
    "Yozefu error: I don't know how to encode a decimal to json. It fails silently"
)


class AvroError(ValueError):
    """An Avro schema or datum is invalid."""


@dataclass(eq=False)
class _Primitive:
    name: str
    logical: str | None = None


@dataclass(eq=False)
class _Record:
    name: str
    fields: list[tuple[str, Any]] = field(default_factory=list)


@dataclass(eq=False)
class _Enum:
    name: str
    symbols: list[str]


@dataclass(eq=False)
class _Fixed:
    name: str
    size: int
    logical: str | None = None


@dataclass(eq=False)
class _Array:
    items: Any


@dataclass(eq=False)
class _Map:
    values: Any


@dataclass(eq=False)
class _Union:
    branches: list[Any]


class _SchemaParser:
    def __init__(self) -> None:
        self._names: dict[str, Any] = {}

    def parse(self, obj: Any, namespace: str | None) -> Any:
        if isinstance(obj, str):
            return self._reference(obj, namespace)
        if isinstance(obj, list):
            return _Union([self.parse(branch, namespace) for branch in obj])
        if not isinstance(obj, dict):
            raise AvroError(f"invalid schema: {obj!r}")
        kind = obj.get("type")
        if kind is None:
            raise AvroError("schema object without a type")
        if isinstance(kind, (dict, list)):
            return self.parse(kind, namespace)
        if kind in _PRIMITIVES:
            return _Primitive(kind, obj.get("logicalType"))
        match kind:
            case "record" | "error":
                return self._record(obj, namespace)
            case "enum":
                full, _ = self._full_name(obj, namespace)
                symbols = obj.get("symbols")
                if not isinstance(symbols, list) or not all(isinstance(s, str) for s in symbols):
                    raise AvroError(f"enum {full} needs a list of symbols")
                return self._register(full, _Enum(full, symbols))
            case "fixed":
                full, _ = self._full_name(obj, namespace)
                size = obj.get("size")
                if not isinstance(size, int) or isinstance(size, bool) or size < 0:
                    raise AvroError(f"fixed {full} needs a size")
                return self._register(full, _Fixed(full, size, obj.get("logicalType")))
            case "array":
                if "items" not in obj:
                    raise AvroError("array schema without items")
                return _Array(self.parse(obj["items"], namespace))
            case "map":
                if "values" not in obj:
                    raise AvroError("map schema without values")
                return _Map(self.parse(obj["values"], namespace))
        return self._reference(kind, namespace)

    def _record(self, obj: dict[str, Any], namespace: str | None) -> _Record:
        full, record_namespace = self._full_name(obj, namespace)
        record = self._register(full, _Record(full))
        fields = obj.get("fields")
        if not isinstance(fields, list):
            raise AvroError(f"record {full} needs a list of fields")
        for item in fields:
            if not isinstance(item, dict) or not isinstance(item.get("name"), str) or "type" not in item:
                raise AvroError(f"invalid field in record {full}")
            record.fields.append((item["name"], self.parse(item["type"], record_namespace)))
        return record

    @staticmethod
    def _full_name(obj: dict[str, Any], namespace: str | None) -> tuple[str, str | None]:
        name = obj.get("name")
        if not isinstance(name, str) or not name:
            raise AvroError("named type without a name")
        if "." in name:
            return name, name.rsplit(".", 1)[0]
        own = obj.get("namespace", namespace) or None
        return (f"{own}.{name}" if own else name), own

    def _register(self, full: str, node: Any) -> Any:
        if full in self._names:
            raise AvroError(f"type {full} is defined twice")
        self._names[full] = node
        return node

    def _reference(self, name: str, namespace: str | None) -> Any:
        if name in _PRIMITIVES:
            return _Primitive(name)
        if "." not in name and namespace:
            qualified = f"{namespace}.{name}"
            if qualified in self._names:
                return self._names[qualified]
        if name in self._names:
            return self._names[name]
        raise AvroError(f"unknown type: {name}")


def parse_schema(text: str) -> Any:
    """Parse the JSON text of an Avro schema."""
    try:
        document = json.loads(text)
    except ValueError as error:
        raise AvroError(f"schema is not valid JSON: {error}") from error
    return _SchemaParser().parse(document, None)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def read(self, size: int) -> bytes:
        end = self._pos + size
        if size < 0 or end > len(self._data):
            raise AvroError("unexpected end of payload")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def read_long(self) -> int:
        result = shift = 0
        for _ in range(10):
            byte = self.read(1)[0]
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                value = (result >> 1) ^ -(result & 1)
                if not -(2**63) <= value < 2**63:
                    raise AvroError("long out of range")
                return value
            shift += 7
        raise AvroError("variable-length integer is too long")

    def read_int(self) -> int:
        value = self.read_long()
        if not -(2**31) <= value < 2**31:
            raise AvroError("int out of range")
        return value

    def read_bytes(self) -> bytes:
        size = self.read_long()
        if size < 0:
            raise AvroError("negative length")
        return self.read(size)

    def read_string(self) -> str:
        try:
            return self.read_bytes().decode("utf-8")
        except UnicodeDecodeError as error:
            raise AvroError(f"invalid utf-8 string: {error}") from error


def _items(reader: _Reader):
    """Yield once per element of a block-encoded array or map."""
    while True:
        count = reader.read_long()
        if count == 0:
            return
        if count < 0:
            count = -count
            reader.read_long()
        yield from range(count)


def _uuid_text(text: str) -> str:
    try:
        return str(uuid.UUID(text))
    except ValueError as error:
        raise AvroError(f"invalid uuid: {text}") from error


def _big_decimal(data: bytes) -> str:
    inner = _Reader(data)
    digits = inner.read_bytes()
    unscaled = int.from_bytes(digits, "big", signed=True)
    scale = inner.read_long()
    return str(Decimal(f"{unscaled}E{-scale}"))


def _duration(data: bytes) -> dict[str, int]:
    months, days, millis = struct.unpack("<III", data)
    return {"months": months, "millis": millis, "days": days}


def _decode_primitive(node: _Primitive, reader: _Reader) -> Any:
    match node.name:
        case "null":
            return None
        case "boolean":
            byte = reader.read(1)[0]
            if byte > 1:
                raise AvroError(f"invalid boolean byte: {byte}")
            return byte == 1
        case "int":
            return reader.read_int()
        case "long":
            return reader.read_long()
        case "float" | "double":
            fmt, size = ("<f", 4) if node.name == "float" else ("<d", 8)
            (number,) = struct.unpack(fmt, reader.read(size))
            if not math.isfinite(number):
                raise AvroError("non-finite number cannot be represented in JSON")
            return number
        case "bytes":
            data = reader.read_bytes()
            if node.logical == "decimal":
                return _DECIMAL_MESSAGE
            if node.logical == "big-decimal":
                return _big_decimal(data)
            return list(data)
        case "string":
            text = reader.read_string()
            return _uuid_text(text) if node.logical == "uuid" else text
    raise AvroError(f"unknown primitive: {node.name}")


def _decode(node: Any, reader: _Reader) -> Any:
    match node:
        case _Primitive():
            return _decode_primitive(node, reader)
        case _Record():
            return {name: _decode(kind, reader) for name, kind in node.fields}
        case _Enum():
            index = reader.read_int()
            if not 0 <= index < len(node.symbols):
                raise AvroError(f"enum index {index} out of range")
            return node.symbols[index]
        case _Fixed():
            data = reader.read(node.size)
            if node.logical == "uuid" and node.size == 16:
                return str(uuid.UUID(bytes=data))
            if node.logical == "duration" and node.size == 12:
                return _duration(data)
            if node.logical == "decimal":
                return _DECIMAL_MESSAGE
            return list(data)
        case _Array():
            return [_decode(node.items, reader) for _ in _items(reader)]
        case _Map():
            return {reader.read_string(): _decode(node.values, reader) for _ in _items(reader)}
        case _Union():
            index = reader.read_long()
            if not 0 <= index < len(node.branches):
                raise AvroError(f"union index {index} out of range")
            return _decode(node.branches[index], reader)
    raise AvroError(f"unsupported schema node: {node!r}")


def decode_datum(schema: Any, payload: bytes) -> Any:
    """Decode one Avro datum written with ``schema`` into a JSON-compatible value."""
    return _decode(schema, _Reader(payload))
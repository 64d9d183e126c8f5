"""Kafka records made human readable, with the schemas of their key and value."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping

from .avro import AvroError, decode_datum, parse_schema
from .data_type import DataType
from .errors import SchemaRegistryError
from .schema import Schema, SchemaId, SchemaType, parse_schema_id
from .schema_registry import SchemaRegistryClient, SchemaResponse

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_HEADER_SIZE = 5


@dataclass
class KafkaMessage:
    """A message as consumed from Kafka: raw bytes and metadata."""

    topic: str
    partition: int = 0
    offset: int = 0
    timestamp: int | None = None
    key: bytes | None = None
    payload: bytes | None = None
    headers: Iterable[tuple[str, bytes | None]] = ()


def _bytes_repr(data: bytes) -> str:
    return str(list(data))


def _utf8_or_empty(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return ""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


def _try_json(payload: bytes | None) -> DataType | None:
    try:
        text = (payload or b"").decode("utf-8")
        return DataType.json(json.loads(text, parse_constant=_reject_constant))
    except (UnicodeDecodeError, ValueError, RecursionError):
        return None


def _deserialize_json(payload: bytes | None) -> DataType:
    """JSON when the payload is JSON, a string otherwise."""
    data = _try_json(payload)
    if data is not None:
        return data
    return DataType.string(_utf8_or_empty(payload or b""))


def _deserialize_avro(payload: bytes | None, schema: str) -> DataType:
    payload = payload or b""
    try:
        parsed = parse_schema(schema)
    except AvroError as error:
        return DataType.string(
            "  Yozefu Error: The avro schema could not be parsed. Please check the schema "
            f"in the schema registry.\n       Error: {error}\n       Payload: "
            f"{_bytes_repr(payload)}\n        String: {_utf8_or_empty(payload)}"
        )
    try:
        return DataType.json(decode_datum(parsed, payload))
    except AvroError as error:
        return DataType.string(
            "  Yozefu Error: According to the schema registry, the record is serialized "
            "as avro but there was an issue deserializing the payload: "
            f"{error!r}\n       Payload: {_bytes_repr(payload)}\n        String: "
            f"{_utf8_or_empty(payload)}"
        )


def _deserialize_protobuf(payload: bytes | None, schema: str) -> DataType:
    payload = payload or b""
    return DataType.string(
        "  Error: Protobuf deserialization is not supported yet in Yozefu. "
        f"Any contribution is welcome!\nPayload: {_bytes_repr(payload)}\n String: "
        f"{_utf8_or_empty(payload).strip()}\n Schema:\n{schema}"
    )


def _payload_to_data_type(
    payload: bytes | None, schema: SchemaResponse | None
) -> DataType:
    if schema is None:
        return _deserialize_json(payload)
    match schema.schema_type:
        case SchemaType.AVRO:
            return _deserialize_avro(payload, schema.schema)
        case SchemaType.PROTOBUF:
            return _deserialize_protobuf(payload, schema.schema)
    return _deserialize_json(payload)


def _extract_data_and_schema(
    payload: bytes | None, registry: SchemaRegistryClient | None
) -> tuple[DataType, Schema | None]:
    schema_id = parse_schema_id(payload)
    if schema_id is None:
        return _payload_to_data_type(payload, None), None
    raw = payload or b""
    if registry is None:
        data = _try_json(raw)
        if data is not None:
            return data, None
        body = raw[_HEADER_SIZE:] if len(raw) > _HEADER_SIZE else None
        data = _try_json(body)
        if data is not None:
            return data, Schema(schema_id)
        return (
            DataType.string(
                f"Yozefu was not able to retrieve the schema {schema_id} because there "
                "is no schema registry configured. Please read the schema registry "
                "documentation for more details.\n"
                f"Payload: {_bytes_repr(raw)}\n String: {_utf8_or_empty(raw)}"
            ),
            Schema(schema_id),
        )
    try:
        response = registry.schema(schema_id.value)
    except SchemaRegistryError as error:
        return (
            DataType.string(
                f"{error}.\nYozefu was not able to retrieve the schema {schema_id}.\n"
                "Please make sure the schema registry is correctly configured.\n"
                f"Payload: {_bytes_repr(raw)}\n String: {_utf8_or_empty(raw)}"
            ),
            Schema(schema_id),
        )
    schema = Schema(schema_id, response.schema_type if response else None)
    body = payload if len(raw) <= _HEADER_SIZE else raw[_HEADER_SIZE:]
    return _payload_to_data_type(body, response), schema


def _require(data: Mapping[str, Any], name: str) -> Any:
    if name not in data:
        raise ValueError(f"missing field '{name}'")
    return data[name]


@dataclass
class KafkaRecord:
    """A Kafka record whose key, value and headers are readable."""

    topic: str = ""
    timestamp: int | None = None
    partition: int = 0
    offset: int = 0
    headers: dict[str, str] = field(default_factory=dict)
    key_schema: Schema | None = None
    value_schema: Schema | None = None
    size: int = 0
    key: DataType = field(default_factory=DataType)
    key_as_string: str = ""
    value: DataType = field(default_factory=DataType)
    value_as_string: str = ""

    def timestamp_as_utc_date_time(self) -> datetime | None:
        try:
            return _EPOCH + timedelta(milliseconds=self.timestamp or 0)
        except OverflowError:
            return None

    def timestamp_as_local_date_time(self) -> datetime | None:
        utc = self.timestamp_as_utc_date_time()
        return utc.astimezone() if utc is not None else None

    def has_schemas(self) -> bool:
        return self.key_schema is not None or self.value_schema is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "topic": self.topic,
            "timestamp": self.timestamp,
            "partition": self.partition,
            "offset": self.offset,
            "headers": dict(sorted(self.headers.items())),
        }
        if self.key_schema is not None:
            data["key_schema"] = self.key_schema.to_dict()
        if self.value_schema is not None:
            data["value_schema"] = self.value_schema.to_dict()
        data["size"] = self.size
        data["key"] = self.key.to_json()
        data["value"] = self.value.to_json()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> KafkaRecord:
        key_schema = data.get("key_schema")
        value_schema = data.get("value_schema")
        return cls(
            topic=_require(data, "topic"),
            timestamp=data.get("timestamp"),
            partition=_require(data, "partition"),
            offset=_require(data, "offset"),
            headers=dict(sorted(_require(data, "headers").items())),
            key_schema=Schema.from_dict(key_schema) if key_schema is not None else None,
            value_schema=(
                Schema.from_dict(value_schema) if value_schema is not None else None
            ),
            size=data.get("size", 0),
            key=DataType.json(_require(data, "key")),
            key_as_string=data.get("key_as_string", ""),
            value=DataType.json(_require(data, "value")),
            value_as_string=data.get("value_as_string", ""),
        )

    @classmethod
    def parse(
        cls, message: KafkaMessage, schema_registry: SchemaRegistryClient | None = None
    ) -> KafkaRecord:
        """Decode a consumed message, fetching schemas from the registry if given."""
        headers: dict[str, str] = {}
        for name, raw in message.headers:
            if raw is None:
                headers[name] = ""
            else:
                try:
                    headers[name] = bytes(raw).decode("utf-8")
                except UnicodeDecodeError:
                    headers[name] = "<unable to parse>"
        size = len(message.payload or b"") + len(message.key or b"")
        key, key_schema = _extract_data_and_schema(message.key, schema_registry)
        value, value_schema = _extract_data_and_schema(message.payload, schema_registry)
        return cls(
            topic=message.topic,
            timestamp=message.timestamp,
            partition=message.partition,
            offset=message.offset,
            headers=dict(sorted(headers.items())),
            key_schema=key_schema,
            value_schema=value_schema,
            size=size,
            key=key,
            key_as_string=str(key),
            value=value,
            value_as_string=str(value),
        )
"""Schema identifiers and types carried by keys and values of records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

_MAGIC_BYTE = 0
_MAX_ID = 2**32 - 1


@dataclass(frozen=True, order=True)
class SchemaId:
    """Identifier of a schema in the schema registry."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= _MAX_ID:
            raise ValueError(f"schema id out of range: {self.value}")

    def __str__(self) -> str:
        return str(self.value)


class SchemaType(Enum):
    """Serialization formats a schema can describe."""

    JSON = "JSON"
    AVRO = "AVRO"
    PROTOBUF = "PROTOBUF"

    def __str__(self) -> str:
        return self.value.lower()


@dataclass(frozen=True)
class Schema:
    """The schema a key or a value was serialized with."""

    id: SchemaId
    schema_type: SchemaType | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id.value}
        if self.schema_type is not None:
            data["schema_type"] = self.schema_type.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Schema:
        schema_type = data.get("schema_type")
        return cls(
            id=SchemaId(data["id"]),
            schema_type=SchemaType(schema_type) if schema_type is not None else None,
        )


def parse_schema_id(payload: bytes | None) -> SchemaId | None:
    """Read the schema id from the 5-byte header of a payload, if present."""
    if payload is None or len(payload) < 5 or payload[0] != _MAGIC_BYTE:
        return None
    return SchemaId(int.from_bytes(payload[1:5], "big"))
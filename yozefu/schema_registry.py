"""HTTP client for a Confluent-compatible schema registry, with a cache."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any, Mapping
from urllib.parse import quote, urlsplit, urlunsplit

import requests

from .errors import SchemaRegistryError
from .schema import SchemaType

_ACCEPT = "application/vnd.schemaregistry.v1+json"
_TIMEOUT_SECONDS = 5


@dataclass(frozen=True)
class SchemaResponse:
    """A schema as returned by the registry."""

    schema: str
    schema_type: SchemaType | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SchemaResponse:
        if "schema" not in data:
            raise ValueError("schema response without a 'schema' field")
        schema_type = data.get("schemaType")
        return cls(
            schema=data["schema"],
            schema_type=SchemaType(schema_type) if schema_type is not None else None,
        )

    def schema_to_string_pretty(self) -> str:
        """The schema indented when it is JSON text, as is otherwise."""
        if self.schema_type in (SchemaType.AVRO, SchemaType.JSON):
            try:
                document = json.loads(self.schema)
            except ValueError:
                document = ""
            return json.dumps(document, indent=2, ensure_ascii=False)
        return self.schema


def compute_schema_type(response: SchemaResponse) -> SchemaType | None:
    """The declared schema type, or one inferred from the schema text."""
    if response.schema_type is not None:
        return response.schema_type
    text = response.schema
    try:
        document = json.loads(text)
    except ValueError:
        if "proto2" in text or "proto3" in text:
            return SchemaType.PROTOBUF
        return None
    if isinstance(document, dict) and "type" in document and "namespace" in document:
        return SchemaType.AVRO
    return None


class SchemaRegistryClient:
    """Fetches schemas by id from a schema registry; found schemas are cached."""

    def __init__(self, base_url: str, headers: Mapping[str, str] | None = None) -> None:
        self.base_url = base_url
        self._session = requests.Session()
        self._session.headers["Accept"] = _ACCEPT
        self._session.headers.update(headers or {})
        self._cache: dict[int, SchemaResponse] = {}

    def schema_url(self, schema_id: int) -> str:
        """URL of the schema with the given id."""
        parts = urlsplit(self.base_url)
        segments = (parts.path or "/").split("/")[1:]
        if segments == [""]:
            segments = []
        segments += ["schemas", "ids", quote(str(schema_id), safe="")]
        return urlunsplit(parts._replace(path="/" + "/".join(segments)))

    def schema(self, schema_id: int) -> SchemaResponse | None:
        """The schema with the given id, or None when the registry does not know it."""
        cached = self._cache.get(schema_id)
        if cached is not None:
            return cached
        try:
            response = self._session.get(
                self.schema_url(schema_id), timeout=_TIMEOUT_SECONDS
            )
        except requests.RequestException as error:
            raise SchemaRegistryError(str(error)) from error
        if not 200 <= response.status_code < 300:
            return None
        try:
            parsed = SchemaResponse.from_dict(response.json())
        except (ValueError, TypeError, AttributeError) as error:
            raise SchemaRegistryError(f"invalid schema response: {error}") from error
        found = replace(parsed, schema_type=compute_schema_type(parsed))
        self._cache[schema_id] = found
        return found
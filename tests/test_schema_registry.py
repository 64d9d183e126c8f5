import json

import pytest
import requests
import responses

from yozefu.errors import SchemaRegistryError
from yozefu.schema import SchemaType
from yozefu.schema_registry import (
    SchemaRegistryClient,
    SchemaResponse,
    compute_schema_type,
)

BASE = "http://localhost:8082"
AVRO_SCHEMA = json.dumps(
    {"type": "record", "name": "R", "namespace": "n", "fields": []}
)


def test_schema_url_on_root():
    client = SchemaRegistryClient(BASE, {})
    assert client.schema_url(3) == "http://localhost:8082/schemas/ids/3"


def test_schema_url_keeps_base_path():
    client = SchemaRegistryClient("http://localhost:8082/registry", {})
    assert client.schema_url(12) == "http://localhost:8082/registry/schemas/ids/12"


def test_fetch_infers_avro_and_caches():
    client = SchemaRegistryClient(BASE, {"X-Team": "kafka"})
    with responses.RequestsMock() as rsps:
        rsps.get(client.schema_url(1), json={"schema": AVRO_SCHEMA})
        first = client.schema(1)
        second = client.schema(1)
        assert len(rsps.calls) == 1
        sent = rsps.calls[0].request.headers
        assert sent["Accept"] == "application/vnd.schemaregistry.v1+json"
        assert sent["X-Team"] == "kafka"
    assert first == second
    assert first.schema == AVRO_SCHEMA
    assert first.schema_type is SchemaType.AVRO


def test_missing_schema_is_none_and_not_cached():
    client = SchemaRegistryClient(BASE, {})
    with responses.RequestsMock() as rsps:
        rsps.get(client.schema_url(9), status=404, json={"error_code": 40403})
        assert client.schema(9) is None
        assert client.schema(9) is None
        assert len(rsps.calls) == 2


def test_connection_error_raises():
    client = SchemaRegistryClient(BASE, {})
    with responses.RequestsMock() as rsps:
        rsps.get(client.schema_url(2), body=requests.ConnectionError("refused"))
        with pytest.raises(SchemaRegistryError) as info:
            client.schema(2)
    assert str(info.value).startswith("Schema registry Error: ")


def test_from_dict_reads_schema_type():
    response = SchemaResponse.from_dict({"schema": "x", "schemaType": "PROTOBUF"})
    assert response == SchemaResponse("x", SchemaType.PROTOBUF)


def test_from_dict_requires_schema():
    with pytest.raises(ValueError):
        SchemaResponse.from_dict({"schemaType": "JSON"})


def test_compute_schema_type_keeps_declared_type():
    response = SchemaResponse(AVRO_SCHEMA, SchemaType.JSON)
    assert compute_schema_type(response) is SchemaType.JSON


def test_compute_schema_type_detects_protobuf():
    response = SchemaResponse('syntax = "proto3"; message M { string id = 1; }')
    assert compute_schema_type(response) is SchemaType.PROTOBUF


def test_compute_schema_type_unknown_json():
    assert compute_schema_type(SchemaResponse('{"type": "object"}')) is None
    assert compute_schema_type(SchemaResponse("not a schema")) is None


def test_pretty_avro_is_indented_and_equivalent():
    response = SchemaResponse(AVRO_SCHEMA, SchemaType.AVRO)
    pretty = response.schema_to_string_pretty()
    assert "\n" in pretty
    assert json.loads(pretty) == json.loads(AVRO_SCHEMA)


def test_pretty_protobuf_is_unchanged():
    text = 'syntax = "proto3";'
    assert SchemaResponse(text, SchemaType.PROTOBUF).schema_to_string_pretty() == text
import json
import struct
import uuid

import pytest

from yozefu.avro import AvroError, decode_datum, parse_schema


def _long(n: int) -> bytes:
    value = (n << 1) ^ (n >> 63)
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _string(text: str) -> bytes:
    data = text.encode("utf-8")
    return _long(len(data)) + data


def _decode(schema, payload: bytes):
    return decode_datum(parse_schema(json.dumps(schema)), payload)


@pytest.mark.parametrize("n", [0, -1, 63, 64, -65, 2**40, -(2**63)])
def test_long_round_trip(n):
    assert _decode("long", _long(n)) == n


def test_zigzag_wire_bytes():
    assert _decode("long", b"\x01") == -1
    assert _decode("int", b"\x80\x01") == 64


def test_string():
    assert _decode("string", _string("héllo")) == "héllo"


def test_bytes_become_list_of_numbers():
    payload = b"\x00\xffab"
    assert _decode("bytes", _long(len(payload)) + payload) == list(payload)


def test_boolean_and_null():
    assert _decode("boolean", b"\x01") is True
    assert _decode("null", b"") is None


def test_double():
    assert _decode("double", struct.pack("<d", 1.5)) == 1.5


def test_record_keeps_field_order():
    schema = {
        "type": "record",
        "name": "User",
        "fields": [{"name": "name", "type": "string"}, {"name": "id", "type": "int"}],
    }
    value = _decode(schema, _string("bob") + _long(7))
    assert value == {"name": "bob", "id": 7}
    assert list(value) == ["name", "id"]


def test_union_branches():
    schema = ["null", "string"]
    assert _decode(schema, _long(0)) is None
    assert _decode(schema, _long(1) + _string("y")) == "y"


def test_enum():
    schema = {"type": "enum", "name": "Colour", "symbols": ["RED", "GREEN"]}
    assert _decode(schema, _long(1)) == "GREEN"


def test_array_blocks():
    schema = {"type": "array", "items": "long"}
    payload = _long(2) + _long(5) + _long(6) + _long(1) + _long(9) + _long(0)
    assert _decode(schema, payload) == [5, 6, 9]


def test_array_negative_block_count():
    schema = {"type": "array", "items": "long"}
    body = _long(5) + _long(6)
    payload = _long(-2) + _long(len(body)) + body + _long(0)
    assert _decode(schema, payload) == [5, 6]


def test_map():
    schema = {"type": "map", "values": "string"}
    payload = _long(2) + _string("a") + _string("x") + _string("b") + _string("y") + _long(0)
    assert _decode(schema, payload) == {"a": "x", "b": "y"}


def test_recursive_named_reference():
    schema = {
        "type": "record",
        "name": "Node",
        "namespace": "com.example",
        "fields": [
            {"name": "label", "type": "string"},
            {"name": "next", "type": ["null", "Node"]},
        ],
    }
    payload = _string("a") + _long(1) + _string("b") + _long(0)
    assert _decode(schema, payload) == {"label": "a", "next": {"label": "b", "next": None}}


def test_fully_qualified_reference():
    schema = {
        "type": "record",
        "name": "Outer",
        "namespace": "com.example",
        "fields": [
            {"name": "first", "type": {"type": "fixed", "name": "Pair", "size": 2}},
            {"name": "second", "type": "com.example.Pair"},
        ],
    }
    assert _decode(schema, b"abcd") == {"first": list(b"ab"), "second": list(b"cd")}


def test_timestamp_logical_type_is_number():
    schema = {"type": "long", "logicalType": "timestamp-millis"}
    assert _decode(schema, _long(1_727_000_000_000)) == 1_727_000_000_000


def test_uuid_string():
    text = "123e4567-e89b-12d3-a456-426614174000"
    assert _decode({"type": "string", "logicalType": "uuid"}, _string(text)) == text


def test_uuid_fixed():
    raw = bytes(range(16))
    schema = {"type": "fixed", "name": "Id", "size": 16, "logicalType": "uuid"}
    assert _decode(schema, raw) == str(uuid.UUID(bytes=raw))


def test_duration():
    schema = {"type": "fixed", "name": "D", "size": 12, "logicalType": "duration"}
    value = _decode(schema, struct.pack("<III", 1, 2, 3))
    assert value == {"months": 1, "millis": 3, "days": 2}
    assert list(value) == ["months", "millis", "days"]


def test_decimal_is_reported_as_text():
    schema = {"type": "bytes", "logicalType": "decimal", "precision": 4, "scale": 2}
    assert _decode(schema, _long(1) + b"\x05") == (
        "Yozefu error: I don't know how to encode a decimal to json. It fails silently"
    )


def test_invalid_json_schema():
    with pytest.raises(AvroError):
        parse_schema("{not json")


def test_unknown_type_name():
    with pytest.raises(AvroError):
        parse_schema('{"type": "record", "name": "R", "fields": [{"name": "f", "type": "Missing"}]}')


def test_truncated_payload():
    with pytest.raises(AvroError):
        _decode("string", _long(10) + b"abc")


def test_union_index_out_of_range():
    with pytest.raises(AvroError):
        _decode(["null", "int"], _long(2))


def test_invalid_boolean():
    with pytest.raises(AvroError):
        _decode("boolean", b"\x02")


def test_int_overflow():
    with pytest.raises(AvroError):
        _decode("int", _long(2**31))


def test_invalid_utf8():
    with pytest.raises(AvroError):
        _decode("string", _long(2) + b"\xff\xfe")
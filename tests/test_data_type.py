import json

import pytest

from yozefu.data_type import DataType
from yozefu.operators import StringOperator

DOCUMENT = {"user": {"name": "alice", "age": 42, "admin": True, "nick": None}, "items": [{"id": "x1"}]}


def test_default_is_empty_string():
    assert DataType() == DataType.string("")


def test_string_compare_uses_whole_text():
    data = DataType.string("my-key-1234")
    assert data.compare(None, StringOperator.START_WITH, "my-key")
    assert not data.compare(".anything", StringOperator.EQUAL, "x")


@pytest.mark.parametrize(
    ("path", "right"),
    [
        (".user.name", "alice"),
        (".user.age", "42"),
        (".user.nick", "null"),
        (".items[0].id", "x1"),
    ],
)
def test_json_pointer_equal(path, right):
    assert DataType.json(DOCUMENT).compare(path, StringOperator.EQUAL, right)


def test_json_pointer_boolean():
    assert DataType.json(DOCUMENT).compare(".user.admin", StringOperator.EQUAL, "true")


@pytest.mark.parametrize("path", [".missing", ".user", ".items", ".items[5].id", "user.name"])
def test_json_pointer_without_scalar_is_false(path):
    data = DataType.json(DOCUMENT)
    assert not data.compare(path, StringOperator.NOT_EQUAL, "anything")


def test_json_without_pointer_compares_compact_text():
    data = DataType.json(DOCUMENT)
    assert data.compare(None, StringOperator.CONTAIN, '"name":"alice"')
    assert not data.compare(None, StringOperator.CONTAIN, '"name": "alice"')


def test_raw_of_json_string_has_no_quotes():
    assert DataType.json("hello").raw() == "hello"
    assert str(DataType.json("hello")) == '"hello"'


def test_raw_of_null():
    assert DataType.json(None).raw() == "null"


def test_raw_of_object_round_trips():
    assert json.loads(DataType.json(DOCUMENT).raw()) == DOCUMENT


def test_display_is_compact():
    text = str(DataType.json(DOCUMENT))
    assert json.loads(text) == DOCUMENT
    assert ", " not in text and ": " not in text


def test_pretty_round_trips_and_spans_lines():
    pretty = DataType.json(DOCUMENT).to_string_pretty()
    assert json.loads(pretty) == DOCUMENT
    assert "\n" in pretty


def test_string_display_and_pretty_are_identity():
    data = DataType.string("plain text")
    assert str(data) == data.to_string_pretty() == data.raw() == "plain text"


def test_to_json():
    assert DataType.json(DOCUMENT).to_json() == DOCUMENT
    assert DataType.string("abc").to_json() == "abc"


def test_json_string_differs_from_plain_string():
    assert DataType.json("abc") != DataType.string("abc")
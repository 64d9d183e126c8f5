import pytest

from yozefu.errors import (
    KafkaError,
    SchemaRegistryError,
    SearchParseError,
    ThemeError,
    YozefuError,
)


def test_search_parse_error_message():
    error = SearchParseError("limit abc")
    assert str(error) == "Cannot parse the search query at 'limit abc'"
    assert error.remaining == "limit abc"


def test_search_parse_error_is_a_yozefu_error():
    error = SearchParseError("oops")
    assert isinstance(error, YozefuError)
    assert error.remaining == "oops"
    assert str(error) == "Cannot parse the search query at 'oops'"


@pytest.mark.parametrize(
    ("cls", "prefix"),
    [
        (KafkaError, "Kafka Error: "),
        (ThemeError, "Theme Error: "),
        (SchemaRegistryError, "Schema registry Error: "),
    ],
)
def test_prefixed_messages(cls, prefix):
    assert str(cls("boom")) == prefix + "boom"


def test_plain_error_has_no_prefix():
    assert str(YozefuError("something went wrong")) == "something went wrong"


def test_subclasses_caught_by_base():
    error = KafkaError("broker down")
    assert isinstance(error, YozefuError)
    assert str(error) == "Kafka Error: broker down"
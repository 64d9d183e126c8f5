import pytest

from yozefu.grammar import ParseFailure
from yozefu.order import Order, OrderBy, OrderKeyword, parse_order, parse_order_keyword


def test_parse_order():
    assert parse_order("partition") == ("", Order.PARTITION)
    with pytest.raises(ParseFailure):
        parse_order("!value")


def test_parse_order_keyword():
    assert parse_order_keyword("asc") == ("", OrderKeyword.ASC)
    assert parse_order_keyword("desc") == ("", OrderKeyword.DESC)


def test_parse_order_keyword_invalid():
    with pytest.raises(ParseFailure):
        parse_order_keyword("ascending order"[3:])


@pytest.mark.parametrize(
    "text, expected",
    [
        ("timestamp", Order.TIMESTAMP),
        ("ts", Order.TIMESTAMP),
        ("  key", Order.KEY),
        ("value", Order.VALUE),
        ("topic", Order.TOPIC),
        ("offset", Order.OFFSET),
        ("size", Order.SIZE),
        ("p", Order.PARTITION),
    ],
)
def test_parse_order_fields(text, expected):
    assert parse_order(text) == ("", expected)


def test_parse_order_leaves_rest():
    assert parse_order("key desc") == (" desc", Order.KEY)


def test_order_by_default():
    order_by = OrderBy()
    assert str(order_by) == "order by timestamp asc"
    assert order_by.is_descending() is False


def test_order_by_descending():
    order_by = OrderBy(Order.KEY, OrderKeyword.DESC)
    assert str(order_by) == "order by key desc"
    assert order_by.is_descending() is True


def test_str_of_enums():
    _, order = parse_order("partition")
    _, keyword = parse_order_keyword("asc")
    assert str(order) == "partition"
    assert str(keyword) == "asc"
import pytest

from pearlwash.domain import InvalidInput
from pearlwash.services.tracking_service import parse_order_id
from pearlwash.store import RecordNotFound


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_empty_input(raw):
    with pytest.raises(InvalidInput, match="enter an order ID"):
        parse_order_id(raw)


@pytest.mark.parametrize("raw", ["abc", "#42", "-", "x1", "٤٢"])
def test_non_numeric_input(raw):
    with pytest.raises(InvalidInput, match="valid numeric"):
        parse_order_id(raw)


@pytest.mark.parametrize("raw, expected", [("42", 42), (" 42 ", 42), ("42abc", 42), ("007", 7), (42, 42)])
def test_leading_integer_is_used(raw, expected):
    assert parse_order_id(raw) == expected


def test_track_existing_order(ctx):
    order = ctx.tracking.track("42")
    assert order.id == 42
    assert order.customer_name == "Jane Doe"


def test_track_unknown_order(ctx):
    with pytest.raises(RecordNotFound):
        ctx.tracking.track("999999")


@pytest.mark.parametrize("raw", ["", "abc"])
def test_track_rejects_bad_input(ctx, raw):
    with pytest.raises(InvalidInput):
        ctx.tracking.track(raw)

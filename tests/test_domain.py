from decimal import Decimal

import pytest

from factories import make_order
from pearlwash.domain import InvalidInput, Order, to_decimal


@pytest.mark.parametrize("raw, expected", [(45.5, "45.5"), ("12.00", "12.00"), (10, "10"), (None, "0"), ("", "0")])
def test_to_decimal(raw, expected):
    assert to_decimal(raw) == Decimal(expected)


@pytest.mark.parametrize("raw", ["abc", "NaN", "Infinity", "-inf", "sNaN", float("nan"), Decimal("NaN")])
def test_to_decimal_rejects_non_amounts(raw):
    with pytest.raises(InvalidInput):
        to_decimal(raw)


def test_order_with_nan_total_is_rejected():
    with pytest.raises(InvalidInput):
        Order.from_record(make_order(5, total="NaN"))

from datetime import date
from decimal import Decimal

import pytest

from factories import make_order
from pearlwash.domain import InvalidInput, Order
from pearlwash.reports import (
    customer_aggregate,
    customer_summaries,
    filter_by_date_range,
    filter_by_status,
    metrics,
    newest_first,
    sort_by_field,
    status_counts,
)


def orders_from(*records):
    return [Order.from_record(r) for r in records]


@pytest.fixture
def lifecycle_orders():
    statuses = ["scheduled", "scheduled", "picked-up", "in-progress", "ready", "delivered"]
    return orders_from(*(make_order(i, status=s) for i, s in enumerate(statuses, start=1)))


class TestFilters:
    def test_all_is_identity(self, lifecycle_orders):
        assert filter_by_status(lifecycle_orders, "all") == lifecycle_orders

    def test_status_is_exact_match(self, lifecycle_orders):
        assert [o.id for o in filter_by_status(lifecycle_orders, "scheduled")] == [1, 2]
        assert filter_by_status(lifecycle_orders, "Scheduled") == []

    def test_date_ranges_are_half_open(self):
        today = date(2024, 3, 31)
        orders = orders_from(
            make_order(1, pickup="2024-04-01"),  # tomorrow
            make_order(2, pickup="2024-03-31"),  # today
            make_order(3, pickup="2024-03-24"),  # 7 days back
            make_order(4, pickup="2024-03-23"),  # 8 days back
            make_order(5, pickup="2024-03-01"),  # 30 days back
            make_order(6, pickup="2024-02-29"),  # 31 days back
        )
        assert [o.id for o in filter_by_date_range(orders, "today", today)] == [2]
        assert [o.id for o in filter_by_date_range(orders, "week", today)] == [2, 3]
        assert [o.id for o in filter_by_date_range(orders, "month", today)] == [2, 3, 4, 5]
        assert len(filter_by_date_range(orders, "all", today)) == 6

    def test_unknown_date_range(self, lifecycle_orders):
        with pytest.raises(InvalidInput):
            filter_by_date_range(lifecycle_orders, "year")


class TestMetrics:
    def test_picked_up_and_ready_only_count_toward_total(self, lifecycle_orders):
        m = metrics(lifecycle_orders)
        assert m.to_record() == {"total": 6, "pending": 2, "inProgress": 1, "completed": 1}

    def test_empty(self):
        assert metrics([]).total == 0

    def test_status_counts(self, lifecycle_orders):
        counts = status_counts(lifecycle_orders)
        assert counts["all"] == 6
        assert counts["scheduled"] == 2
        assert counts["ready"] == 1


class TestSorting:
    def test_asc_then_desc_reverses(self):
        orders = orders_from(
            make_order(1, total="30.00"), make_order(2, total="12.50"), make_order(3, total="99.99")
        )
        asc = sort_by_field(orders, "totalPrice", "asc")
        desc = sort_by_field(orders, "totalPrice", "desc")
        assert [o.id for o in asc] == [2, 1, 3]
        assert desc == list(reversed(asc))

    def test_equal_keys_keep_input_order(self):
        orders = orders_from(
            make_order(7, total="20.00"), make_order(3, total="20.00"), make_order(5, total="10.00")
        )
        for _ in range(3):
            assert [o.id for o in sort_by_field(orders, "totalPrice", "asc")] == [5, 7, 3]
            assert [o.id for o in sort_by_field(orders, "totalPrice", "desc")] == [7, 3, 5]

    def test_pickup_date_compared_as_date(self):
        orders = orders_from(make_order(1, pickup="2024-10-02"), make_order(2, pickup="2024-09-30"))
        assert [o.id for o in sort_by_field(orders, "pickupDate", "asc")] == [2, 1]

    def test_attribute_names_are_accepted(self):
        orders = orders_from(make_order(2, name="Zed"), make_order(1, name="Amy"))
        assert [o.id for o in sort_by_field(orders, "customer_name")] == [1, 2]

    def test_bad_field_or_direction(self, lifecycle_orders):
        with pytest.raises(InvalidInput):
            sort_by_field(lifecycle_orders, "services")
        with pytest.raises(InvalidInput):
            sort_by_field(lifecycle_orders, "id", "sideways")

    def test_newest_first(self):
        orders = orders_from(
            make_order(1, created="2024-01-01T08:00:00.000Z"),
            make_order(2, created="2024-03-01T08:00:00.000Z"),
            make_order(3, created=None),
        )
        assert [o.id for o in newest_first(orders)] == [2, 1, 3]


class TestCustomers:
    def test_aggregate_uses_latest_pickup(self):
        orders = orders_from(
            make_order(1, pickup="2024-02-15", total="45.50", created="2024-01-01T00:00:00Z"),
            make_order(2, pickup="2024-01-01", total="30.00", created="2024-02-01T00:00:00Z"),
            make_order(3, name="Omar Haddad", pickup="2024-05-01", total="99.00"),
        )
        summary = customer_aggregate(orders, "Jane Doe")
        assert summary.total_spent == Decimal("75.50")
        assert summary.order_count == 2
        assert summary.most_recent_order.id == 1

    def test_name_match_is_exact(self):
        orders = orders_from(make_order(1, name="Jane Doe"), make_order(2, name="jane doe"))
        assert customer_aggregate(orders, "Jane Doe").order_count == 1
        assert customer_aggregate(orders, "Jane Doe ").order_count == 0

    def test_unknown_customer(self):
        summary = customer_aggregate([], "Nobody")
        assert summary.total_spent == Decimal("0")
        assert summary.most_recent_order is None

    def test_summaries_in_first_seen_order(self):
        orders = orders_from(
            make_order(1, name="Omar Haddad"), make_order(2, name="Jane Doe"), make_order(3, name="Omar Haddad")
        )
        summaries = customer_summaries(orders)
        assert [(s.customer_name, s.order_count) for s in summaries] == [("Omar Haddad", 2), ("Jane Doe", 1)]

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, Optional

from .domain import ORDER_STATUSES, CustomerSummary, InvalidInput, Order, OrderMetrics, to_decimal

DATE_RANGES = ("all", "today", "week", "month")

# range name -> days back from today; the window always ends at tomorrow 00:00
_RANGE_DAYS = {"today": 0, "week": 7, "month": 30}

SORT_FIELDS = {
    "id": "id",
    "customerName": "customer_name",
    "customerPhone": "customer_phone",
    "address": "address",
    "pickupDate": "pickup_date",
    "pickupTime": "pickup_time",
    "status": "status",
    "totalPrice": "total_price",
    "createdAt": "created_at",
}

_DATE_FIELDS = {"pickup_date", "created_at"}


def filter_by_status(orders: Iterable[Order], status: str) -> list[Order]:
    if status == "all":
        return list(orders)
    return [o for o in orders if o.status == status]


def filter_by_date_range(orders: Iterable[Order], date_range: str, today: Optional[date] = None) -> list[Order]:
    if date_range == "all":
        return list(orders)
    if date_range not in _RANGE_DAYS:
        raise InvalidInput(f"Unknown date range {date_range!r}; expected one of {', '.join(DATE_RANGES)}")

    today = today or date.today()
    start = today - timedelta(days=_RANGE_DAYS[date_range])
    end = today + timedelta(days=1)
    return [o for o in orders if start <= o.pickup_date < end]


def metrics(orders: Iterable[Order]) -> OrderMetrics:
    # picked-up and ready orders count toward total only
    orders = list(orders)
    return OrderMetrics(
        total=len(orders),
        pending=sum(1 for o in orders if o.status == "scheduled"),
        in_progress=sum(1 for o in orders if o.status == "in-progress"),
        completed=sum(1 for o in orders if o.status == "delivered"),
    )


def status_counts(orders: Iterable[Order]) -> dict[str, int]:
    orders = list(orders)
    counts = {"all": len(orders)}
    for status in ORDER_STATUSES:
        counts[status] = sum(1 for o in orders if o.status == status)
    return counts


def _sort_key(attr: str):
    if attr == "total_price":
        return lambda o: to_decimal(o.total_price)
    if attr in _DATE_FIELDS:
        # orders without a timestamp sort first
        return lambda o: (getattr(o, attr) is not None, _as_datetime(getattr(o, attr)))
    return lambda o: getattr(o, attr)


def _as_datetime(value) -> datetime:
    if value is None:
        return datetime.min
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc).replace(tzinfo=None) if value.tzinfo else value
    return datetime(value.year, value.month, value.day)


def sort_by_field(orders: Iterable[Order], field: str, direction: str = "asc") -> list[Order]:
    attr = SORT_FIELDS.get(field, field)
    if attr not in SORT_FIELDS.values():
        raise InvalidInput(f"Cannot sort orders by {field!r}")
    if direction not in ("asc", "desc"):
        raise InvalidInput(f"Sort direction must be 'asc' or 'desc', not {direction!r}")

    # sorted() keeps equal keys in input order for reverse=True as well
    return sorted(orders, key=_sort_key(attr), reverse=direction == "desc")


def newest_first(orders: Iterable[Order]) -> list[Order]:
    return sort_by_field(orders, "createdAt", "desc")


def customer_aggregate(orders: Iterable[Order], customer_name: str) -> CustomerSummary:
    mine = tuple(o for o in orders if o.customer_name == customer_name)
    most_recent = None
    for o in mine:
        if most_recent is None or o.pickup_date > most_recent.pickup_date:
            most_recent = o
    return CustomerSummary(
        customer_name=customer_name,
        total_spent=sum((to_decimal(o.total_price) for o in mine), Decimal("0")),
        order_count=len(mine),
        most_recent_order=most_recent,
        orders=mine,
    )


def customer_summaries(orders: Iterable[Order]) -> list[CustomerSummary]:
    orders = list(orders)
    names = dict.fromkeys(o.customer_name for o in orders)
    return [customer_aggregate(orders, name) for name in names]

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..domain import CustomerSummary, Order, OrderMetrics
from ..lifecycle import apply_status_update
from ..repositories.order_repo import OrderRepository
from ..reports import (
    customer_aggregate,
    customer_summaries,
    filter_by_date_range,
    filter_by_status,
    metrics,
    sort_by_field,
    status_counts,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardView:
    orders: list[Order]
    metrics: OrderMetrics
    status_counts: dict[str, int]

    def to_record(self) -> dict:
        return {
            "orders": [o.to_record() for o in self.orders],
            "metrics": self.metrics.to_record(),
            "statusCounts": self.status_counts,
        }


class OrderService:
    def __init__(self, *, order_repo: OrderRepository, strict_transitions: bool = False) -> None:
        self.order_repo = order_repo
        self.strict_transitions = strict_transitions

    def update_status(self, order_id: int, status: str) -> Order:
        order = self.order_repo.get(order_id)
        updated = apply_status_update(order, status, strict=self.strict_transitions)
        saved = self.order_repo.set_status(order_id=order_id, status=updated.status)
        logger.info("order #%s status %s -> %s", order_id, order.status, saved.status)
        return saved

    def dashboard(
        self,
        *,
        status: str = "all",
        date_range: str = "all",
        sort: str = "pickupDate",
        direction: str = "desc",
        today: Optional[date] = None,
    ) -> DashboardView:
        # metrics and counts cover every order, not just the filtered view
        orders = self.order_repo.list()
        view = filter_by_status(orders, status)
        view = filter_by_date_range(view, date_range, today=today)
        view = sort_by_field(view, sort, direction)
        return DashboardView(orders=view, metrics=metrics(orders), status_counts=status_counts(orders))

    def customer_details(self, customer_name: str) -> CustomerSummary:
        return customer_aggregate(self.order_repo.list(), customer_name)

    def customers(self) -> list[CustomerSummary]:
        return customer_summaries(self.order_repo.list())

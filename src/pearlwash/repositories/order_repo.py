from __future__ import annotations

from ..domain import Order
from ..store import RecordStore


class OrderRepository:
    collection = "orders"

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def list(self) -> list[Order]:
        return [Order.from_record(r) for r in self.store.list(self.collection)]

    def get(self, order_id: int) -> Order:
        return Order.from_record(self.store.get(self.collection, order_id))

    def create(self, payload: dict) -> Order:
        return Order.from_record(self.store.create(self.collection, payload))

    def update(self, order_id: int, partial: dict) -> Order:
        return Order.from_record(self.store.update(self.collection, order_id, partial))

    def set_status(self, *, order_id: int, status: str) -> Order:
        return self.update(order_id, {"status": status})

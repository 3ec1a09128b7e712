from __future__ import annotations

from ..domain import Service
from ..store import RecordStore


class ServiceRepository:
    collection = "services"

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def list(self) -> list[Service]:
        return [Service.from_record(r) for r in self.store.list(self.collection)]

    def get(self, service_id: int) -> Service:
        return Service.from_record(self.store.get(self.collection, service_id))

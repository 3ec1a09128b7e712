from __future__ import annotations

from ..store import RecordStore


class CustomerRepository:
    """The optional ``customers`` collection; order aggregates never read it."""

    collection = "customers"

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def create(self, *, name: str, phone: str | None, email: str | None, address: str | None) -> dict:
        return self.store.create(
            self.collection,
            {"name": name, "phone": phone, "email": email, "address": address},
        )

    def list(self) -> list[dict]:
        return self.store.list(self.collection)

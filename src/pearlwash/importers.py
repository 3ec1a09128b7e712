from __future__ import annotations

import csv
import logging
from pathlib import Path

from .repositories.customer_repo import CustomerRepository
from .store import COLLECTIONS, RecordStore, loads

logger = logging.getLogger(__name__)


class SeedImportError(Exception):
    pass


def import_seed_json(path: str | Path, store: RecordStore) -> dict[str, int]:
    """Load a ``db.json`` style file; records get fresh ids from the store."""
    p = Path(path)
    if not p.exists():
        raise SeedImportError(f"File not found: {p}")

    try:
        data = loads(p.read_text(encoding="utf-8"))
    except Exception as e:
        raise SeedImportError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SeedImportError("JSON must be an object mapping collection names to lists")

    counts: dict[str, int] = {}
    for collection in COLLECTIONS:
        records = data.get(collection, [])
        if not isinstance(records, list):
            raise SeedImportError(f"{collection!r} must be a list of objects")
        n = 0
        for obj in records:
            if not isinstance(obj, dict):
                continue
            store.create(collection, obj)
            n += 1
        counts[collection] = n
    logger.info("imported seed data from %s: %s", p, counts)
    return counts


def import_customers_csv(path: str | Path, customer_repo: CustomerRepository) -> int:
    p = Path(path)
    if not p.exists():
        raise SeedImportError(f"File not found: {p}")

    count = 0
    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        required = {"name", "phone", "email", "address"}
        if not required.issubset(set(reader.fieldnames or [])):
            raise SeedImportError(f"CSV must contain columns: {sorted(required)}")

        for row in reader:
            name = (row.get("name") or "").strip()
            if not name:
                continue
            phone = (row.get("phone") or "").strip() or None
            email = (row.get("email") or "").strip() or None
            address = (row.get("address") or "").strip() or None

            customer_repo.create(name=name, phone=phone, email=email, address=address)
            count += 1
    logger.info("imported %d customers from %s", count, p)
    return count

from __future__ import annotations

import copy
import json
import logging
import threading
from decimal import Decimal
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

COLLECTIONS = ("services", "orders", "customers")


class RecordNotFound(LookupError):
    def __init__(self, collection: str, record_id: int) -> None:
        super().__init__(f"{collection} #{record_id} not found")
        self.collection = collection
        self.record_id = record_id


class RecordStore:
    """Document collections addressed by numeric id.

    No validation, no locking beyond keeping a single write intact: the last
    write wins, and ``update`` replaces only the top-level keys it is given.
    """

    def list(self, collection: str) -> list[dict]:
        raise NotImplementedError

    def get(self, collection: str, record_id: int) -> dict:
        raise NotImplementedError

    def create(self, collection: str, payload: dict) -> dict:
        raise NotImplementedError

    def update(self, collection: str, record_id: int, partial: dict) -> dict:
        raise NotImplementedError


def _json_default(o):
    if isinstance(o, Decimal):
        return float(o)
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def dumps(data) -> str:
    return json.dumps(data, default=_json_default, ensure_ascii=False, indent=2)


def loads(text: str):
    return json.loads(text, parse_float=Decimal)


class MemoryStore(RecordStore):
    def __init__(self, data: Optional[dict] = None) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, list[dict]] = {name: [] for name in COLLECTIONS}
        for name, records in (data or {}).items():
            self._data[name] = [copy.deepcopy(r) for r in records]

    def _find(self, collection: str, record_id: int) -> dict:
        for rec in self._data.get(collection, []):
            if _same_id(rec.get("id"), record_id):
                return rec
        raise RecordNotFound(collection, record_id)

    def _next_id(self, collection: str) -> int:
        ids = [int(r["id"]) for r in self._data.get(collection, []) if str(r.get("id", "")).isdigit()]
        return max(ids, default=0) + 1

    def _persist(self, data: dict[str, list[dict]]) -> None:
        pass

    def _commit(self, collection: str, records: list[dict]) -> None:
        # self._data only changes once _persist has accepted the new state
        self._persist({**self._data, collection: records})
        self._data[collection] = records

    def list(self, collection: str) -> list[dict]:
        with self._lock:
            return copy.deepcopy(self._data.get(collection, []))

    def get(self, collection: str, record_id: int) -> dict:
        with self._lock:
            return copy.deepcopy(self._find(collection, record_id))

    def create(self, collection: str, payload: dict) -> dict:
        with self._lock:
            body = {k: copy.deepcopy(v) for k, v in payload.items() if k != "id"}
            rec = {"id": self._next_id(collection), **body}
            self._commit(collection, [*self._data.get(collection, []), rec])
            logger.debug("created %s #%s", collection, rec["id"])
            return copy.deepcopy(rec)

    def update(self, collection: str, record_id: int, partial: dict) -> dict:
        with self._lock:
            current = self._find(collection, record_id)
            rec = {**current, **{k: copy.deepcopy(v) for k, v in partial.items() if k != "id"}}
            self._commit(collection, [rec if r is current else r for r in self._data[collection]])
            logger.debug("updated %s #%s keys=%s", collection, record_id, sorted(partial))
            return copy.deepcopy(rec)


class JsonFileStore(MemoryStore):
    """Flat-file store in the ``{"services": [...], "orders": [...]}`` layout."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        data = None
        if self.path.exists():
            data = loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError(f"{self.path} must hold a JSON object of collections")
            logger.info("loaded %s (%s)", self.path, ", ".join(f"{k}={len(v)}" for k, v in data.items()))
        else:
            logger.info("%s does not exist yet, starting empty", self.path)
        super().__init__(data)

    def _persist(self, data: dict[str, list[dict]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(dumps(data), encoding="utf-8")
        tmp.replace(self.path)


def _same_id(stored, record_id) -> bool:
    try:
        return int(stored) == int(record_id)
    except (TypeError, ValueError):
        return False

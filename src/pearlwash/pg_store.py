from __future__ import annotations

import logging

from psycopg import Connection
from psycopg.types.json import Jsonb

from .db import Db
from .store import RecordNotFound, RecordStore, dumps

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS document (
  collection TEXT NOT NULL,
  id INTEGER NOT NULL,
  body JSONB NOT NULL,
  PRIMARY KEY (collection, id)
);
"""


def _jsonb(obj: dict) -> Jsonb:
    return Jsonb(obj, dumps=dumps)


def _row_to_record(row) -> dict:
    record_id, body = row
    return {"id": int(record_id), **{k: v for k, v in body.items() if k != "id"}}


class PgRecordStore(RecordStore):
    """Collections kept as jsonb rows of a single ``document`` table."""

    def __init__(self, db: Db) -> None:
        self.db = db

    def ensure_schema(self) -> None:
        with self.db.transaction() as conn:
            conn.execute(SCHEMA_SQL)

    def list(self, collection: str) -> list[dict]:
        with self.db.session() as conn:
            cur = conn.execute(
                "SELECT id, body FROM document WHERE collection = %s ORDER BY id;",
                (collection,),
            )
            return [_row_to_record(r) for r in cur.fetchall()]

    def get(self, collection: str, record_id: int) -> dict:
        with self.db.session() as conn:
            return self._get(conn, collection, record_id)

    def _get(self, conn: Connection, collection: str, record_id: int) -> dict:
        cur = conn.execute(
            "SELECT id, body FROM document WHERE collection = %s AND id = %s;",
            (collection, int(record_id)),
        )
        row = cur.fetchone()
        if not row:
            raise RecordNotFound(collection, record_id)
        return _row_to_record(row)

    def create(self, collection: str, payload: dict) -> dict:
        body = {k: v for k, v in payload.items() if k != "id"}
        with self.db.transaction() as conn:
            # serialises id allocation per collection until COMMIT
            conn.execute("SELECT pg_advisory_xact_lock(hashtext(%s));", (collection,))
            cur = conn.execute(
                """
                INSERT INTO document(collection, id, body)
                SELECT %s, COALESCE(MAX(id), 0) + 1, %s
                FROM document
                WHERE collection = %s
                RETURNING id, body;
                """,
                (collection, _jsonb(body), collection),
            )
            rec = _row_to_record(cur.fetchone())
        logger.debug("created %s #%s", collection, rec["id"])
        return rec

    def update(self, collection: str, record_id: int, partial_body: dict) -> dict:
        patch = {k: v for k, v in partial_body.items() if k != "id"}
        with self.db.transaction() as conn:
            # jsonb || jsonb replaces top-level keys only
            cur = conn.execute(
                """
                UPDATE document
                SET body = body || %s
                WHERE collection = %s AND id = %s
                RETURNING id, body;
                """,
                (_jsonb(patch), collection, int(record_id)),
            )
            row = cur.fetchone()
        if not row:
            raise RecordNotFound(collection, record_id)
        logger.debug("updated %s #%s keys=%s", collection, record_id, sorted(patch))
        return _row_to_record(row)

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from functools import partial
from typing import Iterator

import psycopg
from psycopg import Connection
from psycopg.types.json import set_json_loads

from .config import DbConfig

logger = logging.getLogger(__name__)


class DbError(Exception):
    pass


@dataclass(frozen=True)
class Db:
    cfg: DbConfig
    application_name: str = "pearlwash"

    def connect(self) -> Connection:
        try:
            # autocommit so transaction() controls BEGIN/COMMIT itself
            conn = psycopg.connect(
                host=self.cfg.host,
                port=self.cfg.port,
                dbname=self.cfg.name,
                user=self.cfg.user,
                password=self.cfg.password,
                sslmode=self.cfg.sslmode,
                application_name=self.application_name,
                autocommit=True,
            )
        except psycopg.Error as e:
            logger.error("connect to %s:%s/%s failed: %s", self.cfg.host, self.cfg.port, self.cfg.name, e)
            raise DbError(
                "Cannot connect to database. Check config.toml [db] and that PostgreSQL is running."
            ) from e
        set_json_loads(partial(json.loads, parse_float=Decimal), conn)
        return conn

    @contextmanager
    def session(self) -> Iterator[Connection]:
        conn = self.connect()
        try:
            yield conn
        except psycopg.Error as e:
            logger.error("query on %s/%s failed: %s", self.cfg.host, self.cfg.name, e)
            raise DbError(f"Database error: {e}") from e
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        with self.session() as conn:
            conn.execute("BEGIN;")
            try:
                yield conn
            except Exception:
                conn.execute("ROLLBACK;")
                raise
            conn.execute("COMMIT;")

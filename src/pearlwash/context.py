from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import AppConfig
from .db import Db
from .pg_store import PgRecordStore
from .repositories.customer_repo import CustomerRepository
from .repositories.order_repo import OrderRepository
from .repositories.service_repo import ServiceRepository
from .services.booking_service import BookingService
from .services.order_service import OrderService
from .services.tracking_service import TrackingService
from .store import JsonFileStore, MemoryStore, RecordStore

logger = logging.getLogger(__name__)


def open_store(cfg: AppConfig) -> RecordStore:
    backend = cfg.store.backend
    logger.info("using %s record store", backend)
    if backend == "memory":
        return MemoryStore()
    if backend == "postgres":
        store = PgRecordStore(Db(cfg.db))
        store.ensure_schema()
        return store
    return JsonFileStore(cfg.store.path)


@dataclass
class AppContext:
    store: RecordStore
    service_repo: ServiceRepository
    order_repo: OrderRepository
    customer_repo: CustomerRepository
    booking: BookingService
    tracking: TrackingService
    orders: OrderService


def build_context(cfg: AppConfig, store: Optional[RecordStore] = None) -> AppContext:
    store = store if store is not None else open_store(cfg)
    service_repo = ServiceRepository(store)
    order_repo = OrderRepository(store)
    return AppContext(
        store=store,
        service_repo=service_repo,
        order_repo=order_repo,
        customer_repo=CustomerRepository(store),
        booking=BookingService(
            service_repo=service_repo,
            order_repo=order_repo,
            time_slots=cfg.business.time_slots,
        ),
        tracking=TrackingService(order_repo=order_repo),
        orders=OrderService(order_repo=order_repo, strict_transitions=cfg.business.strict_transitions),
    )

from __future__ import annotations

import logging
import re

from ..domain import InvalidInput, Order
from ..repositories.order_repo import OrderRepository
from ..store import RecordNotFound

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)


def parse_order_id(raw) -> int:
    """Read an order id the way the tracking form does.

    Surrounding whitespace is ignored and a leading base-10 integer is
    enough, so ``" 42 "`` and ``"42abc"`` both give 42.
    """
    text = "" if raw is None else str(raw).strip()
    if not text:
        raise InvalidInput("Please enter an order ID")
    m = _LEADING_INT_RE.match(text)
    if not m:
        raise InvalidInput("Please enter a valid numeric order ID")
    return int(m.group(0))


class TrackingService:
    def __init__(self, *, order_repo: OrderRepository) -> None:
        self.order_repo = order_repo

    def track(self, raw) -> Order:
        order_id = parse_order_id(raw)
        try:
            return self.order_repo.get(order_id)
        except RecordNotFound:
            logger.info("tracking lookup for unknown order #%s", order_id)
            raise

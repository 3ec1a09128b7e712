"""HTTP client for the PearlWash API.

Every call is a single request: nothing is retried, a failure surfaces
immediately as ``TransportFailure`` (or ``RecordNotFound`` for a 404 on a
single-record call).
"""
from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Optional

import requests

from .domain import Order, Service
from .lifecycle import InvalidStatus, is_valid_status
from .store import RecordNotFound, dumps

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class TransportFailure(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, what: str, body: Optional[dict] = None, not_found=None):
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = dumps(body)
        try:
            response = self.session.request(method, url, data=data, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Error %s: %s", what, e)
            raise TransportFailure(f"Failed {what}") from e

        if response.status_code == 404 and not_found is not None:
            logger.error("Error %s: %s returned 404", what, url)
            raise RecordNotFound(*not_found)
        if not 200 <= response.status_code < 300:
            logger.error("Error %s: %s returned %s", what, url, response.status_code)
            raise TransportFailure(f"Failed {what}", status_code=response.status_code)

        try:
            return json.loads(response.text, parse_float=Decimal)
        except ValueError as e:
            logger.error("Error %s: response is not JSON", what)
            raise TransportFailure(f"Failed {what}: invalid response body") from e

    def get_services(self) -> list[Service]:
        data = self._request("GET", "/services", "fetching services")
        return [Service.from_record(r) for r in data]

    def get_orders(self) -> list[Order]:
        data = self._request("GET", "/orders", "fetching orders")
        return [Order.from_record(r) for r in data]

    def get_order(self, order_id: int) -> Order:
        data = self._request("GET", f"/orders/{order_id}", "fetching order", not_found=("orders", order_id))
        return Order.from_record(data)

    def create_order(self, payload: dict) -> Order:
        data = self._request("POST", "/orders", "creating order", body=payload)
        return Order.from_record(data)

    def update_order_status(self, order_id: int, status: str) -> Order:
        if not is_valid_status(status):
            raise InvalidStatus(status)
        data = self._request(
            "PATCH",
            f"/orders/{order_id}",
            "updating order status",
            body={"status": status},
            not_found=("orders", order_id),
        )
        return Order.from_record(data)

    def get_customers(self) -> list[dict]:
        return self._request("GET", "/customers", "fetching customers")

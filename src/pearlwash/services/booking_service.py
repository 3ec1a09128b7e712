from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from ..domain import TIME_SLOTS, InvalidInput, Order, OrderLineItem, Service, format_timestamp, line_items_total
from ..repositories.order_repo import OrderRepository
from ..repositories.service_repo import ServiceRepository

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"\+?[\d\s\-()]{10,}", re.ASCII)


class ValidationError(InvalidInput):
    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


@dataclass
class CustomerInfo:
    name: str
    phone: str
    address: str


@dataclass
class BookingRequest:
    customer: CustomerInfo
    service_ids: list[int] = field(default_factory=list)
    pickup_date: Any = None
    pickup_time: str = ""

    @classmethod
    def from_record(cls, rec: dict) -> BookingRequest:
        selected = rec.get("selectedServices", rec.get("serviceIds")) or []
        if not isinstance(selected, list):
            raise ValidationError({"selectedServices": "Please select at least one service"})
        try:
            service_ids = [int(s) for s in selected]
        except (TypeError, ValueError) as e:
            raise ValidationError({"selectedServices": "Service ids must be numbers"}) from e
        return cls(
            customer=CustomerInfo(
                name=str(rec.get("customerName") or ""),
                phone=str(rec.get("customerPhone") or ""),
                address=str(rec.get("address") or ""),
            ),
            service_ids=service_ids,
            pickup_date=rec.get("pickupDate"),
            pickup_time=str(rec.get("pickupTime") or ""),
        )


def _catalog_index(catalog: Iterable[Service]) -> dict[int, Service]:
    return {s.id: s for s in catalog}


def compute_total(service_ids: Iterable[int], catalog: Iterable[Service]) -> Decimal:
    by_id = _catalog_index(catalog)
    total = Decimal("0")
    for service_id in service_ids:
        service = by_id.get(service_id)
        if service is None:
            logger.warning("service #%s is not in the catalog; it adds 0 to the total", service_id)
            continue
        total += service.price
    return total


def build_order_payload(
    customer: CustomerInfo,
    service_ids: Iterable[int],
    catalog: Iterable[Service],
    pickup_date: date,
    pickup_time: str,
    *,
    now: Optional[datetime] = None,
) -> dict:
    by_id = _catalog_index(catalog)
    items = []
    for service_id in service_ids:
        service = by_id.get(service_id)
        if service is None:
            logger.warning("service #%s is not in the catalog; left out of the order", service_id)
            continue
        items.append(
            OrderLineItem(service_id=service.id, service_name=service.name, quantity=1, price=service.price)
        )

    now = now or datetime.now(timezone.utc)
    return {
        "customerName": customer.name.strip(),
        "customerPhone": customer.phone.strip(),
        "address": customer.address.strip(),
        "services": [i.to_record() for i in items],
        "pickupDate": pickup_date.isoformat(),
        "pickupTime": pickup_time,
        "status": "scheduled",
        "totalPrice": line_items_total(items),
        "createdAt": format_timestamp(now),
    }


def validate_booking(
    request: BookingRequest,
    time_slots: Iterable[str] = TIME_SLOTS,
    today: Optional[date] = None,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    customer = request.customer

    if not customer.name.strip():
        errors["customerName"] = "Name is required"

    if not customer.phone.strip():
        errors["customerPhone"] = "Phone number is required"
    elif not PHONE_RE.fullmatch(customer.phone):
        errors["customerPhone"] = "Please enter a valid phone number"

    if not customer.address.strip():
        errors["address"] = "Address is required"

    if not request.service_ids:
        errors["selectedServices"] = "Please select at least one service"

    if not request.pickup_date:
        errors["pickupDate"] = "Pickup date is required"
    else:
        try:
            pickup = _as_date(request.pickup_date)
        except ValueError:
            errors["pickupDate"] = "Please enter a valid pickup date"
        else:
            if pickup < (today or date.today()):
                errors["pickupDate"] = "Pickup date cannot be in the past"

    if not request.pickup_time:
        errors["pickupTime"] = "Pickup time is required"
    elif request.pickup_time not in tuple(time_slots):
        errors["pickupTime"] = "Please choose one of the available time slots"

    return errors


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


class BookingService:
    def __init__(
        self,
        *,
        service_repo: ServiceRepository,
        order_repo: OrderRepository,
        time_slots: Iterable[str] = TIME_SLOTS,
    ) -> None:
        self.service_repo = service_repo
        self.order_repo = order_repo
        self.time_slots = tuple(time_slots)

    def submit(self, request: BookingRequest, *, today: Optional[date] = None) -> Order:
        errors = validate_booking(request, self.time_slots, today=today)
        if errors:
            raise ValidationError(errors)

        catalog = self.service_repo.list()
        payload = build_order_payload(
            request.customer,
            request.service_ids,
            catalog,
            _as_date(request.pickup_date),
            request.pickup_time,
        )
        if not payload["services"]:
            raise ValidationError({"selectedServices": "None of the selected services are available"})

        order = self.order_repo.create(payload)
        logger.info(
            "booked order #%s for %s: %d service(s), total %s",
            order.id,
            order.customer_name,
            len(order.services),
            order.total_price,
        )
        return order

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Literal, Optional

OrderStatus = Literal["scheduled", "picked-up", "in-progress", "ready", "delivered"]

ORDER_STATUSES: tuple[str, ...] = ("scheduled", "picked-up", "in-progress", "ready", "delivered")

TIME_SLOTS: tuple[str, ...] = (
    "8:00 AM", "9:00 AM", "10:00 AM", "11:00 AM",
    "12:00 PM", "1:00 PM", "2:00 PM", "3:00 PM",
    "4:00 PM", "5:00 PM", "6:00 PM",
)


class InvalidInput(ValueError):
    pass


def to_decimal(value: Any) -> Decimal:
    """Money values arrive as Decimal, int, float or numeric strings."""
    if value is None or value == "":
        return Decimal("0")
    try:
        # str() first so 45.5 becomes Decimal("45.5"), not the binary expansion
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as e:
        raise InvalidInput(f"Not a number: {value!r}") from e
    if not d.is_finite():
        raise InvalidInput(f"Not a finite amount: {value!r}")
    return d


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as e:
        raise InvalidInput(f"Not a date: {value!r}") from e


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError as e:
        raise InvalidInput(f"Not a timestamp: {value!r}") from e


def format_timestamp(value: datetime) -> str:
    s = value.isoformat(timespec="milliseconds")
    return s[:-6] + "Z" if s.endswith("+00:00") else s


@dataclass(frozen=True)
class Service:
    id: int
    name: str
    description: str
    duration: str
    price: Decimal
    icon: str = ""
    name_ar: Optional[str] = None
    description_ar: Optional[str] = None
    duration_ar: Optional[str] = None

    @classmethod
    def from_record(cls, rec: dict) -> Service:
        return cls(
            id=int(rec["id"]),
            name=str(rec.get("name", "")),
            description=str(rec.get("description", "")),
            duration=str(rec.get("duration", "")),
            price=to_decimal(rec.get("price")),
            icon=str(rec.get("icon", "")),
            name_ar=rec.get("nameAr"),
            description_ar=rec.get("descriptionAr"),
            duration_ar=rec.get("durationAr"),
        )

    def to_record(self) -> dict:
        rec = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "duration": self.duration,
            "price": self.price,
            "icon": self.icon,
        }
        for key, value in (
            ("nameAr", self.name_ar),
            ("descriptionAr", self.description_ar),
            ("durationAr", self.duration_ar),
        ):
            if value is not None:
                rec[key] = value
        return rec


@dataclass(frozen=True)
class OrderLineItem:
    service_id: int
    service_name: str
    quantity: int
    price: Decimal

    @property
    def extended_price(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_record(cls, rec: dict) -> OrderLineItem:
        return cls(
            service_id=int(rec["serviceId"]),
            service_name=str(rec.get("serviceName", "")),
            quantity=int(rec.get("quantity", 1)),
            price=to_decimal(rec.get("price")),
        )

    def to_record(self) -> dict:
        return {
            "serviceId": self.service_id,
            "serviceName": self.service_name,
            "quantity": self.quantity,
            "price": self.price,
        }


@dataclass(frozen=True)
class Order:
    id: int
    customer_name: str
    customer_phone: str
    address: str
    services: tuple[OrderLineItem, ...]
    pickup_date: date
    pickup_time: str
    status: OrderStatus
    total_price: Decimal
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, rec: dict) -> Order:
        return cls(
            id=int(rec["id"]),
            customer_name=str(rec.get("customerName", "")),
            customer_phone=str(rec.get("customerPhone", "")),
            address=str(rec.get("address", "")),
            services=tuple(OrderLineItem.from_record(s) for s in rec.get("services") or []),
            pickup_date=parse_date(rec["pickupDate"]),
            pickup_time=str(rec.get("pickupTime", "")),
            status=rec.get("status", "scheduled"),
            total_price=to_decimal(rec.get("totalPrice")),
            created_at=parse_timestamp(rec.get("createdAt")),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "address": self.address,
            "services": [s.to_record() for s in self.services],
            "pickupDate": self.pickup_date.isoformat(),
            "pickupTime": self.pickup_time,
            "status": self.status,
            "totalPrice": self.total_price,
            "createdAt": format_timestamp(self.created_at) if self.created_at else None,
        }


def line_items_total(items) -> Decimal:
    return sum((i.extended_price for i in items), Decimal("0"))


@dataclass(frozen=True)
class OrderMetrics:
    total: int
    pending: int
    in_progress: int
    completed: int

    def to_record(self) -> dict:
        return {
            "total": self.total,
            "pending": self.pending,
            "inProgress": self.in_progress,
            "completed": self.completed,
        }


@dataclass(frozen=True)
class CustomerSummary:
    customer_name: str
    total_spent: Decimal
    order_count: int
    most_recent_order: Optional[Order]
    orders: tuple[Order, ...] = field(default=(), repr=False)

    def to_record(self, include_orders: bool = False) -> dict:
        rec = {
            "customerName": self.customer_name,
            "totalSpent": self.total_spent,
            "orderCount": self.order_count,
            "mostRecentOrder": self.most_recent_order.to_record() if self.most_recent_order else None,
        }
        if include_orders:
            rec["orders"] = [o.to_record() for o in self.orders]
        return rec

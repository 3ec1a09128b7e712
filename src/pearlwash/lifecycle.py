"""Order status flow.

Any of the five statuses may be set from any other one. The optional strict
mode only allows moving to the next status in the flow.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Literal

from .domain import ORDER_STATUSES, InvalidInput, Order

StepState = Literal["completed", "current", "upcoming"]

STATUS_FLOW = ORDER_STATUSES

STATUS_LABELS = {
    "scheduled": "Scheduled",
    "picked-up": "Picked Up",
    "in-progress": "In Progress",
    "ready": "Ready",
    "delivered": "Delivered",
}

STATUS_DESCRIPTIONS = {
    "scheduled": "Order placed",
    "picked-up": "Items collected",
    "in-progress": "Being processed",
    "ready": "Ready for delivery",
    "delivered": "Order completed",
}

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "scheduled": frozenset({"picked-up"}),
    "picked-up": frozenset({"in-progress"}),
    "in-progress": frozenset({"ready"}),
    "ready": frozenset({"delivered"}),
    "delivered": frozenset(),
}


class InvalidStatus(InvalidInput):
    def __init__(self, status) -> None:
        super().__init__(f"Invalid status {status!r}; expected one of {', '.join(STATUS_FLOW)}")
        self.status = status


class InvalidTransition(InvalidStatus):
    def __init__(self, current: str, new: str) -> None:
        InvalidInput.__init__(self, f"Cannot move an order from {current!r} to {new!r}")
        self.status = new
        self.current = current


def is_valid_status(status) -> bool:
    return status in STATUS_FLOW


def check_transition(current: str, new: str) -> None:
    if not is_valid_status(new):
        raise InvalidStatus(new)
    if current == new:
        return
    if new not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransition(current, new)


def apply_status_update(order: Order, new_status: str, *, strict: bool = False) -> Order:
    if not is_valid_status(new_status):
        raise InvalidStatus(new_status)
    if strict:
        check_transition(order.status, new_status)
    return dataclasses.replace(order, status=new_status)


def status_display_index(status: str) -> int:
    try:
        return STATUS_FLOW.index(status)
    except ValueError:
        return -1


@dataclass(frozen=True)
class TimelineStep:
    status: str
    label: str
    description: str
    state: StepState

    def to_record(self) -> dict:
        return {
            "status": self.status,
            "label": self.label,
            "description": self.description,
            "state": self.state,
        }


def step_state(step_index: int, current_index: int) -> StepState:
    if step_index < current_index:
        return "completed"
    if step_index == current_index:
        return "current"
    return "upcoming"


def timeline(status: str) -> list[TimelineStep]:
    current = status_display_index(status)
    return [
        TimelineStep(
            status=s,
            label=STATUS_LABELS[s],
            description=STATUS_DESCRIPTIONS[s],
            state=step_state(i, current),
        )
        for i, s in enumerate(STATUS_FLOW)
    ]

"""Delivery and pickup status transition helpers."""

from __future__ import annotations

from datetime import datetime

from bakery.models.order import Order

DELIVERY_STATUSES: list[str] = ["pending", "confirmed", "preparing", "out_for_delivery", "delivered"]
PICKUP_STATUSES: list[str] = ["pending", "confirmed", "preparing", "ready_for_pickup", "picked_up"]


class StatusTransitionError(Exception):
    """Raised when an order cannot move to the requested fulfillment status."""


def _allowed_transitions(statuses: list[str]) -> dict[str, set[str]]:
    transitions: dict[str, set[str]] = {status: set() for status in statuses}
    for current, following in zip(statuses, statuses[1:]):
        transitions[current].add(following)
    return transitions


ALLOWED_DELIVERY_TRANSITIONS: dict[str, set[str]] = _allowed_transitions(DELIVERY_STATUSES)
ALLOWED_PICKUP_TRANSITIONS: dict[str, set[str]] = _allowed_transitions(PICKUP_STATUSES)


def can_transition(current: str | None, new: str, *, method: str) -> bool:
    """Return whether a delivery/pickup status can move from current to new."""
    transitions = ALLOWED_DELIVERY_TRANSITIONS if method == "delivery" else ALLOWED_PICKUP_TRANSITIONS
    current = current or "pending"
    if current == new:
        return new in transitions
    return new in transitions.get(current, set())


def set_fulfillment_status(order: Order, new_status: str, now: datetime) -> str | None:
    """Apply new status to the order's fulfillment column and return the previous one."""
    method = order.fulfillment_method
    if method not in {"delivery", "pickup"}:
        raise StatusTransitionError(f"Order {order.id} has no fulfillment method")

    current = order.delivery_status if method == "delivery" else order.pickup_status
    if not can_transition(current, new_status, method=method):
        raise StatusTransitionError(f"Cannot move {method} status from {current or 'pending'} to {new_status}")

    if method == "delivery":
        order.delivery_status = new_status
    else:
        order.pickup_status = new_status
    order.status_updated_at = now
    return current

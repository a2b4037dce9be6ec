from __future__ import annotations

from datetime import datetime

from shopfront.app.models import Order

PENDING = "pending"
SHIPPED = "shipped"
DELIVERED = "delivered"
CANCELLED = "cancelled"
RETURNED = "returned"

STATUSES = (PENDING, SHIPPED, DELIVERED, CANCELLED, RETURNED)

TRANSITIONS = {
    PENDING: {SHIPPED, CANCELLED},
    SHIPPED: {DELIVERED},
    DELIVERED: {RETURNED},
    CANCELLED: set(),
    RETURNED: set(),
}

# Stock goes back on the shelf when an order ends in one of these.
RESTOCKING = {CANCELLED, RETURNED}


class StatusChangeError(ValueError):
    pass


def can_transition(current: str, new: str) -> bool:
    return new in TRANSITIONS.get(current, set())


def change_status(order: Order, new: str) -> None:
    """Move ``order`` to ``new``, restocking when the order is undone.

    Caller commits.
    """
    if new not in STATUSES:
        raise StatusChangeError(f"Unknown status '{new}'")
    if not can_transition(order.status, new):
        raise StatusChangeError(f"Cannot change order from {order.status} to {new}")

    if new in RESTOCKING:
        for item in order.items:
            if item.product is not None:
                item.product.stock += item.quantity

    order.status = new
    order.updated_at = datetime.utcnow()

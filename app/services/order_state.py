"""Order status rules.

Customers see a forward flow ``pending -> in_progress -> completed`` with
``cancelled`` reachable while work has not finished. Administrators may move
an order to any status; the only rule other code depends on is which
statuses accept invoices.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Tuple

from app.schemas.order import Order, OrderStatus
from app.services.exceptions import InvoiceNotAllowedError

logger = logging.getLogger(__name__)

ORDER_STATUSES: Tuple[str, ...] = ("pending", "in_progress", "completed", "cancelled")
TERMINAL_STATUSES: FrozenSet[str] = frozenset({"completed", "cancelled"})
INVOICEABLE_STATUSES: FrozenSet[str] = frozenset({"in_progress", "completed"})

FORWARD_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"in_progress", "cancelled"}),
    "in_progress": frozenset({"completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}


def is_forward_transition(current: str, new: str) -> bool:
    return new in FORWARD_TRANSITIONS.get(current, frozenset())


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def set_status(order: Order, new_status: OrderStatus) -> Order:
    """Return a copy of ``order`` with ``new_status``; administrators may force any move."""

    if order.status != new_status and not is_forward_transition(order.status, new_status):
        logger.info(
            "Forcing order %s from %s to %s", order.id, order.status, new_status
        )
    return order.model_copy(update={"status": new_status})


def can_invoice(order: Order) -> bool:
    return order.status in INVOICEABLE_STATUSES


def ensure_invoiceable(order: Order) -> None:
    if not can_invoice(order):
        raise InvoiceNotAllowedError(
            f"Order {order.id} is {order.status}; invoices need an order that is in progress or completed"
        )

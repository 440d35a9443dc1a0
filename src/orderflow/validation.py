"""Precondition checks run before any state is mutated."""

from __future__ import annotations

from typing import Optional

from . import errors
from .types import Inventory, LineItem, Order, User, ValidationResult

ACTIVE_STATUS = "active"


def validate_order(order: Optional[Order], user: Optional[User], inventory: Optional[Inventory] = None) -> ValidationResult:
    """Check order-level preconditions; the first failing check wins.

    ``inventory`` is accepted for signature parity with the processor but is
    checked per item during reservation, not here.
    """
    if order is None:
        return ValidationResult.fail(errors.order_not_found())
    if user is None:
        return ValidationResult.fail(errors.user_not_found())
    if user.status != ACTIVE_STATUS:
        return ValidationResult.fail(errors.user_inactive())
    if not order.items:
        return ValidationResult.fail(errors.empty_order())
    return ValidationResult.ok()


def validate_inventory(item: LineItem, inventory: Inventory) -> ValidationResult:
    entry = inventory.get(item.id)
    if entry is None:
        return ValidationResult.fail(errors.item_not_found(item.id))
    if entry.quantity < item.quantity:
        return ValidationResult.fail(errors.insufficient_inventory(item.id))
    return ValidationResult.ok()

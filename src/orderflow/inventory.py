"""All-or-nothing stock reservation over a caller-owned inventory mapping.

The mapping has no native transactions, so a failed reservation is undone by
compensation: every entry reserved so far gets back exactly the amount taken.
Items after the failing one are never touched.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from .types import Inventory, LineItem, ReservationResult
from .validation import validate_inventory

logger = logging.getLogger(__name__)


def reserve_inventory(items: Iterable[LineItem], inventory: Inventory) -> ReservationResult:
    reserved: List[LineItem] = []

    for item in items:
        check = validate_inventory(item, inventory)
        if not check.valid:
            rollback_inventory(reserved, inventory)
            logger.debug("Reservation failed at item %s; rolled back %s item(s)", item.id, len(reserved))
            return ReservationResult(success=False, error=check.error)

        inventory[item.id].quantity -= item.quantity
        reserved.append(item)

    return ReservationResult(success=True, reserved=tuple(reserved))


def rollback_inventory(items: Iterable[LineItem], inventory: Inventory) -> None:
    """Add each item's quantity back to its entry. Missing entries are skipped."""
    for item in items:
        entry = inventory.get(item.id)
        if entry is not None:
            entry.quantity += item.quantity

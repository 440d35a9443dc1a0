"""End-to-end order processing.

The pipeline is linear and single pass::

    START -> VALIDATED -> RESERVED -> PRICED -> CONFIRMED
      |          |
      +----------+--> FAILED

Failures are returned as ``ProcessResult`` values. Validation failures happen
before any mutation; reservation failures are rolled back by the inventory
manager before they surface. Pricing is total for finite inputs; if a
clock or pricing fault still raises after reservation, the reserved stock is
released before the exception propagates.
"""

from __future__ import annotations

import logging
from typing import Optional

from .clock import Clock, SystemClock, iso_timestamp, month_index
from .config import Config, get_config
from .errors import OrderFailure
from .events import LoggingObserver, OrderObserver, SafeObserver
from .inventory import reserve_inventory, rollback_inventory
from .loyalty import calculate_loyalty_points, update_loyalty_points
from .notifications import NotificationTransport, dispatch_notifications, plan_notifications
from .pricing import price_order
from .types import Inventory, Order, OrderRecord, OrderState, ProcessResult, User
from .validation import validate_order

logger = logging.getLogger(__name__)

__all__ = ["OrderProcessor", "process_order", "SUCCESS_MESSAGE"]

SUCCESS_MESSAGE = "Order processed successfully"
_MISSING_ORDER_ID = "<missing>"


class OrderProcessor:
    """Runs orders through the pipeline with injected collaborators.

    The processor holds no per-order state, so one instance can serve any
    number of sequential calls. Without a transport, notification intents are
    only reported on the result. It does not lock ``inventory`` or ``user``;
    callers running orders concurrently must serialize access per entry.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        observer: Optional[OrderObserver] = None,
        transport: Optional[NotificationTransport] = None,
    ):
        self.clock = clock or SystemClock()
        self.observer = SafeObserver(observer or LoggingObserver())
        self.transport = transport

    def _fail(self, order: Optional[Order], failure: OrderFailure) -> ProcessResult:
        order_id = order.id if order is not None else _MISSING_ORDER_ID
        logger.debug("Order %s -> %s (%s)", order_id, OrderState.FAILED.value, failure.code.value)
        self.observer.order_failed(order_id, failure.explanation)
        return ProcessResult(success=False, state=OrderState.FAILED, failure=failure)

    def process(
        self,
        order: Optional[Order],
        user: Optional[User],
        inventory: Inventory,
        config: Optional[Config] = None,
    ) -> ProcessResult:
        config = config or get_config()

        validation = validate_order(order, user, inventory)
        if not validation.valid:
            return self._fail(order, validation.error)
        logger.debug("Order %s -> %s", order.id, OrderState.VALIDATED.value)

        reservation = reserve_inventory(order.items, inventory)
        if not reservation.success:
            return self._fail(order, reservation.error)
        logger.debug("Order %s -> %s (%s item(s))", order.id, OrderState.RESERVED.value, len(reservation.reserved))

        try:
            breakdown = price_order(
                order.items,
                user.tier,
                user.state,
                order.payment_method,
                config,
                month_index(self.clock),
                on_item=lambda item, price: self.observer.item_processed(item.id, user.id, price),
            )
            logger.debug("Order %s -> %s (total=%s)", order.id, OrderState.PRICED.value, breakdown.total)

            record = OrderRecord(
                order_id=order.id,
                user_id=user.id,
                total=breakdown.total,
                timestamp=iso_timestamp(self.clock),
            )
            points = calculate_loyalty_points(breakdown.total, user.tier)
        except Exception:
            rollback_inventory(reservation.reserved, inventory)
            logger.exception("Order %s failed after reservation; released %s item(s)", order.id, len(reservation.reserved))
            raise

        notifications = plan_notifications(user, breakdown.total)
        dispatch_notifications(notifications, self.transport)

        update_loyalty_points(user, points)

        self.observer.order_succeeded(order.id, breakdown.total)
        logger.debug("Order %s -> %s", order.id, OrderState.CONFIRMED.value)

        return ProcessResult(
            success=True,
            state=OrderState.CONFIRMED,
            order=record,
            message=SUCCESS_MESSAGE,
            breakdown=breakdown,
            loyalty_points_awarded=points,
            notifications=notifications,
        )


def process_order(
    order: Optional[Order],
    user: Optional[User],
    inventory: Inventory,
    config: Optional[Config] = None,
    *,
    clock: Optional[Clock] = None,
    observer: Optional[OrderObserver] = None,
    transport: Optional[NotificationTransport] = None,
) -> ProcessResult:
    processor = OrderProcessor(clock=clock, observer=observer, transport=transport)
    return processor.process(order, user, inventory, config)

"""Side-channel observers for pipeline events."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class OrderObserver(Protocol):
    def item_processed(self, item_id: str, user_id: str, price: float) -> None: ...

    def order_succeeded(self, order_id: str, total: float) -> None: ...

    def order_failed(self, order_id: str, error: str) -> None: ...


class LoggingObserver:
    def item_processed(self, item_id: str, user_id: str, price: float) -> None:
        logger.info("Processed item %s for user %s: $%s", item_id, user_id, price)

    def order_succeeded(self, order_id: str, total: float) -> None:
        logger.info("Order %s processed successfully. Total: $%s", order_id, total)

    def order_failed(self, order_id: str, error: str) -> None:
        logger.error("Order %s failed: %s", order_id, error)


class SafeObserver:
    """Wraps an observer so its exceptions are logged instead of propagated."""

    def __init__(self, inner: OrderObserver):
        self._inner = inner

    def _warn(self, event: str, exc: Exception) -> None:
        logger.warning("Observer %s raised in %s: %s", type(self._inner).__name__, event, exc)

    def item_processed(self, item_id: str, user_id: str, price: float) -> None:
        try:
            self._inner.item_processed(item_id, user_id, price)
        except Exception as exc:
            self._warn("item_processed", exc)

    def order_succeeded(self, order_id: str, total: float) -> None:
        try:
            self._inner.order_succeeded(order_id, total)
        except Exception as exc:
            self._warn("order_succeeded", exc)

    def order_failed(self, order_id: str, error: str) -> None:
        try:
            self._inner.order_failed(order_id, error)
        except Exception as exc:
            self._warn("order_failed", exc)

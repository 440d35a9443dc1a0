"""Failure taxonomy for order processing and errors raised outside the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FailureCode(str, Enum):
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_INACTIVE = "USER_INACTIVE"
    EMPTY_ORDER = "EMPTY_ORDER"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"


_INVENTORY_CODES = {FailureCode.ITEM_NOT_FOUND, FailureCode.INSUFFICIENT_INVENTORY}


@dataclass(frozen=True)
class OrderFailure:
    """Caller-visible reason an order could not be processed.

    Failures are values: validation and reservation return them, and the
    processor folds them into a ``ProcessResult``. None of them are retryable.
    """

    code: FailureCode
    explanation: str
    item_id: Optional[str] = None

    @property
    def category(self) -> str:
        return "INVENTORY" if self.code in _INVENTORY_CODES else "PRECONDITION"

    def __str__(self) -> str:
        return self.explanation


def order_not_found() -> OrderFailure:
    return OrderFailure(FailureCode.ORDER_NOT_FOUND, "Order not found")


def user_not_found() -> OrderFailure:
    return OrderFailure(FailureCode.USER_NOT_FOUND, "User not found")


def user_inactive() -> OrderFailure:
    return OrderFailure(FailureCode.USER_INACTIVE, "User account is not active")


def empty_order() -> OrderFailure:
    return OrderFailure(FailureCode.EMPTY_ORDER, "Order has no items")


def item_not_found(item_id: str) -> OrderFailure:
    return OrderFailure(FailureCode.ITEM_NOT_FOUND, f"Item {item_id} not found in inventory", item_id)


def insufficient_inventory(item_id: str) -> OrderFailure:
    return OrderFailure(FailureCode.INSUFFICIENT_INVENTORY, f"Insufficient inventory for item {item_id}", item_id)


class OrderflowError(Exception):
    """Base class for errors raised while loading scenarios or configuration."""

    def __init__(self, error_code: str, category: str, explanation: str, actionable: bool = True):
        self.error_code = error_code
        self.category = category
        self.explanation = explanation
        self.actionable = actionable
        super().__init__(f"[{self.category}:{self.error_code}] {self.explanation}")


class PayloadFormatError(OrderflowError):
    def __init__(self, explanation: str, actionable: bool = True):
        super().__init__("PAYLOAD_FORMAT", "PAYLOAD", explanation, actionable)


class ConfigError(OrderflowError):
    def __init__(self, explanation: str, actionable: bool = True):
        super().__init__("CONFIG_VALUE", "CONFIG", explanation, actionable)

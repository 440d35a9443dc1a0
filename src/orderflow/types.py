"""Typed data model shared by validation, pricing, inventory and the processor.

Inputs (``Order``, ``LineItem``) are frozen. ``User`` and ``InventoryEntry`` are
owned by the caller and mutated in place by a successful run; the processor
assumes exclusive access to them for the duration of one call.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from .errors import FailureCode, OrderFailure


class Tier(str, Enum):
    """User classification driving discounts and the loyalty multiplier."""

    PREMIUM = "premium"
    REGULAR = "regular"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: Optional[str], ignore_case: bool = False) -> "Tier":
        if tag is None:
            return cls.OTHER
        value = tag.lower() if ignore_case else tag
        if value == cls.PREMIUM.value:
            return cls.PREMIUM
        if value == cls.REGULAR.value:
            return cls.REGULAR
        return cls.OTHER


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "PaymentMethod":
        """Case-insensitive lookup; unknown or missing methods map to ``OTHER``."""
        if not tag:
            return cls.OTHER
        value = tag.lower()
        for method in (cls.CREDIT_CARD, cls.PAYPAL):
            if value == method.value:
                return method
        return cls.OTHER


class OrderState(str, Enum):
    """Pipeline states. Each run moves forward only and ends in CONFIRMED or FAILED."""

    START = "start"
    VALIDATED = "validated"
    RESERVED = "reserved"
    PRICED = "priced"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class LineItem:
    id: str
    quantity: int
    price: float


@dataclass(frozen=True)
class Order:
    id: str
    items: Tuple[LineItem, ...] = ()
    payment_method: Optional[str] = None


@dataclass
class User:
    id: str
    status: str
    tier: str
    state: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    loyalty_points: Optional[int] = None


@dataclass
class InventoryEntry:
    quantity: int


Inventory = Dict[str, InventoryEntry]


@dataclass(frozen=True)
class Notification:
    """Delivery intent. The transport decides how (and whether) it is sent."""

    type: Literal["email", "sms"]
    recipient: str


@dataclass(frozen=True)
class PriceBreakdown:
    """Stages of the total in composition order. Only ``total`` is rounded."""

    subtotal: float
    shipping: float
    tax: float
    payment_fee: float
    total: float


@dataclass(frozen=True)
class OrderRecord:
    order_id: str
    user_id: str
    total: float
    timestamp: str
    status: str = "confirmed"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[OrderFailure] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, error: OrderFailure) -> "ValidationResult":
        return cls(valid=False, error=error)


@dataclass(frozen=True)
class ReservationResult:
    success: bool
    reserved: Tuple[LineItem, ...] = ()
    error: Optional[OrderFailure] = None


@dataclass(frozen=True)
class ProcessResult:
    """Public outcome of ``process_order``.

    Guarantees:
    - ``success`` implies ``order`` and ``message`` are set and ``failure`` is None.
    - failure implies ``failure`` is set and no OrderRecord was created.
    """

    success: bool
    state: OrderState
    order: Optional[OrderRecord] = None
    message: Optional[str] = None
    failure: Optional[OrderFailure] = None
    breakdown: Optional[PriceBreakdown] = None
    loyalty_points_awarded: int = 0
    notifications: List[Notification] = field(default_factory=list)

    @property
    def error(self) -> Optional[str]:
        return None if self.failure is None else self.failure.explanation

    @property
    def error_code(self) -> Optional[FailureCode]:
        return None if self.failure is None else self.failure.code

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {
                "success": False,
                "state": self.state.value,
                "error": self.error,
                "error_code": self.error_code.value if self.error_code else None,
            }
        return {
            "success": True,
            "state": self.state.value,
            "order": asdict(self.order) if self.order else None,
            "message": self.message,
            "breakdown": asdict(self.breakdown) if self.breakdown else None,
            "loyalty_points_awarded": self.loyalty_points_awarded,
            "notifications": [asdict(n) for n in self.notifications],
        }

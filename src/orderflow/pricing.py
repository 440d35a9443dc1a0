"""Pure pricing functions.

Composition order is fixed and each stage feeds the next:

    subtotal = sum(item_price(item))
    total    = subtotal + shipping_cost(subtotal)
    total   += calculate_tax(total, ...)
    total   += payment_fee(total, ...)
    total    = round2(total)

Tax and fee apply to the running total, not the subtotal. Nothing is rounded
before the final step.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Callable, Iterable, Optional

from .config import Config
from .types import LineItem, PaymentMethod, PriceBreakdown, Tier

PREMIUM_HIGH_VOLUME_RATE = 0.15
PREMIUM_MID_VOLUME_RATE = 0.10
PREMIUM_LOW_VOLUME_RATE = 0.05
REGULAR_HIGH_VOLUME_RATE = 0.05
HIGH_VOLUME_QUANTITY = 10
MID_VOLUME_QUANTITY = 5

WINTER_MONTHS = frozenset({11, 0})
WINTER_RATE = 0.10
SUMMER_MONTHS = frozenset({5, 6, 7})
SUMMER_RATE = 0.07

FREE_SHIPPING_THRESHOLD = 100
REDUCED_SHIPPING_THRESHOLD = 50
STANDARD_SHIPPING = 10
REDUCED_SHIPPING = 5

TAX_RATES = {
    "CA": 0.0725,
    "NY": 0.08,
    "TX": 0.0625,
}
DEFAULT_TAX_RATE = 0.05

PAYMENT_FEE_RATES = {
    PaymentMethod.CREDIT_CARD: 0.029,
    PaymentMethod.PAYPAL: 0.034,
    PaymentMethod.OTHER: 0.0,
}

_CENT = Decimal("0.01")
# Enough digits to quantize the largest finite float (~1.8e308) to cents.
_ROUNDING_PRECISION = 400


def item_base_price(item: LineItem) -> float:
    return item.price * item.quantity


def user_type_discount_rate(user_type: Optional[str], quantity: int) -> float:
    """Volume discount by tier. Thresholds are strict: 10 units is mid tier."""
    tier = Tier.from_tag(user_type)
    if tier is Tier.PREMIUM:
        if quantity > HIGH_VOLUME_QUANTITY:
            return PREMIUM_HIGH_VOLUME_RATE
        if quantity > MID_VOLUME_QUANTITY:
            return PREMIUM_MID_VOLUME_RATE
        return PREMIUM_LOW_VOLUME_RATE
    if tier is Tier.REGULAR and quantity > HIGH_VOLUME_QUANTITY:
        return REGULAR_HIGH_VOLUME_RATE
    return 0.0


def seasonal_discount_rate(month_index: int) -> float:
    if month_index in WINTER_MONTHS:
        return WINTER_RATE
    if month_index in SUMMER_MONTHS:
        return SUMMER_RATE
    return 0.0


def apply_discount(price: float, rate: float) -> float:
    return price * (1 - rate)


def item_price(item: LineItem, user_type: Optional[str], month_index: int) -> float:
    """Base price discounted by tier, then by season, on the reduced amount."""
    price = item_base_price(item)
    price = apply_discount(price, user_type_discount_rate(user_type, item.quantity))
    return apply_discount(price, seasonal_discount_rate(month_index))


def shipping_cost(subtotal: float) -> float:
    if subtotal >= FREE_SHIPPING_THRESHOLD:
        return 0
    if subtotal >= REDUCED_SHIPPING_THRESHOLD:
        return REDUCED_SHIPPING
    return STANDARD_SHIPPING


def tax_rate(user_state: Optional[str]) -> float:
    return TAX_RATES.get(user_state or "", DEFAULT_TAX_RATE)


def calculate_tax(amount: float, user_state: Optional[str], config: Config) -> float:
    if not config.tax_enabled:
        return 0.0
    return amount * tax_rate(user_state)


def payment_fee(amount: float, method: Optional[str]) -> float:
    return amount * PAYMENT_FEE_RATES[PaymentMethod.from_tag(method)]


def round2(amount: float) -> float:
    """Round half-up to cents on the decimal value, so 19.995 -> 20.0."""
    with localcontext() as ctx:
        ctx.prec = _ROUNDING_PRECISION
        return float(Decimal(repr(amount)).quantize(_CENT, rounding=ROUND_HALF_UP))


def price_order(
    items: Iterable[LineItem],
    user_type: Optional[str],
    user_state: Optional[str],
    method: Optional[str],
    config: Config,
    month_index: int,
    on_item: Optional[Callable[[LineItem, float], None]] = None,
) -> PriceBreakdown:
    """Run the full composition. ``on_item`` observes each discounted item price."""
    subtotal = 0.0
    for item in items:
        price = item_price(item, user_type, month_index)
        subtotal += price
        if on_item is not None:
            on_item(item, price)
    shipping = shipping_cost(subtotal)
    total = subtotal + shipping
    tax = calculate_tax(total, user_state, config)
    total += tax
    fee = payment_fee(total, method)
    total += fee
    return PriceBreakdown(subtotal=subtotal, shipping=shipping, tax=tax, payment_fee=fee, total=round2(total))

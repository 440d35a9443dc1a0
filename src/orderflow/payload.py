"""Strict parsing of JSON order scenarios into the typed model."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import PayloadFormatError
from .types import Inventory, InventoryEntry, LineItem, Order, User


@dataclass
class Scenario:
    order: Optional[Order]
    user: Optional[User]
    inventory: Inventory
    config: Dict[str, Any] = field(default_factory=dict)


def _pick(raw: Dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in raw:
        return raw[camel]
    return raw.get(snake, default)


def _require_mapping(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise PayloadFormatError(f"Invalid field '{where}': expected object, got {type(value).__name__}")
    return value


def _identifier(value: Any, where: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise PayloadFormatError(f"Invalid field '{where}': expected str or int identifier, got {type(value).__name__}")
    text = str(value)
    if not text.strip():
        raise PayloadFormatError(f"Invalid field '{where}': must be non-empty")
    return text


def _optional_str(value: Any, where: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise PayloadFormatError(f"Invalid field '{where}': expected str, got {type(value).__name__}")
    return value


def _count(value: Any, where: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise PayloadFormatError(f"Invalid field '{where}': expected int, got {type(value).__name__}")
    if value < minimum:
        raise PayloadFormatError(f"Invalid field '{where}': must be >= {minimum}, got {value}")
    return value


def _price(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadFormatError(f"Invalid field '{where}': expected number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise PayloadFormatError(f"Invalid field '{where}': must be a finite number, got {value}")
    if value < 0:
        raise PayloadFormatError(f"Invalid field '{where}': must be non-negative, got {value}")
    return float(value)


def parse_line_item(raw: Any, index: int) -> LineItem:
    where = f"order.items[{index}]"
    data = _require_mapping(raw, where)
    for name in ("id", "quantity", "price"):
        if name not in data:
            raise PayloadFormatError(f"Line item {where} missing required field '{name}'")
    return LineItem(
        id=_identifier(data["id"], f"{where}.id"),
        quantity=_count(data["quantity"], f"{where}.quantity", minimum=1),
        price=_price(data["price"], f"{where}.price"),
    )


def parse_order(raw: Any) -> Optional[Order]:
    if raw is None:
        return None
    data = _require_mapping(raw, "order")
    if "id" not in data:
        raise PayloadFormatError("Order missing required field 'id'")
    items = data.get("items") or []
    if not isinstance(items, list):
        raise PayloadFormatError(f"Invalid field 'order.items': expected list, got {type(items).__name__}")
    return Order(
        id=_identifier(data["id"], "order.id"),
        items=tuple(parse_line_item(item, index) for index, item in enumerate(items)),
        payment_method=_optional_str(_pick(data, "paymentMethod", "payment_method"), "order.paymentMethod"),
    )


def parse_user(raw: Any) -> Optional[User]:
    if raw is None:
        return None
    data = _require_mapping(raw, "user")
    if "id" not in data:
        raise PayloadFormatError("User missing required field 'id'")
    points = _pick(data, "loyaltyPoints", "loyalty_points")
    return User(
        id=_identifier(data["id"], "user.id"),
        status=_optional_str(data.get("status"), "user.status") or "",
        tier=_optional_str(data.get("type", data.get("tier")), "user.type") or "",
        state=_optional_str(data.get("state"), "user.state"),
        email=_optional_str(data.get("email"), "user.email"),
        phone=_optional_str(data.get("phone"), "user.phone"),
        loyalty_points=None if points is None else _count(points, "user.loyaltyPoints", minimum=0),
    )


def parse_inventory(raw: Any) -> Inventory:
    data = _require_mapping(raw if raw is not None else {}, "inventory")
    inventory: Inventory = {}
    for item_id, entry in data.items():
        where = f"inventory.{item_id}"
        if isinstance(entry, dict):
            if "quantity" not in entry:
                raise PayloadFormatError(f"Inventory entry '{item_id}' missing required field 'quantity'")
            quantity = entry["quantity"]
        else:
            quantity = entry
        inventory[str(item_id)] = InventoryEntry(quantity=_count(quantity, f"{where}.quantity", minimum=0))
    return inventory


def parse_scenario(raw: Any) -> Scenario:
    data = _require_mapping(raw, "scenario")
    for name in ("order", "user"):
        if name not in data:
            raise PayloadFormatError(f"Scenario missing required field '{name}' (use null for absent)")
    config = data.get("config") or {}
    return Scenario(
        order=parse_order(data["order"]),
        user=parse_user(data["user"]),
        inventory=parse_inventory(data.get("inventory")),
        config=_require_mapping(config, "config"),
    )


def load_scenario(path: str | Path) -> Scenario:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise PayloadFormatError(f"Could not read scenario file {path}: {exc}") from exc
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PayloadFormatError(f"Scenario file {path} is not valid JSON: {exc}") from exc
    return parse_scenario(raw)


def inventory_snapshot(inventory: Inventory) -> Dict[str, int]:
    return {item_id: entry.quantity for item_id, entry in inventory.items()}


def user_snapshot(user: Optional[User]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {"id": user.id, "loyaltyPoints": user.loyalty_points or 0}

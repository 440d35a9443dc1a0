"""orderflow: deterministic order pricing, reservation and loyalty pipeline."""

__version__ = "0.1.0"

from .config import Config, get_config, refresh_config  # noqa: E402
from .errors import FailureCode, OrderFailure, OrderflowError  # noqa: E402
from .processor import OrderProcessor, process_order  # noqa: E402
from .types import InventoryEntry, LineItem, Order, OrderRecord, ProcessResult, User  # noqa: E402

__all__ = [
    "__version__",
    "Config",
    "FailureCode",
    "InventoryEntry",
    "LineItem",
    "Order",
    "OrderFailure",
    "OrderProcessor",
    "OrderRecord",
    "OrderflowError",
    "ProcessResult",
    "User",
    "get_config",
    "process_order",
    "refresh_config",
]

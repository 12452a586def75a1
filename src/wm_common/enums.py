"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SettlementStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PAID = "paid"


class DeliveryOption(str, Enum):
    DAWN = "dawn"
    NORMAL = "normal"


class InventoryMode(str, Enum):
    """How stock adjustments reach the store.

    AUTO tries the atomic stored function and degrades to read-modify-write
    when the function is missing. FALLBACK is not race-free.
    """
    AUTO = "auto"
    ATOMIC = "atomic"
    FALLBACK = "fallback"


class InventoryPath(str, Enum):
    ATOMIC = "atomic"
    FALLBACK = "fallback"


class UserRole(str, Enum):
    RETAILER = "retailer"
    WHOLESALER = "wholesaler"

"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class TransactionType(str, Enum):
    RECHARGE = "recharge"
    WITHDRAWAL = "withdrawal"
    PURCHASE = "purchase"
    EARNING = "earning"
    REFERRAL = "referral"
    LUCKY_DRAW = "lucky_draw"


class ProductStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class AccrualPhase(str, Enum):
    """Batch orchestrator state: IDLE → SCANNING → PROCESSING → REPORTING → IDLE."""
    IDLE = "IDLE"
    SCANNING = "SCANNING"
    PROCESSING = "PROCESSING"
    REPORTING = "REPORTING"

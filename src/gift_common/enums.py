"""Global enums — must match the gift_orders CHECK constraints exactly."""

from enum import Enum


class OrderType(str, Enum):
    STAR = "star"
    PREMIUM = "premium"


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.PENDING


# Premium subscriptions are sold in these durations only
PREMIUM_MONTHS = (3, 6, 12)

STAR_QUANTITY_MIN = 50
STAR_QUANTITY_MAX = 1_000_000

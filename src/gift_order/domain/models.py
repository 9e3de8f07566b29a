"""Order domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.gift_common.enums import PREMIUM_MONTHS, OrderStatus, OrderType


@dataclass
class Order:
    id: UUID  # assigned by the provider
    type: OrderType
    status: OrderStatus
    username: str
    recipient_hash: str
    wallet_type: str
    amount: float
    created_at: datetime
    updated_at: datetime
    # Exactly one of quantity (star) / months (premium) is set
    quantity: int | None = None
    months: int | None = None
    tx_hash: str | None = None
    completed_at: datetime | None = None
    error_message: str | None = None

    def __post_init__(self) -> None:
        if (self.quantity is None) == (self.months is None):
            raise ValueError("exactly one of quantity or months must be set")
        if self.type is OrderType.STAR and self.quantity is None:
            raise ValueError("star orders carry a quantity")
        if self.type is OrderType.PREMIUM:
            if self.months is None:
                raise ValueError("premium orders carry months")
            if self.months not in PREMIUM_MONTHS:
                raise ValueError(f"months must be one of {PREMIUM_MONTHS}, got {self.months}")

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

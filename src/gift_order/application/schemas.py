# src/gift_order/application/schemas.py
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.gift_common.enums import STAR_QUANTITY_MAX, STAR_QUANTITY_MIN
from src.gift_order.domain.models import Order
from src.gift_upstream.schemas import PremiumOrderRequest, StarOrderRequest


class _GiftRequestBase(BaseModel):
    username: str
    recipient_hash: str
    wallet_type: str

    @field_validator("username", "recipient_hash", "wallet_type")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class CreateStarOrderRequest(_GiftRequestBase):
    quantity: int = Field(ge=STAR_QUANTITY_MIN, le=STAR_QUANTITY_MAX)

    def to_upstream(self) -> StarOrderRequest:
        return StarOrderRequest(**self.model_dump())


class CreatePremiumOrderRequest(_GiftRequestBase):
    months: Literal[3, 6, 12]

    def to_upstream(self) -> PremiumOrderRequest:
        return PremiumOrderRequest(**self.model_dump())


class OrderResponse(BaseModel):
    id: UUID
    type: str
    status: str
    username: str
    recipient_hash: str
    quantity: int | None = None
    months: int | None = None
    amount: float
    wallet_type: str
    tx_hash: str | None = None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
    error_message: str | None = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            type=order.type.value,
            status=order.status.value,
            username=order.username,
            recipient_hash=order.recipient_hash,
            quantity=order.quantity,
            months=order.months,
            amount=order.amount,
            wallet_type=order.wallet_type,
            tx_hash=order.tx_hash,
            created_at=order.created_at,
            updated_at=order.updated_at,
            completed_at=order.completed_at,
            error_message=order.error_message,
        )

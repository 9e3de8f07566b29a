"""Wire models for the iStar provider API.

Timestamps are kept as the provider's raw strings; the order service parses
them strictly so a malformed value is reported as ours, not the provider's.
"""
from pydantic import BaseModel


class StarOrderRequest(BaseModel):
    username: str
    recipient_hash: str
    quantity: int
    wallet_type: str


class PremiumOrderRequest(BaseModel):
    username: str
    recipient_hash: str
    months: int
    wallet_type: str


class _OrderResponseBase(BaseModel):
    order_id: str
    status: str
    username: str = ""
    amount: float
    created_at: str
    completed_at: str | None = None
    tx_hash: str | None = None


class StarOrderResponse(_OrderResponseBase):
    quantity: int


class PremiumOrderResponse(_OrderResponseBase):
    months: int

"""Inbound iStar webhook payload.

The ``order`` object is the provider's order document; only ``id`` and
``status`` are required here, ``error`` is optional and any other keys are
ignored. Timestamps must be RFC 3339 strings with an offset.
"""
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator

from src.gift_common.datetime_utils import parse_rfc3339
from src.gift_common.enums import OrderStatus


class WebhookOrder(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: StrictStr
    status: StrictStr
    error: str | None = None

    @field_validator("error", mode="before")
    @classmethod
    def drop_non_string_error(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None

    @field_validator("id")
    @classmethod
    def id_is_uuid(cls, v: str) -> str:
        UUID(v)
        return v

    @field_validator("status")
    @classmethod
    def status_is_terminal(cls, v: str) -> str:
        # Callbacks only report outcomes; a terminal order never returns to pending
        if not OrderStatus(v).is_terminal:
            raise ValueError(f"webhook status must be terminal, got {v!r}")
        return v

    @property
    def order_id(self) -> UUID:
        return UUID(self.id)

    @property
    def order_status(self) -> OrderStatus:
        return OrderStatus(self.status)


class WebhookPayload(BaseModel):
    event_type: str = ""
    occurred_at: datetime | None = None
    order: WebhookOrder
    tx_hash: str | None = None
    completed_at: datetime | None = None
    quantity: int | None = None

    @field_validator("occurred_at", "completed_at", mode="before")
    @classmethod
    def strict_timestamp(cls, v: Any) -> datetime | None:
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("timestamp must be an RFC 3339 string")
        return parse_rfc3339(v)

# src/gift_order/domain/repository.py
"""OrderStore Protocol — interface contract for persistence layer.

Implementations must be safe to call concurrently for distinct order ids and
must make each call a single-record atomic write.
"""
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.gift_common.enums import OrderStatus
from src.gift_order.domain.models import Order


class OrderStoreProtocol(Protocol):
    async def create_order(self, order: Order) -> None: ...

    async def update_order_status(
        self,
        order_id: UUID,
        status: OrderStatus,
        tx_hash: str | None = None,
        completed_at: datetime | None = None,
        error_message: str | None = None,
    ) -> None: ...

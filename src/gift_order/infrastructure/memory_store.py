"""In-process order store — the default backend.

A dict keyed by order id behind an asyncio.Lock. Orders are copied on the
way in and out so callers never share a mutable record with the store.
"""
import asyncio
import dataclasses
import logging
from datetime import datetime
from uuid import UUID

from src.gift_common.datetime_utils import utc_now
from src.gift_common.enums import OrderStatus
from src.gift_common.errors import DuplicateOrderError
from src.gift_order.domain.models import Order


class InMemoryOrderStore:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._orders: dict[UUID, Order] = {}
        self._lock = asyncio.Lock()
        self._logger = logger or logging.getLogger("gift.store")

    async def create_order(self, order: Order) -> None:
        async with self._lock:
            if order.id in self._orders:
                raise DuplicateOrderError(str(order.id))
            self._orders[order.id] = dataclasses.replace(order)

    async def update_order_status(
        self,
        order_id: UUID,
        status: OrderStatus,
        tx_hash: str | None = None,
        completed_at: datetime | None = None,
        error_message: str | None = None,
    ) -> None:
        async with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                # Same outcome as an UPDATE matching zero rows
                self._logger.warning("Status update for unknown order %s ignored", order_id)
                return
            order.status = status
            order.tx_hash = tx_hash
            order.completed_at = completed_at
            order.error_message = error_message
            order.updated_at = utc_now()

    async def get_order(self, order_id: UUID) -> Order | None:
        async with self._lock:
            order = self._orders.get(order_id)
            return dataclasses.replace(order) if order else None

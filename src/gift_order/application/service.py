# src/gift_order/application/service.py
"""OrderService — creates gift orders at the provider and records them.

Each operation is all-or-nothing: the first failure (upstream, timestamp or
id parsing, persistence) aborts it. Upstream errors pass through untouched;
everything that goes wrong on our side of the call is an InternalError.
A persistence failure after the provider accepted the order is not
compensated at the provider.
"""
import logging
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.gift_common.datetime_utils import parse_rfc3339, utc_now
from src.gift_common.enums import OrderStatus, OrderType
from src.gift_common.errors import InternalError
from src.gift_order.application.schemas import (
    CreatePremiumOrderRequest,
    CreateStarOrderRequest,
)
from src.gift_order.domain.models import Order
from src.gift_order.domain.repository import OrderStoreProtocol
from src.gift_upstream.schemas import (
    PremiumOrderRequest,
    PremiumOrderResponse,
    StarOrderRequest,
    StarOrderResponse,
)

_SYNC_TERMINAL_STATUSES = (OrderStatus.COMPLETED, OrderStatus.FAILED)


class OrderClientProtocol(Protocol):
    async def create_star_order_async(self, req: StarOrderRequest) -> StarOrderResponse: ...

    async def create_star_order_sync(self, req: StarOrderRequest) -> StarOrderResponse: ...

    async def create_premium_order_async(
        self, req: PremiumOrderRequest
    ) -> PremiumOrderResponse: ...

    async def create_premium_order_sync(
        self, req: PremiumOrderRequest
    ) -> PremiumOrderResponse: ...


class OrderService:
    def __init__(
        self,
        store: OrderStoreProtocol,
        client: OrderClientProtocol,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._client = client
        self._logger = logger or logging.getLogger("gift.orders")

    # ------------------------------------------------------------------
    # Star
    # ------------------------------------------------------------------

    async def create_star_order_async(self, req: CreateStarOrderRequest) -> Order:
        resp = await self._client.create_star_order_async(req.to_upstream())
        created_at = self._parse_timestamp(resp.created_at, "created_at")
        order = self._build_order(
            resp,
            OrderType.STAR,
            req,
            status=OrderStatus.PENDING,
            created_at=created_at,
            updated_at=created_at,
            quantity=resp.quantity,
        )
        await self._save(order)
        self._logger.info("Star order created (async): order_id=%s", order.id)
        return order

    async def create_star_order_sync(self, req: CreateStarOrderRequest) -> Order:
        resp = await self._client.create_star_order_sync(req.to_upstream())
        order = self._build_sync_order(resp, OrderType.STAR, req, quantity=resp.quantity)
        await self._save(order)
        self._logger.info(
            "Star order created (sync): order_id=%s status=%s", order.id, order.status.value
        )
        return order

    # ------------------------------------------------------------------
    # Premium
    # ------------------------------------------------------------------

    async def create_premium_order_async(self, req: CreatePremiumOrderRequest) -> Order:
        resp = await self._client.create_premium_order_async(req.to_upstream())
        created_at = self._parse_timestamp(resp.created_at, "created_at")
        order = self._build_order(
            resp,
            OrderType.PREMIUM,
            req,
            status=OrderStatus.PENDING,
            created_at=created_at,
            updated_at=created_at,
            months=resp.months,
        )
        await self._save(order)
        self._logger.info("Premium order created (async): order_id=%s", order.id)
        return order

    async def create_premium_order_sync(self, req: CreatePremiumOrderRequest) -> Order:
        resp = await self._client.create_premium_order_sync(req.to_upstream())
        order = self._build_sync_order(resp, OrderType.PREMIUM, req, months=resp.months)
        await self._save(order)
        self._logger.info(
            "Premium order created (sync): order_id=%s status=%s", order.id, order.status.value
        )
        return order

    # ------------------------------------------------------------------
    # Mapping helpers
    # ------------------------------------------------------------------

    def _parse_timestamp(self, value: str, field: str) -> datetime:
        try:
            return parse_rfc3339(value)
        except ValueError as exc:
            self._logger.error("Failed to parse %s=%r: %s", field, value, exc)
            raise InternalError(f"Invalid {field} timestamp") from exc

    def _parse_order_id(self, value: str) -> UUID:
        try:
            return UUID(value)
        except ValueError as exc:
            self._logger.error("Invalid order_id from provider: %r", value)
            raise InternalError("Invalid order_id") from exc

    def _coerce_sync_status(self, value: str) -> OrderStatus:
        """Only terminal statuses are meaningful on the sync path; anything
        else is recorded as failed."""
        for status in _SYNC_TERMINAL_STATUSES:
            if value == status.value:
                return status
        self._logger.warning("Unexpected sync status from provider: %r, recording as failed", value)
        return OrderStatus.FAILED

    def _build_sync_order(
        self,
        resp: StarOrderResponse | PremiumOrderResponse,
        order_type: OrderType,
        req: CreateStarOrderRequest | CreatePremiumOrderRequest,
        *,
        quantity: int | None = None,
        months: int | None = None,
    ) -> Order:
        created_at = self._parse_timestamp(resp.created_at, "created_at")
        completed_at = (
            self._parse_timestamp(resp.completed_at, "completed_at")
            if resp.completed_at is not None
            else None
        )
        status = self._coerce_sync_status(resp.status)
        now = utc_now()
        return self._build_order(
            resp,
            order_type,
            req,
            status=status,
            created_at=created_at,
            updated_at=now,
            # a terminal sync order always carries a completion time
            completed_at=completed_at or now,
            tx_hash=resp.tx_hash,
            quantity=quantity,
            months=months,
        )

    def _build_order(
        self,
        resp: StarOrderResponse | PremiumOrderResponse,
        order_type: OrderType,
        req: CreateStarOrderRequest | CreatePremiumOrderRequest,
        *,
        status: OrderStatus,
        created_at: datetime,
        updated_at: datetime,
        completed_at: datetime | None = None,
        tx_hash: str | None = None,
        quantity: int | None = None,
        months: int | None = None,
    ) -> Order:
        order_id = self._parse_order_id(resp.order_id)
        try:
            return Order(
                id=order_id,
                type=order_type,
                status=status,
                username=req.username,
                recipient_hash=req.recipient_hash,
                wallet_type=req.wallet_type,
                amount=resp.amount,
                created_at=created_at,
                updated_at=updated_at,
                completed_at=completed_at,
                tx_hash=tx_hash,
                quantity=quantity,
                months=months,
            )
        except ValueError as exc:
            self._logger.error("Provider response does not form a valid order: %s", exc)
            raise InternalError("Invalid order in provider response") from exc

    async def _save(self, order: Order) -> None:
        try:
            await self._store.create_order(order)
        except Exception as exc:
            self._logger.exception("Failed to save order %s", order.id)
            raise InternalError("Failed to save order") from exc

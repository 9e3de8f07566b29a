# tests/unit/test_order_service.py
"""Unit tests for OrderService with a mocked provider client and store."""
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

from src.gift_common.enums import OrderStatus, OrderType
from src.gift_common.errors import InternalError, NotFoundError, ValidationError
from src.gift_order.application.schemas import CreatePremiumOrderRequest, CreateStarOrderRequest
from src.gift_order.application.service import OrderService
from src.gift_upstream.schemas import PremiumOrderResponse, StarOrderResponse

ORDER_ID = "3f1c7a52-9b8e-4d2a-8c11-0e5b7d9a6f40"


def _star_req(quantity: int = 100) -> CreateStarOrderRequest:
    return CreateStarOrderRequest(
        username="alice", recipient_hash="h1", quantity=quantity, wallet_type="TON"
    )


def _premium_req(months: int = 6) -> CreatePremiumOrderRequest:
    return CreatePremiumOrderRequest(
        username="bob", recipient_hash="h2", months=months, wallet_type="TON"
    )


def _star_resp(**overrides: Any) -> StarOrderResponse:
    body: dict[str, Any] = {
        "order_id": ORDER_ID,
        "status": "pending",
        "username": "alice",
        "quantity": 100,
        "amount": 12.5,
        "created_at": "2026-01-01T10:00:00Z",
    }
    body.update(overrides)
    return StarOrderResponse(**body)


def _premium_resp(**overrides: Any) -> PremiumOrderResponse:
    body: dict[str, Any] = {
        "order_id": ORDER_ID,
        "status": "pending",
        "username": "bob",
        "months": 6,
        "amount": 19.9,
        "created_at": "2026-01-01T10:00:00Z",
    }
    body.update(overrides)
    return PremiumOrderResponse(**body)


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def store() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(store: AsyncMock, client: AsyncMock) -> OrderService:
    return OrderService(store, client)


class TestCreateStarOrderAsync:
    async def test_records_pending_order(
        self, service: OrderService, client: AsyncMock, store: AsyncMock
    ) -> None:
        client.create_star_order_async.return_value = _star_resp()

        order = await service.create_star_order_async(_star_req())

        assert order.id == UUID(ORDER_ID)
        assert order.type is OrderType.STAR
        assert order.status is OrderStatus.PENDING
        assert order.username == "alice"
        assert order.recipient_hash == "h1"
        assert order.wallet_type == "TON"
        assert order.quantity == 100
        assert order.months is None
        assert order.amount == 12.5
        assert order.created_at == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)
        assert order.updated_at == order.created_at
        assert order.completed_at is None
        store.create_order.assert_awaited_once_with(order)

    async def test_forwards_request_fields(
        self, service: OrderService, client: AsyncMock
    ) -> None:
        client.create_star_order_async.return_value = _star_resp()
        await service.create_star_order_async(_star_req())
        sent = client.create_star_order_async.await_args.args[0]
        assert sent.quantity == 100
        assert sent.recipient_hash == "h1"

    async def test_quantity_taken_from_provider(
        self, service: OrderService, client: AsyncMock
    ) -> None:
        client.create_star_order_async.return_value = _star_resp(quantity=250)
        order = await service.create_star_order_async(_star_req())
        assert order.quantity == 250

    async def test_upstream_error_propagates_untouched(
        self, service: OrderService, client: AsyncMock, store: AsyncMock
    ) -> None:
        err = ValidationError("Invalid request parameters")
        client.create_star_order_async.side_effect = err
        with pytest.raises(ValidationError) as exc_info:
            await service.create_star_order_async(_star_req())
        assert exc_info.value is err
        store.create_order.assert_not_awaited()

    async def test_bad_created_at(
        self, service: OrderService, client: AsyncMock, store: AsyncMock
    ) -> None:
        client.create_star_order_async.return_value = _star_resp(created_at="yesterday")
        with pytest.raises(InternalError, match="created_at"):
            await service.create_star_order_async(_star_req())
        store.create_order.assert_not_awaited()

    async def test_bad_order_id(
        self, service: OrderService, client: AsyncMock, store: AsyncMock
    ) -> None:
        client.create_star_order_async.return_value = _star_resp(order_id="not-a-uuid")
        with pytest.raises(InternalError, match="Invalid order_id"):
            await service.create_star_order_async(_star_req())
        store.create_order.assert_not_awaited()

    async def test_store_failure(
        self, service: OrderService, client: AsyncMock, store: AsyncMock
    ) -> None:
        client.create_star_order_async.return_value = _star_resp()
        store.create_order.side_effect = RuntimeError("db down")
        with pytest.raises(InternalError, match="Failed to save order"):
            await service.create_star_order_async(_star_req())


class TestCreateStarOrderSync:
    async def test_completed(self, service: OrderService, client: AsyncMock) -> None:
        client.create_star_order_sync.return_value = _star_resp(
            status="completed", completed_at="2026-01-01T10:00:05Z", tx_hash="0xabc"
        )
        order = await service.create_star_order_sync(_star_req())
        assert order.status is OrderStatus.COMPLETED
        assert order.tx_hash == "0xabc"
        assert order.completed_at == datetime(2026, 1, 1, 10, 0, 5, tzinfo=UTC)
        assert order.updated_at != order.created_at

    async def test_failed(self, service: OrderService, client: AsyncMock) -> None:
        client.create_star_order_sync.return_value = _star_resp(status="failed")
        order = await service.create_star_order_sync(_star_req())
        assert order.status is OrderStatus.FAILED
        assert order.completed_at is not None

    @pytest.mark.parametrize("status", ["processing", "pending", "", "COMPLETED"])
    async def test_unexpected_status_recorded_as_failed(
        self, service: OrderService, client: AsyncMock, store: AsyncMock, status: str
    ) -> None:
        client.create_star_order_sync.return_value = _star_resp(status=status)
        order = await service.create_star_order_sync(_star_req())
        assert order.status is OrderStatus.FAILED
        assert store.create_order.await_args.args[0].status is OrderStatus.FAILED

    async def test_bad_completed_at(
        self, service: OrderService, client: AsyncMock, store: AsyncMock
    ) -> None:
        client.create_star_order_sync.return_value = _star_resp(
            status="completed", completed_at="2026-01-01"
        )
        with pytest.raises(InternalError, match="completed_at"):
            await service.create_star_order_sync(_star_req())
        store.create_order.assert_not_awaited()


class TestCreatePremiumOrder:
    async def test_async_pending(
        self, service: OrderService, client: AsyncMock, store: AsyncMock
    ) -> None:
        client.create_premium_order_async.return_value = _premium_resp()
        order = await service.create_premium_order_async(_premium_req())
        assert order.type is OrderType.PREMIUM
        assert order.status is OrderStatus.PENDING
        assert order.months == 6
        assert order.quantity is None
        store.create_order.assert_awaited_once()

    async def test_sync_completed(self, service: OrderService, client: AsyncMock) -> None:
        client.create_premium_order_sync.return_value = _premium_resp(
            status="completed", tx_hash="0xdef"
        )
        order = await service.create_premium_order_sync(_premium_req())
        assert order.status is OrderStatus.COMPLETED
        assert order.tx_hash == "0xdef"

    async def test_provider_months_outside_catalog(
        self, service: OrderService, client: AsyncMock, store: AsyncMock
    ) -> None:
        client.create_premium_order_async.return_value = _premium_resp(months=5)
        with pytest.raises(InternalError, match="Invalid order in provider response"):
            await service.create_premium_order_async(_premium_req())
        store.create_order.assert_not_awaited()

    async def test_not_found_propagates(
        self, service: OrderService, client: AsyncMock
    ) -> None:
        client.create_premium_order_sync.side_effect = NotFoundError("Resource not found")
        with pytest.raises(NotFoundError):
            await service.create_premium_order_sync(_premium_req())

# src/gift_order/infrastructure/persistence.py
"""SqlOrderStore — raw SQL persistence against the gift_orders table."""
import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.gift_common.enums import OrderStatus, OrderType
from src.gift_order.domain.models import Order

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO gift_orders (id, type, status, username, recipient_hash,
        quantity, months, amount, wallet_type, tx_hash,
        created_at, updated_at, completed_at, error_message)
    VALUES (:id, :type, :status, :username, :recipient_hash,
        :quantity, :months, :amount, :wallet_type, :tx_hash,
        :created_at, :updated_at, :completed_at, :error_message)
""")

_UPDATE_STATUS_SQL = text("""
    UPDATE gift_orders
    SET status = :status, tx_hash = :tx_hash, completed_at = :completed_at,
        error_message = :error_message, updated_at = NOW()
    WHERE id = :id
""")

_GET_ORDER_BY_ID_SQL = text("""
    SELECT id, type, status, username, recipient_hash,
        quantity, months, amount, wallet_type, tx_hash,
        created_at, updated_at, completed_at, error_message
    FROM gift_orders WHERE id = :id
""")


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------


def _order_to_params(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "type": order.type.value,
        "status": order.status.value,
        "username": order.username,
        "recipient_hash": order.recipient_hash,
        "quantity": order.quantity,
        "months": order.months,
        "amount": order.amount,
        "wallet_type": order.wallet_type,
        "tx_hash": order.tx_hash,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "completed_at": order.completed_at,
        "error_message": order.error_message,
    }


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    return Order(
        id=row.id if isinstance(row.id, UUID) else UUID(str(row.id)),
        type=OrderType(row.type),
        status=OrderStatus(row.status),
        username=row.username,
        recipient_hash=row.recipient_hash,
        quantity=row.quantity,
        months=row.months,
        amount=float(row.amount),
        wallet_type=row.wallet_type,
        tx_hash=row.tx_hash,
        created_at=row.created_at,
        updated_at=row.updated_at,
        completed_at=row.completed_at,
        error_message=row.error_message,
    )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SqlOrderStore:
    """OrderStoreProtocol over PostgreSQL; one transaction per call."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        logger: logging.Logger | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._logger = logger or logging.getLogger("gift.store")

    async def create_order(self, order: Order) -> None:
        async with self._session_factory() as db:
            try:
                await db.execute(_INSERT_ORDER_SQL, _order_to_params(order))
                await db.commit()
            except Exception:
                await db.rollback()
                self._logger.exception("Failed to create order %s", order.id)
                raise

    async def update_order_status(
        self,
        order_id: UUID,
        status: OrderStatus,
        tx_hash: str | None = None,
        completed_at: datetime | None = None,
        error_message: str | None = None,
    ) -> None:
        async with self._session_factory() as db:
            try:
                result = await db.execute(
                    _UPDATE_STATUS_SQL,
                    {
                        "id": order_id,
                        "status": status.value,
                        "tx_hash": tx_hash,
                        "completed_at": completed_at,
                        "error_message": error_message,
                    },
                )
                await db.commit()
            except Exception:
                await db.rollback()
                self._logger.exception("Failed to update order status %s", order_id)
                raise
        if result.rowcount == 0:
            self._logger.warning("Status update for unknown order %s ignored", order_id)

    async def get_order(self, order_id: UUID) -> Order | None:
        async with self._session_factory() as db:
            result = await db.execute(_GET_ORDER_BY_ID_SQL, {"id": order_id})
            row = result.fetchone()
        return _row_to_order(row) if row else None

"""Service graph: built once at startup, stored on ``app.state.services``.

Routers reach their collaborators through ``get_services`` so tests can
install a graph built around a mock provider transport and an in-memory
store without touching the lifespan.
"""

import logging
from dataclasses import dataclass, field

import httpx
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from config.settings import Settings
from src.gift_common.database import create_engine, create_session_factory
from src.gift_order.application.service import OrderService
from src.gift_order.domain.repository import OrderStoreProtocol
from src.gift_order.infrastructure.memory_store import InMemoryOrderStore
from src.gift_order.infrastructure.persistence import SqlOrderStore
from src.gift_upstream.client import IStarClient
from src.gift_webhook.application.service import WebhookReconciler


@dataclass
class GatewayServices:
    settings: Settings
    client: IStarClient
    store: OrderStoreProtocol
    orders: OrderService
    webhooks: WebhookReconciler
    engine: AsyncEngine | None = field(default=None)

    async def aclose(self) -> None:
        await self.client.aclose()
        if self.engine is not None:
            await self.engine.dispose()


def build_services(
    app_settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    store: OrderStoreProtocol | None = None,
) -> GatewayServices:
    engine: AsyncEngine | None = None
    if store is None:
        if app_settings.ORDER_STORE_BACKEND == "postgres":
            engine = create_engine(app_settings)
            store = SqlOrderStore(
                create_session_factory(engine), logger=logging.getLogger("gift.store")
            )
        else:
            store = InMemoryOrderStore(logger=logging.getLogger("gift.store"))

    client = IStarClient.from_settings(
        app_settings, transport=transport, logger=logging.getLogger("gift.upstream")
    )
    return GatewayServices(
        settings=app_settings,
        client=client,
        store=store,
        orders=OrderService(store, client, logger=logging.getLogger("gift.orders")),
        webhooks=WebhookReconciler(
            store,
            app_settings.WEBHOOK_SECRET,
            verification_disabled=app_settings.WEBHOOK_VERIFICATION_DISABLED,
            logger=logging.getLogger("gift.webhook"),
        ),
        engine=engine,
    )


def get_services(request: Request) -> GatewayServices:
    """FastAPI dependency: the service graph installed at startup."""
    services: GatewayServices = request.app.state.services
    return services

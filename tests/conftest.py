"""Shared test fixtures.

Required settings are injected into the environment before anything imports
``config.settings`` (which builds the module-level Settings instance).
"""

import os

os.environ.setdefault("GATEWAY_API_KEY", "test-gateway-key")
os.environ.setdefault("ISTAR_BASE_URL", "https://istar.test")
os.environ.setdefault("ISTAR_API_KEY", "test-istar-key")
os.environ.setdefault("WEBHOOK_SECRET", "test-webhook-secret")

import json  # noqa: E402
from collections.abc import AsyncIterator, Callable  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402
from typing import Any  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from config.settings import Settings  # noqa: E402
from src.gift_gateway.wiring import build_services  # noqa: E402
from src.gift_order.infrastructure.memory_store import InMemoryOrderStore  # noqa: E402
from src.main import create_app  # noqa: E402

GATEWAY_API_KEY = "test-gateway-key"
WEBHOOK_SECRET = "test-webhook-secret"

_BASE_SETTINGS: dict[str, Any] = {
    "GATEWAY_API_KEY": GATEWAY_API_KEY,
    "ISTAR_BASE_URL": "https://istar.test",
    "ISTAR_API_KEY": "test-istar-key",
    "WEBHOOK_SECRET": WEBHOOK_SECRET,
    "ISTAR_MAX_RETRIES": 2,
}


class FakeProvider:
    """Scripted iStar API behind an httpx.MockTransport.

    Replies are queued per (method, path); each entry is a status/body pair
    or a transport exception class to raise. The last reply repeats once
    the queue is drained. Every request seen is recorded.
    """

    def __init__(self) -> None:
        self._replies: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[httpx.Request] = []

    def reply(
        self,
        method: str,
        path: str,
        status_code: int,
        body: Any = None,
        *,
        raw: bytes | None = None,
    ) -> None:
        content = raw if raw is not None else json.dumps(body).encode()
        self._replies.setdefault((method, path), []).append((status_code, content))

    def fail(self, method: str, path: str, exc_type: type[httpx.TransportError]) -> None:
        self._replies.setdefault((method, path), []).append(exc_type)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._replies.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"error": "no scripted reply"})
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(reply, type) and issubclass(reply, Exception):
            raise reply("scripted failure", request=request)
        status_code, content = reply
        return httpx.Response(
            status_code, content=content, headers={"Content-Type": "application/json"}
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        return Settings(_env_file=None, **{**_BASE_SETTINGS, **overrides})  # type: ignore[call-arg]

    return _make


@pytest.fixture
def gateway_factory(
    provider: FakeProvider,
    store: InMemoryOrderStore,
    settings_factory: Callable[..., Settings],
) -> Callable[..., Any]:
    """Build an AsyncClient bound to a fresh app wired to the fake provider."""

    @asynccontextmanager
    async def _gateway(**overrides: Any) -> AsyncIterator[AsyncClient]:
        app_settings = settings_factory(**overrides)
        app = create_app(app_settings)
        services = build_services(app_settings, transport=provider.transport, store=store)
        app.state.services = services
        try:
            async with AsyncClient(
                transport=ASGITransport(app=app), base_url="http://test"
            ) as ac:
                yield ac
        finally:
            await services.aclose()

    return _gateway


@pytest.fixture
async def client(gateway_factory: Callable[..., Any]) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for the gateway with default test settings."""
    async with gateway_factory() as ac:
        yield ac


@pytest.fixture
def api_headers() -> dict[str, str]:
    return {"API-Key": GATEWAY_API_KEY}

"""Recipient search, premium packages and wallet balance pass-through."""
from typing import Any

import httpx
from httpx import AsyncClient


class TestRecipientSearch:
    async def test_star_search_forwarded(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        provider.reply("GET", "/star/recipient/search", 200, {"recipient": "h1", "name": "Alice"})
        resp = await client.get(
            "/api/v1/star/recipient/search",
            params={"username": "alice", "quantity": 100},
            headers=api_headers,
        )
        assert resp.status_code == 200
        assert resp.json() == {"recipient": "h1", "name": "Alice"}
        sent = provider.calls("GET", "/star/recipient/search")[0]
        assert sent.url.params["username"] == "alice"
        assert sent.url.params["quantity"] == "100"
        assert sent.headers["API-Key"] == "test-istar-key"

    async def test_star_search_quantity_validated(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        resp = await client.get(
            "/api/v1/star/recipient/search",
            params={"username": "alice", "quantity": 10},
            headers=api_headers,
        )
        assert resp.status_code == 400
        assert provider.requests == []

    async def test_star_search_username_required(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        resp = await client.get(
            "/api/v1/star/recipient/search", params={"quantity": 100}, headers=api_headers
        )
        assert resp.status_code == 400
        assert provider.requests == []

    async def test_premium_search_forwarded(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        provider.reply("GET", "/premium/recipient/search", 200, {"recipient": "h2"})
        resp = await client.get(
            "/api/v1/premium/recipient/search",
            params={"username": "bob", "months": 12},
            headers=api_headers,
        )
        assert resp.status_code == 200
        assert provider.calls("GET", "/premium/recipient/search")[0].url.params["months"] == "12"

    async def test_premium_search_months_validated(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        resp = await client.get(
            "/api/v1/premium/recipient/search",
            params={"username": "bob", "months": 5},
            headers=api_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Months must be 3, 6, or 12"
        assert provider.requests == []

    async def test_recipient_not_found(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        provider.reply("GET", "/star/recipient/search", 404, {"error": "not found"})
        resp = await client.get(
            "/api/v1/star/recipient/search",
            params={"username": "ghost", "quantity": 100},
            headers=api_headers,
        )
        assert resp.status_code == 404


class TestCatalogAndWallet:
    async def test_premium_packages(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        packages = [{"months": 3, "amount": 11.99}, {"months": 6, "amount": 15.99}]
        provider.reply("GET", "/premium/packages", 200, packages)
        resp = await client.get("/api/v1/premium/packages", headers=api_headers)
        assert resp.status_code == 200
        assert resp.json() == packages

    async def test_wallet_balance(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        provider.reply("GET", "/wallet/balance", 200, {"balance": 120.5, "currency": "TON"})
        resp = await client.get("/api/v1/wallet/balance", headers=api_headers)
        assert resp.status_code == 200
        assert resp.json()["balance"] == 120.5

    async def test_wallet_balance_retried_after_transport_failure(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        provider.fail("GET", "/wallet/balance", httpx.ConnectError)
        provider.reply("GET", "/wallet/balance", 200, {"balance": 1.0})
        resp = await client.get("/api/v1/wallet/balance", headers=api_headers)
        assert resp.status_code == 200
        assert len(provider.calls("GET", "/wallet/balance")) == 2

    async def test_wallet_balance_gives_up(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        provider.fail("GET", "/wallet/balance", httpx.ConnectError)
        resp = await client.get("/api/v1/wallet/balance", headers=api_headers)
        assert resp.status_code == 500
        # ISTAR_MAX_RETRIES=2 in the test settings
        assert len(provider.calls("GET", "/wallet/balance")) == 3

    async def test_provider_rejects_upstream_key(
        self, client: AsyncClient, provider: Any, api_headers: dict[str, str]
    ) -> None:
        provider.reply("GET", "/wallet/balance", 401, {"error": "bad key"})
        resp = await client.get("/api/v1/wallet/balance", headers=api_headers)
        assert resp.status_code == 401

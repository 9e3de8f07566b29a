"""iStar provider HTTP client.

One pooled ``httpx.AsyncClient`` per process, created at startup and closed
on shutdown. Every call carries the shared ``API-Key`` header; the HTTP
outcome is classified into the gateway error taxonomy before returning:

    expected (200 sync / 202 async) → typed response
    400 → ValidationError, 401 → UnauthorizedError, 404 → NotFoundError
    anything else, transport failure, undecodable body → InternalError

Order creation is never retried (the provider may already have accepted the
order). Pass-through GETs are retried on transport failures only, bounded by
``max_retries``.
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from config.settings import Settings
from src.gift_common.errors import (
    AppError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from src.gift_upstream.schemas import (
    PremiumOrderRequest,
    PremiumOrderResponse,
    StarOrderRequest,
    StarOrderResponse,
)

_ResponseT = TypeVar("_ResponseT", bound=BaseModel)

API_KEY_HEADER = "API-Key"
_MAX_LOGGED_BODY = 512

_STAR_ORDER_PATH = "/orders/star"
_STAR_ORDER_SYNC_PATH = "/orders/star/sync"
_PREMIUM_ORDER_PATH = "/orders/premium"
_PREMIUM_ORDER_SYNC_PATH = "/orders/premium/sync"
_STAR_RECIPIENT_PATH = "/star/recipient/search"
_PREMIUM_RECIPIENT_PATH = "/premium/recipient/search"
_PREMIUM_PACKAGES_PATH = "/premium/packages"
_WALLET_BALANCE_PATH = "/wallet/balance"


def classify_status(status_code: int) -> AppError:
    """Map an unexpected provider status code onto the error taxonomy."""
    if status_code == 400:
        return ValidationError("Invalid request parameters")
    if status_code == 401:
        return UnauthorizedError("Invalid API key")
    if status_code == 404:
        return NotFoundError("Resource not found")
    return InternalError(f"Unexpected status code: {status_code}")


class IStarClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        max_idle_connections: int = 20,
        max_retries: int = 3,
        retry_wait_seconds: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._logger = logger or logging.getLogger("gift.upstream")
        self._max_retries = max(0, max_retries)
        self._retry_wait_seconds = retry_wait_seconds
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={API_KEY_HEADER: api_key, "Content-Type": "application/json"},
            timeout=timeout,
            limits=httpx.Limits(
                max_connections=None,
                max_keepalive_connections=max_idle_connections,
            ),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        app_settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> "IStarClient":
        return cls(
            app_settings.ISTAR_BASE_URL,
            app_settings.ISTAR_API_KEY,
            timeout=app_settings.ISTAR_TIMEOUT_SECONDS,
            max_idle_connections=app_settings.ISTAR_MAX_IDLE_CONNECTIONS,
            max_retries=app_settings.ISTAR_MAX_RETRIES,
            retry_wait_seconds=app_settings.ISTAR_RETRY_WAIT_SECONDS,
            transport=transport,
            logger=logger,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def do_request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
        retry: bool = False,
    ) -> httpx.Response:
        """Send one request; transport failures become InternalError.

        ``timeout`` overrides the client default for this call only.
        """
        send_kwargs: dict[str, Any] = {
            "json": json,
            "params": params,
            "timeout": timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
        }
        try:
            if retry and self._max_retries:
                retrying = AsyncRetrying(
                    stop=stop_after_attempt(self._max_retries + 1),
                    wait=wait_fixed(self._retry_wait_seconds),
                    retry=retry_if_exception_type(httpx.TransportError),
                    before_sleep=before_sleep_log(self._logger, logging.WARNING),
                    reraise=True,
                )
                response: httpx.Response = await retrying(
                    self._client.request, method, path, **send_kwargs
                )
            else:
                response = await self._client.request(method, path, **send_kwargs)
        except httpx.TimeoutException as exc:
            self._logger.error("%s %s timed out: %s", method, path, exc)
            raise InternalError("Upstream request timed out") from exc
        except httpx.TransportError as exc:
            self._logger.error("%s %s failed to send: %s", method, path, exc)
            raise InternalError("Failed to send request") from exc
        return response

    def _check_status(self, method: str, path: str, response: httpx.Response, expected: int) -> None:
        if response.status_code == expected:
            self._logger.info("%s %s → %d", method, path, response.status_code)
            return
        self._logger.error(
            "%s %s → %d (expected %d) body=%s",
            method,
            path,
            response.status_code,
            expected,
            response.text[:_MAX_LOGGED_BODY],
        )
        raise classify_status(response.status_code)

    def _decode(self, response: httpx.Response, model: type[_ResponseT]) -> _ResponseT:
        try:
            return model.model_validate_json(response.content)
        except PydanticValidationError as exc:
            self._logger.error("Failed to decode %s: %s", model.__name__, exc)
            raise InternalError("Failed to decode response") from exc

    async def _create_order(
        self,
        path: str,
        body: BaseModel,
        expected: int,
        model: type[_ResponseT],
        timeout: float | None,
    ) -> _ResponseT:
        response = await self.do_request("POST", path, json=body.model_dump(), timeout=timeout)
        self._check_status("POST", path, response, expected)
        return self._decode(response, model)

    # ------------------------------------------------------------------
    # Order creation
    # ------------------------------------------------------------------

    async def create_star_order_async(
        self, req: StarOrderRequest, *, timeout: float | None = None
    ) -> StarOrderResponse:
        resp = await self._create_order(_STAR_ORDER_PATH, req, 202, StarOrderResponse, timeout)
        self._logger.info("Star order created (async): order_id=%s", resp.order_id)
        return resp

    async def create_star_order_sync(
        self, req: StarOrderRequest, *, timeout: float | None = None
    ) -> StarOrderResponse:
        resp = await self._create_order(_STAR_ORDER_SYNC_PATH, req, 200, StarOrderResponse, timeout)
        self._logger.info("Star order created (sync): order_id=%s", resp.order_id)
        return resp

    async def create_premium_order_async(
        self, req: PremiumOrderRequest, *, timeout: float | None = None
    ) -> PremiumOrderResponse:
        resp = await self._create_order(
            _PREMIUM_ORDER_PATH, req, 202, PremiumOrderResponse, timeout
        )
        self._logger.info("Premium order created (async): order_id=%s", resp.order_id)
        return resp

    async def create_premium_order_sync(
        self, req: PremiumOrderRequest, *, timeout: float | None = None
    ) -> PremiumOrderResponse:
        resp = await self._create_order(
            _PREMIUM_ORDER_SYNC_PATH, req, 200, PremiumOrderResponse, timeout
        )
        self._logger.info("Premium order created (sync): order_id=%s", resp.order_id)
        return resp

    # ------------------------------------------------------------------
    # Pass-through
    # ------------------------------------------------------------------

    def _decode_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._logger.error("Failed to decode JSON body: %s", exc)
            raise InternalError("Failed to decode response") from exc

    async def get_json(
        self, path: str, params: dict[str, Any] | None = None, *, timeout: float | None = None
    ) -> Any:
        response = await self.do_request("GET", path, params=params, timeout=timeout, retry=True)
        self._check_status("GET", path, response, 200)
        return self._decode_json(response)

    async def post_json(self, path: str, body: Any, *, timeout: float | None = None) -> Any:
        response = await self.do_request("POST", path, json=body, timeout=timeout)
        self._check_status("POST", path, response, 200)
        return self._decode_json(response)

    async def search_star_recipient(self, username: str, quantity: int) -> Any:
        return await self.get_json(
            _STAR_RECIPIENT_PATH, {"username": username, "quantity": quantity}
        )

    async def search_premium_recipient(self, username: str, months: int) -> Any:
        return await self.get_json(
            _PREMIUM_RECIPIENT_PATH, {"username": username, "months": months}
        )

    async def get_premium_packages(self) -> Any:
        return await self.get_json(_PREMIUM_PACKAGES_PATH)

    async def get_wallet_balance(self) -> Any:
        return await self.get_json(_WALLET_BALANCE_PATH)

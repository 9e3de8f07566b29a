"""FastAPI application entry point.

Run with: uvicorn src.main:app --loop uvloop --port 8080
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config.settings import Settings, settings
from src.gift_common.errors import AppError
from src.gift_common.logging_config import configure_logging
from src.gift_common.response import error_response
from src.gift_gateway.middleware.https import RequireHTTPSMiddleware
from src.gift_gateway.middleware.request_log import RequestLogMiddleware
from src.gift_gateway.wiring import build_services
from src.gift_order.api.premium_router import router as premium_router
from src.gift_order.api.star_router import router as star_router
from src.gift_wallet.api.router import router as wallet_router
from src.gift_webhook.api.router import router as webhook_router

VERSION = "1.0.0"

logger = logging.getLogger("gift.app")


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = first.get("msg", "invalid value")
    return f"Invalid request parameters: {loc}: {msg}" if loc else f"Invalid request: {msg}"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: configure logging, build the service graph. Shutdown: close pools."""
    app_settings: Settings = app.state.settings
    configure_logging(app_settings.LOG_LEVEL, app_settings.ENVIRONMENT)
    services = build_services(app_settings)
    app.state.services = services
    logger.info(
        "Gateway started: env=%s store=%s upstream=%s",
        app_settings.ENVIRONMENT,
        app_settings.ORDER_STORE_BACKEND,
        app_settings.ISTAR_BASE_URL,
    )
    yield
    logger.info("Shutting down gateway")
    await services.aclose()


def create_app(app_settings: Settings | None = None) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(
        title=app_settings.APP_NAME,
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # Last added runs first: request logging wraps the HTTPS check
    if app_settings.REQUIRE_HTTPS:
        app.add_middleware(RequireHTTPSMiddleware)
    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        logger.log(
            level,
            "Request processing error: %s %s → %d %s",
            request.method,
            request.url.path,
            exc.http_status,
            exc.message,
        )
        resp = error_response(exc.code, exc.message, _request_id(request))
        return JSONResponse(status_code=exc.http_status, content=resp.model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = _describe_validation_error(exc)
        logger.warning("Invalid request: %s %s: %s", request.method, request.url.path, message)
        resp = error_response(4000, message, _request_id(request))
        return JSONResponse(status_code=400, content=resp.model_dump())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error: %s %s", request.method, request.url.path)
        resp = error_response(9001, "Internal server error", _request_id(request))
        return JSONResponse(status_code=500, content=resp.model_dump())

    app.include_router(star_router, prefix="/api/v1")
    app.include_router(premium_router, prefix="/api/v1")
    app.include_router(wallet_router, prefix="/api/v1")
    app.include_router(webhook_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    return app


app = create_app()

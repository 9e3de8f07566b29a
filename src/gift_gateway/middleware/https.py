"""Reject plain-HTTP requests when REQUIRE_HTTPS is on.

Behind a TLS-terminating proxy the scheme arrives in X-Forwarded-Proto.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.gift_common.errors import HTTPSRequiredError
from src.gift_common.response import error_response

# Probes must keep working over plain HTTP inside the cluster
_EXEMPT_PATHS = frozenset({"/health"})


class RequireHTTPSMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        forwarded = request.headers.get("x-forwarded-proto", "").split(",")[0].strip().lower()
        secure = request.url.scheme == "https" or forwarded == "https"
        if not secure and request.url.path not in _EXEMPT_PATHS:
            err = HTTPSRequiredError()
            return JSONResponse(
                status_code=err.http_status,
                content=error_response(
                    err.code, err.message, getattr(request.state, "request_id", None)
                ).model_dump(),
            )
        return await call_next(request)

"""FastAPI dependencies: require_api_key, require_request_signature.

Usage in any protected router:
    router = APIRouter(dependencies=[Depends(require_api_key)])
"""

import logging
from typing import Annotated

from fastapi import Depends, Request

from src.gift_common.errors import InvalidAPIKeyError, InvalidSignatureError, MissingAPIKeyError
from src.gift_gateway.auth.api_key import API_KEY_HEADER, extract_api_key, is_valid_api_key
from src.gift_gateway.auth.signature import REQUEST_SIGNATURE_HEADER, verify_signature
from src.gift_gateway.wiring import GatewayServices, get_services

logger = logging.getLogger("gift.auth")


async def require_api_key(
    request: Request,
    services: Annotated[GatewayServices, Depends(get_services)],
) -> None:
    """Reject the request with 401 unless it carries the gateway API key."""
    api_key = extract_api_key(request.headers.get(API_KEY_HEADER))
    if not api_key:
        logger.warning("Missing API key: %s %s", request.method, request.url.path)
        raise MissingAPIKeyError()
    if not is_valid_api_key(api_key, services.settings.GATEWAY_API_KEY):
        # never log the presented key
        logger.warning("Invalid API key attempt: %s %s", request.method, request.url.path)
        raise InvalidAPIKeyError()


async def require_request_signature(
    request: Request,
    services: Annotated[GatewayServices, Depends(get_services)],
) -> None:
    """When REQUEST_SIGNING_SECRET is set, require an HMAC of the raw body."""
    secret = services.settings.REQUEST_SIGNING_SECRET
    if not secret:
        return
    body = await request.body()
    if not verify_signature(secret, body, request.headers.get(REQUEST_SIGNATURE_HEADER)):
        logger.warning("Invalid request signature: %s %s", request.method, request.url.path)
        raise InvalidSignatureError("request")

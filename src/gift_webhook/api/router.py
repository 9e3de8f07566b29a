"""Provider webhook endpoint.

Authenticated by the body HMAC, not the gateway API key. The raw body is
read before parsing so the signature covers exactly the bytes received.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.gift_gateway.auth.signature import WEBHOOK_SIGNATURE_HEADER
from src.gift_gateway.wiring import GatewayServices, get_services

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/istar", summary="iStar order status callback")
async def handle_istar_webhook(
    request: Request,
    services: Annotated[GatewayServices, Depends(get_services)],
) -> dict[str, str]:
    body = await request.body()
    await services.webhooks.handle(body, request.headers.get(WEBHOOK_SIGNATURE_HEADER))
    return {"status": "ok"}

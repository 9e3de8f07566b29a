# src/gift_order/api/premium_router.py
"""Premium gift and package endpoints — all require the gateway API key."""
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status

from src.gift_common.enums import PREMIUM_MONTHS
from src.gift_common.errors import ValidationError
from src.gift_gateway.auth.dependencies import require_api_key, require_request_signature
from src.gift_gateway.wiring import GatewayServices, get_services
from src.gift_order.application.schemas import CreatePremiumOrderRequest, OrderResponse

router = APIRouter(tags=["premium"], dependencies=[Depends(require_api_key)])


@router.get("/premium/recipient/search", summary="Search premium recipient")
async def search_premium_recipient(
    services: Annotated[GatewayServices, Depends(get_services)],
    username: str = Query(..., min_length=1, description="Recipient username"),
    months: int = Query(..., description="Subscription length: 3, 6 or 12"),
) -> Any:
    if months not in PREMIUM_MONTHS:
        raise ValidationError("Months must be 3, 6, or 12")
    return await services.client.search_premium_recipient(username, months)


@router.post(
    "/orders/premium",
    response_model=OrderResponse,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(require_request_signature)],
    summary="Create premium gift order (asynchronous)",
)
async def create_premium_order_async(
    req: CreatePremiumOrderRequest,
    services: Annotated[GatewayServices, Depends(get_services)],
) -> OrderResponse:
    order = await services.orders.create_premium_order_async(req)
    return OrderResponse.from_order(order)


@router.post(
    "/orders/premium/sync",
    response_model=OrderResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_request_signature)],
    summary="Create premium gift order (synchronous)",
)
async def create_premium_order_sync(
    req: CreatePremiumOrderRequest,
    services: Annotated[GatewayServices, Depends(get_services)],
) -> OrderResponse:
    order = await services.orders.create_premium_order_sync(req)
    return OrderResponse.from_order(order)


@router.get("/premium/packages", summary="List premium packages")
async def get_premium_packages(
    services: Annotated[GatewayServices, Depends(get_services)],
) -> Any:
    return await services.client.get_premium_packages()

# src/gift_order/api/star_router.py
"""Star gifting endpoints — all require the gateway API key."""
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status

from src.gift_common.enums import STAR_QUANTITY_MAX, STAR_QUANTITY_MIN
from src.gift_gateway.auth.dependencies import require_api_key, require_request_signature
from src.gift_gateway.wiring import GatewayServices, get_services
from src.gift_order.application.schemas import CreateStarOrderRequest, OrderResponse

router = APIRouter(tags=["star"], dependencies=[Depends(require_api_key)])


@router.get("/star/recipient/search", summary="Search star recipient")
async def search_star_recipient(
    services: Annotated[GatewayServices, Depends(get_services)],
    username: str = Query(..., min_length=1, description="Recipient username"),
    quantity: int = Query(..., ge=STAR_QUANTITY_MIN, le=STAR_QUANTITY_MAX),
) -> Any:
    return await services.client.search_star_recipient(username, quantity)


@router.post(
    "/orders/star",
    response_model=OrderResponse,
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(require_request_signature)],
    summary="Create star gift order (asynchronous)",
)
async def create_star_order_async(
    req: CreateStarOrderRequest,
    services: Annotated[GatewayServices, Depends(get_services)],
) -> OrderResponse:
    order = await services.orders.create_star_order_async(req)
    return OrderResponse.from_order(order)


@router.post(
    "/orders/star/sync",
    response_model=OrderResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_request_signature)],
    summary="Create star gift order (synchronous)",
)
async def create_star_order_sync(
    req: CreateStarOrderRequest,
    services: Annotated[GatewayServices, Depends(get_services)],
) -> OrderResponse:
    order = await services.orders.create_star_order_sync(req)
    return OrderResponse.from_order(order)

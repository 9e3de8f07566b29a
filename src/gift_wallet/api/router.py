"""Wallet endpoint — provider balance pass-through."""
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from src.gift_gateway.auth.dependencies import require_api_key
from src.gift_gateway.wiring import GatewayServices, get_services

router = APIRouter(prefix="/wallet", tags=["wallet"], dependencies=[Depends(require_api_key)])


@router.get("/balance", summary="Get wallet balance")
async def get_wallet_balance(
    services: Annotated[GatewayServices, Depends(get_services)],
) -> Any:
    return await services.client.get_wallet_balance()

"""
Shop API routes.
"""

from fastapi import APIRouter, HTTPException, Depends

from ..schemas.shop import ShopStateSchema
from ..schemas.common import BaseResponse
from ..services.game_service import GameService
from ..dependencies import get_game_service

router = APIRouter()


@router.get("/{game_id}", response_model=ShopStateSchema)
async def get_shop(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Get shop state."""
    try:
        return service.get_shop(game_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")


@router.post("/{game_id}/buy/{slot_index}", response_model=BaseResponse)
async def buy_item(
    game_id: str,
    slot_index: int,
    service: GameService = Depends(get_game_service),
):
    """Buy the reward in a shop slot."""
    try:
        success = service.buy_shop_item(game_id, slot_index)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")
    if not success:
        raise HTTPException(status_code=400, detail="Purchase failed")
    return BaseResponse(message="Reward purchased")


@router.post("/{game_id}/lock/{slot_index}", response_model=BaseResponse)
async def toggle_lock(
    game_id: str,
    slot_index: int,
    service: GameService = Depends(get_game_service),
):
    """Lock or unlock a shop slot."""
    try:
        success = service.toggle_shop_lock(game_id, slot_index)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")
    if not success:
        raise HTTPException(status_code=400, detail="Slot is empty")
    return BaseResponse(message="Lock toggled")


@router.post("/{game_id}/refresh", response_model=ShopStateSchema)
async def refresh_shop(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Re-roll every unlocked slot."""
    try:
        service.refresh_shop(game_id)
        return service.get_shop(game_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")

"""
Reward selection API routes.
"""

from fastapi import APIRouter, HTTPException, Depends

from layersim.data.loaders import load_pool
from layersim.data.models import RewardCategory

from ..schemas.rewards import OffersResponse, CatalogResponse
from ..schemas.common import BaseResponse
from ..services.game_service import GameService
from ..dependencies import get_game_service

router = APIRouter()


@router.get("/catalog/{category}", response_model=CatalogResponse)
async def get_catalog(category: RewardCategory):
    """List every reward in a rarity pool."""
    rewards = list(load_pool(category))
    return CatalogResponse(category=category.value, rewards=rewards, total=len(rewards))


@router.get("/{game_id}/offers", response_model=OffersResponse)
async def get_offers(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Get pending passive and boss reward offers."""
    try:
        return service.get_offers(game_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")


# Confirm routes must precede the {id} routes


@router.post("/{game_id}/passive/confirm", response_model=BaseResponse)
async def confirm_passive(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Apply the selected passive and resume combat."""
    try:
        success = service.confirm_passive(game_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")
    if not success:
        raise HTTPException(status_code=400, detail="No passive selected")
    return BaseResponse(message="Passive applied")


@router.post("/{game_id}/passive/{passive_id}", response_model=BaseResponse)
async def select_passive(
    game_id: str,
    passive_id: str,
    service: GameService = Depends(get_game_service),
):
    """Select an offered passive."""
    try:
        success = service.select_passive(game_id, passive_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")
    if not success:
        raise HTTPException(status_code=400, detail="Passive not on offer")
    return BaseResponse(message="Passive selected")


@router.post("/{game_id}/boss/confirm", response_model=BaseResponse)
async def confirm_boss_reward(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Apply the selected boss reward and advance the layer."""
    try:
        success = service.confirm_boss_reward(game_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")
    if not success:
        raise HTTPException(status_code=400, detail="No boss reward selected")
    return BaseResponse(message="Boss reward applied")


@router.post("/{game_id}/boss/{reward_id}", response_model=BaseResponse)
async def select_boss_reward(
    game_id: str,
    reward_id: str,
    service: GameService = Depends(get_game_service),
):
    """Select an offered boss reward."""
    try:
        success = service.select_boss_reward(game_id, reward_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")
    if not success:
        raise HTTPException(status_code=400, detail="Boss reward not on offer")
    return BaseResponse(message="Boss reward selected")

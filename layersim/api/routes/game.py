"""
Game session API routes.
"""

from fastapi import APIRouter, BackgroundTasks, HTTPException, Depends, Query

from ..schemas.game import (
    CreateGameRequest,
    TickRequest,
    PauseRequest,
    RestartRequest,
    ResizeRequest,
    GameStateSchema,
    TickResponse,
    SessionRecordsResponse,
)
from ..schemas.common import BaseResponse
from ..services.game_service import GameService
from ..dependencies import get_game_service

router = APIRouter()


@router.post("/create", response_model=GameStateSchema)
async def create_game(
    request: CreateGameRequest,
    service: GameService = Depends(get_game_service),
):
    """Create a new game."""
    return service.create_game(request.seed, request.width, request.height)


@router.get("/sessions/records", response_model=SessionRecordsResponse)
async def get_session_records(
    limit: int = Query(default=10, ge=1, le=100),
    service: GameService = Depends(get_game_service),
):
    """Best submitted session records."""
    return service.get_records(limit)


@router.get("/{game_id}", response_model=GameStateSchema)
async def get_game(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Get game state."""
    try:
        return service.get_state(game_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")


@router.post("/{game_id}/tick", response_model=TickResponse)
async def tick_game(
    game_id: str,
    request: TickRequest,
    background_tasks: BackgroundTasks,
    service: GameService = Depends(get_game_service),
):
    """Advance the simulation."""
    try:
        response = service.tick(game_id, request)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")

    record = service.take_finished_record(game_id)
    if record is not None:
        background_tasks.add_task(service.submit_record, record)
    return response


@router.post("/{game_id}/pause", response_model=BaseResponse)
async def pause_game(
    game_id: str,
    request: PauseRequest,
    service: GameService = Depends(get_game_service),
):
    """Pause or resume combat."""
    try:
        success = service.set_paused(game_id, request.paused)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")
    if not success:
        raise HTTPException(status_code=400, detail="Game is not in combat")
    return BaseResponse(message="Paused" if request.paused else "Resumed")


@router.post("/{game_id}/restart", response_model=GameStateSchema)
async def restart_game(
    game_id: str,
    request: RestartRequest,
    service: GameService = Depends(get_game_service),
):
    """Start a new run."""
    try:
        return service.restart(game_id, request.seed)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")


@router.post("/{game_id}/resize", response_model=GameStateSchema)
async def resize_game(
    game_id: str,
    request: ResizeRequest,
    service: GameService = Depends(get_game_service),
):
    """Change the viewport bounds."""
    try:
        return service.resize(game_id, request.width, request.height)
    except KeyError:
        raise HTTPException(status_code=404, detail="Game not found")


@router.delete("/{game_id}", response_model=BaseResponse)
async def delete_game(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Delete game."""
    service.delete_game(game_id)
    return BaseResponse(message="Game deleted")

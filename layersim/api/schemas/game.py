"""
Game-related API schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


# === Request Schemas ===


class CreateGameRequest(BaseModel):
    """Game creation request."""

    seed: Optional[str] = None
    width: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)


class TickRequest(BaseModel):
    """Advance the simulation by one or more frames."""

    delta_ms: float = 16.7
    held: List[str] = Field(default_factory=list)  # "up", "down", "left", "right"
    steps: int = Field(default=1, ge=1)


class PauseRequest(BaseModel):
    """Pause toggle request."""

    paused: bool


class RestartRequest(BaseModel):
    """Restart request; keeps the current seed when none is given."""

    seed: Optional[str] = None


class ResizeRequest(BaseModel):
    """Viewport resize request."""

    width: float = Field(gt=0)
    height: float = Field(gt=0)


# === Response Schemas ===


class GameStateSchema(BaseModel):
    """Game state schema."""

    game_id: str
    seed: str
    layer: int
    time_remaining: float
    phase: str
    paused: bool
    game_over: bool
    score: int
    kills: int
    elapsed_ms: float
    boss_defeated_layer: Optional[int] = None
    player: Dict[str, Any]
    enemies: List[Dict[str, Any]]
    projectiles: List[Dict[str, Any]]
    build: List[str]


class CombatEventSchema(BaseModel):
    """Combat event schema."""

    type: str
    data: Dict[str, Any]


class TickResponse(BaseModel):
    """Tick response."""

    steps: int
    events: List[CombatEventSchema]
    state: GameStateSchema


class SessionRecordSchema(BaseModel):
    """Finished run summary."""

    layer: int
    score: int
    play_time: float
    build: List[str]
    seed: str


class SessionRecordsResponse(BaseModel):
    """Submitted session records."""

    records: List[SessionRecordSchema]
    total: int

"""
Dependency injection for API services.
"""

from functools import lru_cache

from .config import settings
from .services.game_service import GameService


@lru_cache()
def get_game_service() -> GameService:
    """Get GameService singleton."""
    return GameService(settings)

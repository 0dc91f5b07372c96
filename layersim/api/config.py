"""
API configuration settings.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """API settings."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Simulation
    DEFAULT_SEED: str = "default"
    VIEWPORT_WIDTH: float = 800.0
    VIEWPORT_HEIGHT: float = 600.0
    MAX_TICK_STEPS: int = 600

    # Session
    MAX_SESSIONS: int = 100
    MAX_RECORDS: int = 1000

    class Config:
        env_file = ".env"


settings = Settings()

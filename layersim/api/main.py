"""
FastAPI main application.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from layersim import __version__

from .config import settings
from .routes import game, rewards, shop

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Layer Survival Simulator API",
    description="Layer-based survival combat simulation with reward, shop and boss systems",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(game.router, prefix="/api/game", tags=["Game"])
app.include_router(rewards.router, prefix="/api/rewards", tags=["Rewards"])
app.include_router(shop.router, prefix="/api/shop", tags=["Shop"])


@app.get("/")
async def root():
    """API status check."""
    return {
        "status": "ok",
        "name": "Layer Survival Simulator API",
        "version": __version__,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}

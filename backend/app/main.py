from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import List
import logging

from backend.app.core.database import init_models
from backend.app.core.level_registry import registry
from backend.app.schemas.match_schema import LevelResponse
from backend.app.api.ai import router as ai_router
from backend.app.api.matches import router as matches_router

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: make sure the matches table exists
    await init_models()
    logger.info("Database ready, %d AI levels configured", len(registry.list_all()))
    yield

app = FastAPI(title="Connect Four MCTS", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(ai_router, prefix="/ai", tags=["AI"])
app.include_router(matches_router, tags=["Matches"])

@app.get("/levels", response_model=List[LevelResponse])
async def get_levels():
    """Returns the configured bot levels and their search budgets."""
    return [
        LevelResponse(level=level, label=config.label, rollouts=config.rollouts)
        for level, config in sorted(registry.list_all().items())
    ]

# =============================================================================
# FastAPI Application Entry Point
# =============================================================================
#
# Run locally:
#   uvicorn app.main:app --reload
#
# Logging is configured once here; every other module only creates its
# own `logging.getLogger(__name__)`.
# =============================================================================

from __future__ import annotations

import logging

from fastapi import FastAPI

from app.api.analysis import router as analysis_router
from app.config import settings
from app.models.responses import HealthResponse

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    description=(
        "Financial, economic and news-sentiment analysis produced by "
        "specialised LLM agents."
    ),
)

app.include_router(analysis_router)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health() -> HealthResponse:
    return HealthResponse(version=settings.app_version, service=settings.app_name)

# =============================================================================
# Analysis Response Models — Pydantic V2 Schemas
# =============================================================================
#
# These models define the shape of data coming OUT of the orchestrator.
# They are returned to Python callers as-is and serialised to JSON by
# FastAPI without further mapping.
#
# DESIGN DECISION: Failures are in-band.
# AgentAnalysisResult always carries `success`. On failure `analysis`
# is "" and `error` holds the message. The HTTP layer never needs to
# translate analysis exceptions into status codes.
# =============================================================================

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Response for GET /health — confirms the API is running."""

    status: str = "ok"
    version: str
    service: str


class AnalysisMetadata(BaseModel):
    """Observability data attached to every agent result."""

    agent_type: Literal["financial", "economic", "news"]
    processing_time_ms: int = Field(ge=0, description="Wall time of the run")
    data_points: int | None = Field(
        default=None,
        ge=0,
        description="Heuristic count of input fields (successful runs only)",
    )

    model_config = ConfigDict(frozen=True)


class AgentAnalysisResult(BaseModel):
    """
    Outcome of one agent run.

    Created fresh per call and never mutated afterwards.
    """

    success: bool
    analysis: str = ""
    error: str | None = None
    metadata: AnalysisMetadata | None = None

    model_config = ConfigDict(frozen=True)


class ComprehensiveAnalysisResult(BaseModel):
    """All three agent outcomes, each tagged success/failure on its own."""

    financial: AgentAnalysisResult
    economic: AgentAnalysisResult
    news: AgentAnalysisResult

    model_config = ConfigDict(frozen=True)

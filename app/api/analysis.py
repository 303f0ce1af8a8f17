# =============================================================================
# Analysis API — Financial, Economic, News & Comprehensive Endpoints
# =============================================================================
#
# Four POST endpoints, one per agent plus the combined fan-out:
#   POST /analysis/financial
#   POST /analysis/economic
#   POST /analysis/news
#   POST /analysis/comprehensive
#
# This router is thin by design — request validation and response
# mapping only. The factory already turns every analysis failure into
# an in-band result (success=false), so handlers always answer 200 with
# the result body. Malformed payloads are rejected by FastAPI with 422
# before the factory is involved.
# =============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from app.agents.orchestrator import AgentFactory
from app.api.deps import get_agent_factory
from app.models.requests import (
    ComprehensiveAnalysisRequest,
    EconomicAnalysisRequest,
    FinancialAnalysisRequest,
    NewsAnalysisRequest,
)
from app.models.responses import AgentAnalysisResult, ComprehensiveAnalysisResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["Analysis"])


@router.post(
    "/financial",
    response_model=AgentAnalysisResult,
    summary="Balance sheet health report",
)
async def financial_analysis(
    request: FinancialAnalysisRequest,
    factory: AgentFactory = Depends(get_agent_factory),
) -> AgentAnalysisResult:
    logger.info(
        "Financial analysis request: target_date=%s, transactions=%d",
        request.target_date, len(request.transactions),
    )
    return await factory.run_financial_analysis(request)


@router.post(
    "/economic",
    response_model=AgentAnalysisResult,
    summary="Macro-economic impact assessment",
)
async def economic_analysis(
    request: EconomicAnalysisRequest,
    factory: AgentFactory = Depends(get_agent_factory),
) -> AgentAnalysisResult:
    logger.info(
        "Economic analysis request: region=%s, period=%s",
        request.economic_context.region, request.economic_context.period,
    )
    return await factory.run_economic_analysis(request)


@router.post(
    "/news",
    response_model=AgentAnalysisResult,
    summary="News sentiment and financial impact",
)
async def news_analysis(
    request: NewsAnalysisRequest,
    factory: AgentFactory = Depends(get_agent_factory),
) -> AgentAnalysisResult:
    logger.info(
        "News analysis request: company=%s, articles=%d",
        request.company_name, len(request.news_articles),
    )
    return await factory.run_news_analysis(request)


@router.post(
    "/comprehensive",
    response_model=ComprehensiveAnalysisResult,
    summary="Run all three agents concurrently",
    description=(
        "Runs the financial, economic and news analysts in parallel. "
        "Each result is tagged success/failure independently; one "
        "agent failing never hides the other two."
    ),
)
async def comprehensive_analysis(
    request: ComprehensiveAnalysisRequest,
    factory: AgentFactory = Depends(get_agent_factory),
) -> ComprehensiveAnalysisResult:
    return await factory.run_comprehensive_analysis(
        request.financial, request.economic, request.news,
    )

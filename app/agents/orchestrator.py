# =============================================================================
# Agent Factory & Orchestrator — Fan-Out with Per-Agent Failure Isolation
# =============================================================================
#
# The factory creates analysts by type and runs them. Every run_* method
# is a failure boundary: whatever goes wrong inside (malformed input,
# backend failure, missing ratios) comes back as a failed
# AgentAnalysisResult, never as an exception.
#
# GRAPH TOPOLOGY (comprehensive analysis):
#            ┌──▶ financial_agent ──┐
#   START ───┼──▶ economic_agent  ──┼──▶ END
#            └──▶ news_agent      ──┘
#
# DESIGN DECISION: Parallel branches in one LangGraph superstep.
# The three agents are independent, so LangGraph runs them concurrently
# and joins them before END. Each branch writes only its own state key
# and each branch goes through a run_* boundary, so one failure cannot
# cancel or block its siblings.
#
# DESIGN DECISION: Graph compiled once at module level.
# The factory travels in the state (like an LLM override would), so the
# compiled graph is shared across requests with different credentials.
# NOTE: Not JSON-serialisable. Safe as long as no checkpointer is
# configured on the graph (current: no checkpointer).
#
# DESIGN DECISION: Unknown agent types are programming errors.
# create_agent() raises UnknownAgentTypeError, and run_* create the agent
# outside the failure boundary so such an error is never turned into a
# quiet success=false.
# =============================================================================

from __future__ import annotations

import dataclasses
import enum
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from langgraph.graph import END, START, StateGraph
from pydantic import BaseModel
from typing_extensions import TypedDict

from app.agents.base import AgentConfig
from app.agents.economic import EconomicAnalyst
from app.agents.financial import DEFAULT_MIN_TEMPERATURE, SeniorFinancialAnalyst
from app.agents.news import DEFAULT_NEWS_TEMPERATURE, NewsAnalyst
from app.config import Settings
from app.models.requests import (
    EconomicAnalysisRequest,
    EconomicContext,
    FinancialAnalysisRequest,
    NewsAnalysisRequest,
)
from app.models.responses import (
    AgentAnalysisResult,
    AnalysisMetadata,
    ComprehensiveAnalysisResult,
)
from app.services.llm import LLMProvider, create_llm_provider

logger = logging.getLogger(__name__)


class AgentType(str, enum.Enum):
    """The closed set of analysts the factory can build."""

    FINANCIAL = "financial"
    ECONOMIC = "economic"
    NEWS = "news"


Agent = SeniorFinancialAnalyst | EconomicAnalyst | NewsAnalyst

FinancialInput = FinancialAnalysisRequest | Mapping[str, Any]
EconomicInput = EconomicAnalysisRequest | Mapping[str, Any]
NewsInput = NewsAnalysisRequest | Mapping[str, Any]


class UnknownAgentTypeError(ValueError):
    """Raised by create_agent() for a type outside AgentType."""


# ---------------------------------------------------------------------------
# Data Point Counting
# ---------------------------------------------------------------------------
# Observability only. Missing fields contribute zero; these never raise.
# ---------------------------------------------------------------------------


def count_financial_data_points(
    request: FinancialAnalysisRequest | None,
) -> int:
    """
    1 for the balance sheet, plus every breakdown entry, every supplied
    ratio, and every transaction.
    """
    if request is None:
        return 0

    count = 0
    sheet = request.balance_sheet
    if sheet is not None:
        count += 1
        count += len(sheet.asset_breakdown or [])
        count += len(sheet.liability_breakdown or [])
        count += len(sheet.equity_breakdown or [])
        if sheet.ratios is not None:
            count += len(sheet.ratios.model_dump(exclude_none=True))
    count += len(request.transactions or [])
    return count


def count_economic_data_points(context: EconomicContext | None) -> int:
    if context is None:
        return 0

    count = sum(
        value is not None
        for value in (context.gdp_growth, context.inflation, context.unemployment)
    )
    rates = context.interest_rates
    if rates is not None:
        count += sum(value is not None for value in (rates.federal, rates.prime))
    count += len(context.industry_trends or [])
    count += len(context.market_indices or {})
    return count


def count_news_data_points(request: NewsAnalysisRequest | None) -> int:
    if request is None:
        return 0
    return len(request.news_articles or [])


# ---------------------------------------------------------------------------
# Agent Factory
# ---------------------------------------------------------------------------


class AgentFactory:
    """
    Creates analysts and runs them behind a failure boundary.

    Args:
        config: Generation parameters shared by all agents. Defaults to
            gpt-4-turbo / 0.7 / 1500 tokens.
        llm: Default backend client. Agents whose config carries an
            api_key build their own client instead.
        news_temperature: Temperature for the news analyst.
        financial_min_temperature: Floor for the financial analyst.
    """

    def __init__(
        self,
        config: AgentConfig | None = None,
        llm: LLMProvider | None = None,
        news_temperature: float = DEFAULT_NEWS_TEMPERATURE,
        financial_min_temperature: float = DEFAULT_MIN_TEMPERATURE,
    ) -> None:
        self.config = config or AgentConfig()
        self.llm = llm
        self.news_temperature = news_temperature
        self.financial_min_temperature = financial_min_temperature

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        api_key: str | None = None,
        llm: LLMProvider | None = None,
    ) -> AgentFactory:
        """
        Build a factory from application settings.

        Args:
            settings: Loaded Settings.
            api_key: Per-request credential override.
            llm: Pre-built default client. When None one is built from
                settings (placeholder if no key is configured).
        """
        config = AgentConfig(
            model=settings.agent_model,
            temperature=settings.agent_temperature,
            max_tokens=settings.agent_max_tokens,
            api_key=api_key,
            provider_type=settings.llm_provider,
            base_url=settings.llm_base_url,
        )
        if llm is None:
            llm = create_llm_provider(
                provider_type=settings.llm_provider,
                api_key=settings.resolved_api_key(),
                model=settings.agent_model,
                base_url=settings.llm_base_url,
            )
        return cls(
            config=config,
            llm=llm,
            news_temperature=settings.news_temperature,
            financial_min_temperature=settings.financial_min_temperature,
        )

    def create_agent(self, agent_type: AgentType | str) -> Agent:
        """
        Create a fresh analyst of the given type.

        Raises:
            UnknownAgentTypeError: If `agent_type` is not an AgentType.
        """
        try:
            resolved = AgentType(agent_type)
        except ValueError:
            raise UnknownAgentTypeError(
                f"Unknown agent type: {agent_type}"
            ) from None

        if resolved is AgentType.FINANCIAL:
            return SeniorFinancialAnalyst(
                self.config,
                self.llm,
                min_temperature=self.financial_min_temperature,
            )
        if resolved is AgentType.ECONOMIC:
            return EconomicAnalyst(self.config, self.llm)
        return NewsAnalyst(
            dataclasses.replace(self.config, temperature=self.news_temperature),
            self.llm,
        )

    async def run_financial_analysis(
        self,
        request: FinancialInput,
    ) -> AgentAnalysisResult:
        return await self._run(
            AgentType.FINANCIAL,
            request,
            FinancialAnalysisRequest,
            count_financial_data_points,
        )

    async def run_economic_analysis(
        self,
        request: EconomicInput,
    ) -> AgentAnalysisResult:
        return await self._run(
            AgentType.ECONOMIC,
            request,
            EconomicAnalysisRequest,
            lambda req: count_economic_data_points(req.economic_context),
        )

    async def run_news_analysis(
        self,
        request: NewsInput,
    ) -> AgentAnalysisResult:
        return await self._run(
            AgentType.NEWS,
            request,
            NewsAnalysisRequest,
            count_news_data_points,
        )

    async def run_comprehensive_analysis(
        self,
        financial_request: FinancialInput,
        economic_request: EconomicInput,
        news_request: NewsInput,
    ) -> ComprehensiveAnalysisResult:
        """
        Run all three analysts concurrently and combine the outcomes.

        Always returns all three results, each tagged success/failure
        independently.
        """
        logger.info("Invoking comprehensive analysis graph")
        state = await comprehensive_graph.ainvoke({
            "factory": self,
            "financial_request": financial_request,
            "economic_request": economic_request,
            "news_request": news_request,
        })
        result = ComprehensiveAnalysisResult(
            financial=state["financial"],
            economic=state["economic"],
            news=state["news"],
        )
        logger.info(
            "Comprehensive analysis complete: financial=%s, economic=%s, "
            "news=%s",
            result.financial.success,
            result.economic.success,
            result.news.success,
        )
        return result

    async def _run(
        self,
        agent_type: AgentType,
        request: Any,
        request_model: type[BaseModel],
        count: Callable[[Any], int],
    ) -> AgentAnalysisResult:
        """Failure boundary shared by the run_* methods."""
        agent = self.create_agent(agent_type)
        start = time.monotonic()

        try:
            validated = request_model.model_validate(request)
            analysis = await agent.analyze(validated)
        except Exception as e:
            elapsed = _elapsed_ms(start)
            logger.exception(
                "%s analysis failed after %dms", agent_type.value, elapsed,
            )
            return AgentAnalysisResult(
                success=False,
                analysis="",
                error=str(e) or f"Unknown error in {agent_type.value} analysis",
                metadata=AnalysisMetadata(
                    agent_type=agent_type.value,
                    processing_time_ms=elapsed,
                ),
            )

        elapsed = _elapsed_ms(start)
        data_points = count(validated)
        logger.info(
            "%s analysis complete: %dms, data_points=%d",
            agent_type.value, elapsed, data_points,
        )
        return AgentAnalysisResult(
            success=True,
            analysis=analysis,
            metadata=AnalysisMetadata(
                agent_type=agent_type.value,
                processing_time_ms=elapsed,
                data_points=data_points,
            ),
        )


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.monotonic() - start) * 1000))


# ---------------------------------------------------------------------------
# Comprehensive Analysis Graph
# ---------------------------------------------------------------------------


class ComprehensiveState(TypedDict, total=False):
    """
    State flowing through the comprehensive graph.

    Node names differ from the result keys: LangGraph rejects a node
    named like a state key.
    """

    # --- Input (set by caller) ---
    factory: AgentFactory
    financial_request: FinancialInput
    economic_request: EconomicInput
    news_request: NewsInput

    # --- Output (one key per branch) ---
    financial: AgentAnalysisResult
    economic: AgentAnalysisResult
    news: AgentAnalysisResult


async def financial_node(state: ComprehensiveState) -> dict:
    factory = state["factory"]
    return {
        "financial": await factory.run_financial_analysis(
            state["financial_request"],
        ),
    }


async def economic_node(state: ComprehensiveState) -> dict:
    factory = state["factory"]
    return {
        "economic": await factory.run_economic_analysis(
            state["economic_request"],
        ),
    }


async def news_node(state: ComprehensiveState) -> dict:
    factory = state["factory"]
    return {"news": await factory.run_news_analysis(state["news_request"])}


_builder = StateGraph(ComprehensiveState)
_builder.add_node("financial_agent", financial_node)
_builder.add_node("economic_agent", economic_node)
_builder.add_node("news_agent", news_node)

for _node in ("financial_agent", "economic_agent", "news_agent"):
    _builder.add_edge(START, _node)
    _builder.add_edge(_node, END)

comprehensive_graph = _builder.compile()

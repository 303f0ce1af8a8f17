# =============================================================================
# Unit Tests — Agent Factory & Orchestration
# =============================================================================
#
# Tests agent creation, the per-run failure boundary, data point
# counting, and the concurrent comprehensive analysis. No API keys: the
# backend is an AsyncMock or a small in-memory fake.
# =============================================================================

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.agents.base import AgentConfig
from app.agents.economic import EconomicAnalyst
from app.agents.financial import SeniorFinancialAnalyst
from app.agents.news import NewsAnalyst
from app.agents.orchestrator import (
    AgentFactory,
    AgentType,
    UnknownAgentTypeError,
    count_economic_data_points,
    count_financial_data_points,
    count_news_data_points,
)
from app.config import Settings
from app.models.requests import (
    EconomicContext,
    FinancialAnalysisRequest,
    NewsAnalysisRequest,
)
from app.models.responses import AgentAnalysisResult, ComprehensiveAnalysisResult
from app.services.llm import PLACEHOLDER_ANALYSIS, LLMResponse, PlaceholderProvider

_RATIOS = {
    "current_ratio": 2.5,
    "debt_to_equity_ratio": 0.67,
    "return_on_equity": 0.167,
    "equity_multiplier": 1.67,
    "debt_ratio": 0.4,
    "net_profit_margin": 0.15,
}


def _run(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


def _mock_llm(content: str = "Generated analysis.") -> AsyncMock:
    llm = AsyncMock()
    llm.complete.return_value = LLMResponse(
        content=content, model="test-model", input_tokens=10, output_tokens=5,
    )
    return llm


def _financial_request(**sheet_overrides) -> dict:
    sheet = {
        "date": "2024-03-31",
        "total_asset": 150000,
        "total_liability": 60000,
        "total_equity": 90000,
        "net_income": 15000,
        "asset_breakdown": [
            {"name": "Cash", "value": 50000},
            {"name": "Receivables", "value": 25000},
            {"name": "Inventory", "value": 45000},
        ],
        "liability_breakdown": [
            {"name": "Accounts Payable", "value": 20000},
            {"name": "Long-term Debt", "value": 25000},
        ],
        "equity_breakdown": [],
        "ratios": dict(_RATIOS),
    }
    sheet.update(sheet_overrides)
    return {
        "balance_sheet": sheet,
        "target_date": "2024-03-31",
        "transactions": [
            {"date": "2024-03-01", "amount": 100},
            {"date": "2024-03-02", "amount": -40},
            {"date": "2024-03-03", "amount": 75},
            {"date": "2024-03-04", "amount": 12},
        ],
    }


def _economic_request() -> dict:
    return {
        "economic_context": {
            "period": "Q1 2024",
            "region": "United States",
            "gdp_growth": 0.032,
            "inflation": 0.042,
            "interest_rates": {"federal": 0.05},
            "industry_trends": ["AI adoption", "Reshoring"],
            "market_indices": {"S&P 500": 5200, "NASDAQ": 16000, "DOW": 39000},
        },
        "target_date": "2024-03-31",
    }


def _news_request(**overrides) -> dict:
    data = {
        "company_name": "Company Inc.",
        "industry": "Technology",
        "news_articles": [
            {
                "title": "Company Inc. Reports Strong Quarterly Earnings",
                "source": "Financial Times",
                "date": "2024-03-01",
                "content": "Revenue up 15% year-over-year.",
                "sentiment": {"score": 0.8},
            },
            {
                "title": "Supplier delays",
                "source": "Reuters",
                "date": "2024-02-01",
                "content": "Shipments slipped.",
            },
        ],
        "target_date": "2024-03-31",
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# Test: Agent Creation
# ---------------------------------------------------------------------------


class TestCreateAgent:
    """Tests for AgentFactory.create_agent()."""

    def test_creates_each_variant(self):
        factory = AgentFactory()
        assert isinstance(factory.create_agent("financial"), SeniorFinancialAnalyst)
        assert isinstance(factory.create_agent(AgentType.ECONOMIC), EconomicAnalyst)
        assert isinstance(factory.create_agent("news"), NewsAnalyst)

    def test_default_configuration(self):
        factory = AgentFactory()
        for agent_type in (AgentType.FINANCIAL, AgentType.ECONOMIC):
            agent = factory.create_agent(agent_type)
            assert agent.model == "gpt-4-turbo"
            assert agent.temperature == 0.7
            assert agent.max_tokens == 1500

    def test_news_agent_runs_cooler(self):
        agent = AgentFactory().create_agent("news")
        assert agent.temperature == 0.4
        assert agent.model == "gpt-4-turbo"

    def test_override_propagates(self):
        factory = AgentFactory(AgentConfig(model="gpt-4o", max_tokens=800))
        agent = factory.create_agent("economic")
        assert agent.model == "gpt-4o"
        assert agent.max_tokens == 800

    def test_agents_are_fresh_per_call(self):
        factory = AgentFactory()
        assert factory.create_agent("news") is not factory.create_agent("news")

    @pytest.mark.parametrize("bad_type", ["comprehensive", "legal", "", "FINANCIAL"])
    def test_unknown_type_raises(self, bad_type):
        with pytest.raises(UnknownAgentTypeError, match="Unknown agent type"):
            AgentFactory().create_agent(bad_type)

    def test_unknown_type_is_value_error(self):
        with pytest.raises(ValueError):
            AgentFactory().create_agent("macro")

    def test_from_settings_without_key_uses_placeholder(self):
        settings = Settings(
            _env_file=None, llm_api_key=None, openai_api_key="",
            agent_model="gpt-4o-mini", news_temperature=0.3,
        )
        factory = AgentFactory.from_settings(settings)
        assert isinstance(factory.llm, PlaceholderProvider)
        assert factory.config.model == "gpt-4o-mini"
        assert factory.create_agent("news").temperature == 0.3

    def test_from_settings_carries_request_credential(self):
        settings = Settings(_env_file=None)
        factory = AgentFactory.from_settings(
            settings, api_key="sk-user", llm=_mock_llm(),
        )
        assert factory.create_agent("financial").config.api_key == "sk-user"


# ---------------------------------------------------------------------------
# Test: Data Point Counting
# ---------------------------------------------------------------------------


class TestDataPoints:
    """Tests for the observability counters."""

    def test_financial_count(self):
        request = FinancialAnalysisRequest.model_validate(_financial_request())
        # 1 sheet + 3 assets + 2 liabilities + 0 equity + 6 ratios + 4 txns
        assert count_financial_data_points(request) == 16

    def test_financial_count_without_ratios(self):
        request = FinancialAnalysisRequest.model_validate(
            _financial_request(ratios=None),
        )
        assert count_financial_data_points(request) == 10

    def test_financial_count_without_sheet(self):
        assert count_financial_data_points(FinancialAnalysisRequest()) == 0
        assert count_financial_data_points(None) == 0

    def test_economic_count(self):
        context = EconomicContext.model_validate(
            _economic_request()["economic_context"],
        )
        # gdp + inflation + federal + 2 trends + 3 indices
        assert count_economic_data_points(context) == 8

    def test_economic_count_empty(self):
        assert count_economic_data_points(EconomicContext()) == 0
        assert count_economic_data_points(None) == 0

    def test_news_count(self):
        request = NewsAnalysisRequest.model_validate(_news_request())
        assert count_news_data_points(request) == 2
        assert count_news_data_points(None) == 0


# ---------------------------------------------------------------------------
# Test: Single-Agent Runs
# ---------------------------------------------------------------------------


class TestRunAnalysis:
    """Tests for the run_* failure boundary."""

    def test_financial_success(self):
        factory = AgentFactory(llm=_mock_llm("## Financial Health Assessment"))
        result = _run(factory.run_financial_analysis(_financial_request()))

        assert isinstance(result, AgentAnalysisResult)
        assert result.success is True
        assert result.analysis == "## Financial Health Assessment"
        assert result.error is None
        assert result.metadata.agent_type == "financial"
        assert result.metadata.processing_time_ms >= 0
        assert result.metadata.data_points == 16

    def test_economic_success(self):
        factory = AgentFactory(llm=_mock_llm())
        result = _run(factory.run_economic_analysis(_economic_request()))
        assert result.success is True
        assert result.metadata.agent_type == "economic"
        assert result.metadata.data_points == 8

    def test_news_success(self):
        factory = AgentFactory(llm=_mock_llm())
        result = _run(factory.run_news_analysis(_news_request()))
        assert result.success is True
        assert result.metadata.data_points == 2

    def test_accepts_validated_models(self):
        factory = AgentFactory(llm=_mock_llm())
        request = NewsAnalysisRequest.model_validate(_news_request())
        assert _run(factory.run_news_analysis(request)).success is True

    def test_backend_failure_becomes_failed_result(self):
        llm = AsyncMock()
        llm.complete.side_effect = RuntimeError("upstream 500")
        factory = AgentFactory(llm=llm)

        result = _run(factory.run_economic_analysis(_economic_request()))

        assert result.success is False
        assert result.analysis == ""
        assert "Economic analysis failed" in result.error
        assert "upstream 500" in result.error
        assert result.metadata.agent_type == "economic"
        assert result.metadata.data_points is None

    def test_missing_ratios_becomes_failed_result(self):
        factory = AgentFactory(llm=_mock_llm())
        result = _run(factory.run_financial_analysis(_financial_request(ratios=None)))
        assert result.success is False
        assert "ratios" in result.error

    def test_malformed_input_becomes_failed_result(self):
        factory = AgentFactory(llm=_mock_llm())
        result = _run(factory.run_news_analysis({"industry": "Tech"}))
        assert result.success is False
        assert result.error
        assert result.analysis == ""

    def test_failure_with_empty_message_gets_default_error(self):
        llm = AsyncMock()
        llm.complete.side_effect = RuntimeError()
        factory = AgentFactory(llm=llm)
        result = _run(factory.run_news_analysis(_news_request()))
        assert result.success is False
        assert result.error

    def test_placeholder_backend_succeeds(self):
        """Without a credential the pipeline still completes."""
        factory = AgentFactory(llm=PlaceholderProvider())
        result = _run(factory.run_financial_analysis(_financial_request()))
        assert result.success is True
        assert result.analysis == PLACEHOLDER_ANALYSIS

    def test_result_is_immutable(self):
        factory = AgentFactory(llm=_mock_llm())
        result = _run(factory.run_news_analysis(_news_request()))
        with pytest.raises(Exception):
            result.success = False

# ---------------------------------------------------------------------------
# Test: camelCase Payloads
# ---------------------------------------------------------------------------


def _prompt(llm: AsyncMock) -> str:
    return llm.complete.call_args.kwargs["messages"][0]["content"]


class TestCamelCaseInput:
    """Requests keyed in camelCase reach the agents intact."""

    def test_financial(self):
        llm = _mock_llm()
        factory = AgentFactory(llm=llm)
        result = _run(factory.run_financial_analysis({
            "balanceSheet": {
                "totalAsset": 150000,
                "totalLiability": 60000,
                "totalEquity": 90000,
                "netIncome": 15000,
                "assetBreakdown": [{"name": "Cash", "value": 50000}],
                "ratios": {
                    "currentRatio": 2.5,
                    "debtToEquityRatio": 0.67,
                    "returnOnEquity": 0.167,
                    "equityMultiplier": 1.67,
                    "debtRatio": 0.4,
                    "netProfitMargin": 0.15,
                },
            },
            "targetDate": "2024-03-31",
        }))

        assert result.success is True
        prompt = _prompt(llm)
        assert "Total Assets: $150,000.00" in prompt
        assert "Cash: $50,000.00" in prompt
        assert "2024-03-31" in prompt

    def test_economic(self):
        llm = _mock_llm()
        factory = AgentFactory(llm=llm)
        result = _run(factory.run_economic_analysis({
            "economicContext": {
                "period": "Q1 2024",
                "gdpGrowth": 0.03,
                "interestRates": {"federal": 0.05},
                "industryTrends": ["AI"],
                "marketIndices": {"SPX": 5000},
            },
            "financialData": {"balanceSheet": {"totalAsset": 1000}},
            "targetDate": "2024-03-31",
        }))

        assert result.success is True
        assert result.metadata.data_points == 4
        prompt = _prompt(llm)
        assert "Economic Period: Q1 2024" in prompt
        assert "GDP Growth: 3.00%" in prompt
        assert "Federal Rate: 5.00%" in prompt
        assert "Industry Trends: AI" in prompt
        assert "SPX: 5000" in prompt
        assert "Total Assets: $1,000.00" in prompt

    def test_news(self):
        llm = _mock_llm()
        factory = AgentFactory(llm=llm)
        result = _run(factory.run_news_analysis({
            "companyName": "Company Inc.",
            "industry": "Technology",
            "newsArticles": [
                {
                    "title": "Earnings beat",
                    "source": "Reuters",
                    "date": "2024-03-01",
                    "content": "Revenue up.",
                },
            ],
            "targetDate": "2024-03-31",
        }))

        assert result.success is True
        assert result.metadata.data_points == 1
        prompt = _prompt(llm)
        assert "Company Inc." in prompt
        assert "Title: Earnings beat" in prompt


# ---------------------------------------------------------------------------
# Test: Comprehensive Analysis
# ---------------------------------------------------------------------------


class _RendezvousLLM:
    """
    Fake backend that only answers once `parties` calls are in flight.

    If the agents ran one after another, the first call would time out.
    """

    def __init__(self, parties: int) -> None:
        self.parties = parties
        self.in_flight = 0
        self.max_in_flight = 0
        self._ready: asyncio.Event | None = None

    async def complete(self, messages, **kwargs) -> LLMResponse:
        if self._ready is None:
            self._ready = asyncio.Event()
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        if self.in_flight >= self.parties:
            self._ready.set()
        await asyncio.wait_for(self._ready.wait(), timeout=5)
        self.in_flight -= 1
        return LLMResponse(
            content="ok", model="fake", input_tokens=1, output_tokens=1,
        )


class TestComprehensiveAnalysis:
    """Tests for the concurrent fan-out of all three agents."""

    def test_all_three_succeed(self):
        factory = AgentFactory(llm=_mock_llm("fine"))
        result = _run(factory.run_comprehensive_analysis(
            _financial_request(), _economic_request(), _news_request(),
        ))

        assert isinstance(result, ComprehensiveAnalysisResult)
        assert result.financial.success
        assert result.economic.success
        assert result.news.success
        assert result.financial.metadata.agent_type == "financial"
        assert result.economic.metadata.agent_type == "economic"
        assert result.news.metadata.agent_type == "news"

    def test_two_failures_do_not_hide_the_third(self):
        factory = AgentFactory(llm=_mock_llm("economy ok"))
        bad_news = _news_request(
            news_articles=[
                {"title": "a", "source": "s", "date": "2024-01-01", "content": "c"},
                {"title": "b", "source": "s", "date": "not-a-date", "content": "c"},
            ],
        )

        result = _run(factory.run_comprehensive_analysis(
            _financial_request(ratios=None), _economic_request(), bad_news,
        ))

        assert result.financial.success is False
        assert result.financial.error
        assert result.economic.success is True
        assert result.economic.analysis == "economy ok"
        assert result.news.success is False
        assert "News analysis failed" in result.news.error
        assert set(result.model_dump()) == {"financial", "economic", "news"}

    def test_all_fail_still_returns_three_results(self):
        llm = AsyncMock()
        llm.complete.side_effect = RuntimeError("down")
        factory = AgentFactory(llm=llm)

        result = _run(factory.run_comprehensive_analysis(
            _financial_request(), _economic_request(), _news_request(),
        ))

        for branch in (result.financial, result.economic, result.news):
            assert branch.success is False
            assert branch.analysis == ""
            assert "down" in branch.error

    def test_agents_run_concurrently(self):
        llm = _RendezvousLLM(parties=3)
        factory = AgentFactory(llm=llm)

        result = _run(factory.run_comprehensive_analysis(
            _financial_request(), _economic_request(), _news_request(),
        ))

        assert result.financial.success
        assert result.economic.success
        assert result.news.success
        assert llm.max_in_flight == 3

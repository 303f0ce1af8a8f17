# =============================================================================
# Analysis Request Models — Pydantic V2 Schemas
# =============================================================================
#
# These models define the shape of data flowing INTO the agents, whether
# it arrives through the HTTP layer or from a direct Python caller.
# FastAPI uses them for:
# 1. Request body validation (automatic 422 errors for invalid data)
# 2. OpenAPI documentation generation (visible at /docs)
#
# DESIGN DECISION: Explicit records instead of free-form dicts.
# The balance sheet, economic context and news articles each get a typed
# model. Missing or unknown fields are defaulted or dropped HERE, at the
# boundary, so the formatting code never has to guess.
#
# NULL-TOLERANCE POLICY:
# - Totals and net income default to 0.0.
# - Breakdown lists default to empty.
# - Ratios are never defaulted. Each ratio is Optional so the request
#   still validates, and the financial analyst refuses to format a
#   balance sheet whose ratios are incomplete.
# - Unknown extra fields are ignored.
# - Keys may be snake_case or camelCase (totalAsset, gdpGrowth, ...).
# =============================================================================

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Fixed ratio names, in the order they are presented to the LLM
RATIO_FIELDS: tuple[str, ...] = (
    "current_ratio",
    "debt_to_equity_ratio",
    "return_on_equity",
    "equity_multiplier",
    "debt_ratio",
    "net_profit_margin",
)

# Every request model accepts both snake_case and camelCase keys
REQUEST_MODEL_CONFIG = ConfigDict(
    extra="ignore",
    populate_by_name=True,
    alias_generator=to_camel,
)


# ---------------------------------------------------------------------------
# Balance Sheet & Transactions
# ---------------------------------------------------------------------------


class BreakdownItem(BaseModel):
    """
    One line of an asset/liability/equity breakdown.

    Accepts either {name, value} (data store shape) or
    {category, amount}.
    """

    name: str = Field(validation_alias=AliasChoices("name", "category"))
    value: float = Field(
        default=0.0, validation_alias=AliasChoices("value", "amount"),
    )

    model_config = REQUEST_MODEL_CONFIG


class FinancialRatios(BaseModel):
    """The six fixed financial ratios. Absent ratios stay None."""

    current_ratio: float | None = None
    debt_to_equity_ratio: float | None = None
    return_on_equity: float | None = None
    equity_multiplier: float | None = None
    debt_ratio: float | None = None
    net_profit_margin: float | None = None

    model_config = REQUEST_MODEL_CONFIG

    def missing(self) -> list[str]:
        """Names of ratios that were not supplied, in fixed order."""
        return [name for name in RATIO_FIELDS if getattr(self, name) is None]


class BalanceSheet(BaseModel):
    """
    A standardised balance sheet as returned by the data store.

    Example:
        {
            "date": "2024-03-31",
            "total_asset": 150000,
            "total_liability": 60000,
            "total_equity": 90000,
            "net_income": 15000,
            "asset_breakdown": [{"name": "Cash", "value": 50000}],
            "ratios": {"current_ratio": 2.5, ...}
        }
    """

    id: int | str | None = None
    date: str | None = None
    total_asset: float = 0.0
    total_liability: float = 0.0
    total_equity: float = 0.0
    net_income: float = 0.0
    asset_breakdown: list[BreakdownItem] = Field(default_factory=list)
    liability_breakdown: list[BreakdownItem] = Field(default_factory=list)
    equity_breakdown: list[BreakdownItem] = Field(default_factory=list)
    ratios: FinancialRatios | None = None

    model_config = REQUEST_MODEL_CONFIG


class Transaction(BaseModel):
    """A single accounting transaction. Only counted, never formatted."""

    id: int | str | None = None
    date: str | None = None
    description: str | None = None
    category: str | None = None
    amount: float | None = None

    model_config = REQUEST_MODEL_CONFIG


class FinancialSnapshot(BaseModel):
    """
    Financial context attached to economic and news requests.

    Only the balance sheet is read; everything else is ignored.
    """

    balance_sheet: BalanceSheet | None = Field(
        default=None,
        validation_alias=AliasChoices("balance_sheet", "balanceSheet"),
    )

    model_config = REQUEST_MODEL_CONFIG


# ---------------------------------------------------------------------------
# Agent Requests
# ---------------------------------------------------------------------------


class FinancialAnalysisRequest(BaseModel):
    """Input for the senior financial analyst."""

    balance_sheet: BalanceSheet | None = Field(
        default=None,
        description="Balance sheet to analyse",
    )
    target_date: str | None = Field(
        default=None,
        description="Date the analysis refers to. Defaults to the sheet's date.",
        examples=["2024-03-31"],
    )
    transactions: list[Transaction] = Field(default_factory=list)

    model_config = REQUEST_MODEL_CONFIG


class InterestRates(BaseModel):
    """Policy and prime rates as fractions (0.05 == 5%)."""

    federal: float | None = None
    prime: float | None = None

    model_config = REQUEST_MODEL_CONFIG


class EconomicContext(BaseModel):
    """
    Macro-economic context. Rates and growth figures are fractions.

    Example:
        {
            "period": "Q1 2024",
            "region": "United States",
            "gdp_growth": 0.032,
            "inflation": 0.042,
            "unemployment": 0.038,
            "interest_rates": {"federal": 0.05, "prime": 0.075},
            "industry_trends": ["AI adoption", "Supply chain normalisation"],
            "market_indices": {"S&P 500": 5200.1}
        }
    """

    period: str | None = None
    region: str | None = None
    gdp_growth: float | None = None
    inflation: float | None = None
    unemployment: float | None = None
    interest_rates: InterestRates | None = None
    industry_trends: list[str] = Field(default_factory=list)
    market_indices: dict[str, float] = Field(default_factory=dict)

    model_config = REQUEST_MODEL_CONFIG


class EconomicAnalysisRequest(BaseModel):
    """Input for the economic analyst."""

    economic_context: EconomicContext = Field(default_factory=EconomicContext)
    financial_data: FinancialSnapshot = Field(default_factory=FinancialSnapshot)
    target_date: str | None = None

    model_config = REQUEST_MODEL_CONFIG


class NewsSentiment(BaseModel):
    """Sentiment score in [-1, 1] and an optional pre-computed label."""

    score: float | None = Field(default=None, ge=-1.0, le=1.0)
    label: Literal["negative", "neutral", "positive"] | None = None

    model_config = REQUEST_MODEL_CONFIG


class NewsArticle(BaseModel):
    """A news article about the company or its industry."""

    title: str
    source: str
    date: str = Field(description="ISO date, e.g. 2024-03-01")
    content: str
    url: str | None = None
    sentiment: NewsSentiment | None = None
    topics: list[str] = Field(default_factory=list)

    model_config = REQUEST_MODEL_CONFIG


class NewsAnalysisRequest(BaseModel):
    """Input for the news analyst."""

    company_name: str
    industry: str
    financial_data: FinancialSnapshot = Field(default_factory=FinancialSnapshot)
    news_articles: list[NewsArticle] = Field(default_factory=list)
    target_date: str | None = None
    timeframe: str | None = Field(
        default=None,
        description="e.g. 'past week', 'past quarter'. Defaults to 'recent'.",
    )

    model_config = REQUEST_MODEL_CONFIG


class ComprehensiveAnalysisRequest(BaseModel):
    """Input for POST /analysis/comprehensive: one request per agent."""

    financial: FinancialAnalysisRequest
    economic: EconomicAnalysisRequest
    news: NewsAnalysisRequest

    model_config = REQUEST_MODEL_CONFIG

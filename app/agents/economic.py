# =============================================================================
# Economic Analyst — Macro Context Impact Assessment
# =============================================================================
#
# Renders the macro-economic context (growth, inflation, unemployment,
# policy rates, industry trends, market indices) next to the company's
# headline financials and asks how the former affects the latter.
#
# Fields absent from the context are left out of the prompt rather than
# shown as zero: "GDP Growth: 0.00%" would be a claim, not a gap.
# =============================================================================

from __future__ import annotations

import logging

from app.agents.base import BaseAgent, EconomicAnalysisError
from app.agents.formatting import format_key_totals, format_percent, format_ratio
from app.models.requests import (
    EconomicAnalysisRequest,
    EconomicContext,
    FinancialSnapshot,
)

logger = logging.getLogger(__name__)

ANALYSIS_SECTIONS: tuple[str, ...] = (
    "Economic Environment Assessment: Evaluate the current economic "
    "environment based on GDP growth, inflation, unemployment, and "
    "interest rates.",
    "Industry Impact: Analyze how current economic trends are impacting "
    "the company's industry and market.",
    "Financial Vulnerability: Identify how the company's financial "
    "structure makes it vulnerable or resilient to current economic "
    "conditions.",
    "Economic Opportunities: Highlight potential opportunities in the "
    "current economic landscape that the company could leverage.",
    "Economic Threats: Outline potential threats posed by current "
    "economic conditions that the company should prepare for.",
    "Recommendations: Provide strategic recommendations for navigating "
    "the current economic environment.",
    "Economic Outlook: Predict how potential changes in economic factors "
    "might impact the company in the short to medium term.",
)


class EconomicAnalyst(BaseAgent):
    """Assesses how macro conditions bear on a specific company."""

    agent_type = "economic"

    async def analyze(self, request: EconomicAnalysisRequest) -> str:
        try:
            prompt = self.build_prompt(request)
            return await self.generate_analysis(prompt)
        except Exception as e:
            logger.error("Economic analysis failed: %s", e)
            raise EconomicAnalysisError(
                f"Economic analysis failed: {e}"
            ) from e

    def build_prompt(self, request: EconomicAnalysisRequest) -> str:
        context_block = format_economic_context(request.economic_context)
        metrics_block = (
            extract_financial_metrics(request.financial_data)
            or "No company financial data supplied"
        )
        target_date = request.target_date or "the analysis date"
        sections = "\n\n".join(
            f"{i}. {section}"
            for i, section in enumerate(ANALYSIS_SECTIONS, 1)
        )

        return (
            f"Economic Context Data:\n{context_block}\n\n"
            f"Company Financial Metrics as of {target_date}:\n"
            f"{metrics_block}\n\n"
            "As an economic analyst, provide a comprehensive analysis of "
            "how the current economic conditions are affecting or may "
            "affect the company's financial position. Your analysis "
            f"should include:\n\n{sections}\n\n"
            "Ensure that your analysis is data-driven, connecting economic "
            "indicators to specific financial metrics where possible, and "
            "focused on actionable insights."
        )


def format_economic_context(context: EconomicContext) -> str:
    """
    One line per known indicator.

    Example output:
        Economic Period: Q1 2024
        Region: United States
        GDP Growth: 3.20%
        Interest Rates: Federal Rate: 5.00%, Prime Rate: 7.50%
    """
    parts = [
        f"Economic Period: {context.period or 'Not specified'}",
        f"Region: {context.region or 'Global'}",
    ]

    if context.gdp_growth is not None:
        parts.append(f"GDP Growth: {format_percent(context.gdp_growth)}")
    if context.inflation is not None:
        parts.append(f"Inflation Rate: {format_percent(context.inflation)}")
    if context.unemployment is not None:
        parts.append(
            f"Unemployment Rate: {format_percent(context.unemployment)}"
        )

    rates = context.interest_rates
    if rates is not None:
        rate_parts = []
        if rates.federal is not None:
            rate_parts.append(f"Federal Rate: {format_percent(rates.federal)}")
        if rates.prime is not None:
            rate_parts.append(f"Prime Rate: {format_percent(rates.prime)}")
        if rate_parts:
            parts.append(f"Interest Rates: {', '.join(rate_parts)}")

    if context.industry_trends:
        parts.append(f"Industry Trends: {'; '.join(context.industry_trends)}")

    if context.market_indices:
        indices = ", ".join(
            f"{name}: {value:g}"
            for name, value in context.market_indices.items()
        )
        parts.append(f"Market Indices: {indices}")

    return "\n".join(parts)


def extract_financial_metrics(financial_data: FinancialSnapshot) -> str:
    """Headline totals plus debt and current ratio, when available."""
    sheet = financial_data.balance_sheet
    metrics = format_key_totals(sheet)
    if sheet is not None and sheet.ratios is not None:
        ratios = sheet.ratios
        if ratios.debt_ratio is not None:
            metrics.append(f"Debt Ratio: {format_ratio(ratios.debt_ratio)}")
        if ratios.current_ratio is not None:
            metrics.append(
                f"Current Ratio: {format_ratio(ratios.current_ratio)}"
            )
    return "\n".join(metrics)

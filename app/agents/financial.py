# =============================================================================
# Senior Financial Analyst — Balance Sheet Health Report
# =============================================================================
#
# Turns a standardised balance sheet into a report request:
#   1. Financial overview (totals, two-decimal USD)
#   2. Asset / liability / equity breakdowns
#   3. The six key ratios, always in the same order
#   4. Report instructions for the target date
#
# DESIGN DECISION: Ratios are required, never invented.
# A balance sheet without a complete ratio set is rejected with
# FinancialAnalysisError before any prompt is built. Substituting zeros
# or "typical" values would produce a confident report about numbers
# the company never reported.
#
# DESIGN DECISION: No timestamp in the prompt.
# Two calls with the same request produce byte-identical prompts.
# =============================================================================

from __future__ import annotations

import logging

from app.agents.base import (
    AgentConfig,
    BaseAgent,
    FinancialAnalysisError,
)
from app.agents.formatting import (
    format_breakdown,
    format_currency,
    format_ratio,
)
from app.models.requests import (
    BalanceSheet,
    FinancialAnalysisRequest,
    FinancialRatios,
)
from app.services.llm import LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MIN_TEMPERATURE = 0.5

_RATIO_LABELS: tuple[tuple[str, str], ...] = (
    ("current_ratio", "Current Ratio"),
    ("debt_to_equity_ratio", "Debt to Equity Ratio"),
    ("return_on_equity", "Return on Equity"),
    ("equity_multiplier", "Equity Multiplier"),
    ("debt_ratio", "Debt Ratio"),
    ("net_profit_margin", "Net Profit Margin"),
)

ANALYSIS_SECTIONS: tuple[str, ...] = (
    "Financial Health Assessment: Summarise the key figures (total assets, "
    "liabilities, equity and net income) and judge the company's overall "
    "liquidity, solvency and profitability, interpreting each ratio "
    "against standard benchmarks.",
    "Strengths and Weaknesses: Analyse the composition of assets, "
    "liabilities and equity, noting dominant or missing components and "
    "what they reveal.",
    "Recommendations: Provide practical steps for improving financial "
    "performance and leveraging opportunities.",
    "Outlook: Describe the likely short to medium term trajectory of the "
    "company's financial position if current conditions persist.",
    "Risks: Identify the main financial risks and how they could be "
    "mitigated.",
)


class SeniorFinancialAnalyst(BaseAgent):
    """Produces a structured financial health report from a balance sheet."""

    agent_type = "financial"

    def __init__(
        self,
        config: AgentConfig | None = None,
        llm: LLMProvider | None = None,
        min_temperature: float = DEFAULT_MIN_TEMPERATURE,
    ) -> None:
        super().__init__(config, llm)
        self.min_temperature = min_temperature

    async def analyze(self, request: FinancialAnalysisRequest) -> str:
        """
        Generate the financial report for `request`.

        Raises:
            FinancialAnalysisError: Missing balance sheet, incomplete
                ratios, or a failed backend call.
        """
        try:
            prompt = self.build_prompt(request)
            logger.info(
                "Financial analyst prompt built: target_date=%s, "
                "breakdowns=%d/%d/%d",
                request.target_date or request.balance_sheet.date,
                len(request.balance_sheet.asset_breakdown),
                len(request.balance_sheet.liability_breakdown),
                len(request.balance_sheet.equity_breakdown),
            )
            return await self.generate_analysis(
                prompt,
                temperature=max(self.min_temperature, self.temperature),
            )
        except FinancialAnalysisError:
            raise
        except Exception as e:
            raise FinancialAnalysisError(
                f"Financial analysis failed: {e}"
            ) from e

    def build_prompt(self, request: FinancialAnalysisRequest) -> str:
        """Deterministic prompt text for `request`."""
        sheet = request.balance_sheet
        if sheet is None:
            raise FinancialAnalysisError(
                "Financial analysis failed: no balance sheet supplied"
            )
        ratios = _require_ratios(sheet)
        target_date = request.target_date or sheet.date or "the reporting date"

        summary = format_financial_summary(sheet, ratios)
        sections = "\n".join(
            f"    {i}. {section}"
            for i, section in enumerate(ANALYSIS_SECTIONS, 1)
        )

        return (
            f"Financial data and calculated ratios:\n{summary}\n\n"
            f"Using the provided balance sheet data for {target_date}, "
            "generate a concise financial analysis report evaluating the "
            "company's financial health. Start directly with the content; "
            "do not repeat a report title or the date.\n\n"
            f"Structure the analysis into the following "
            f"{len(ANALYSIS_SECTIONS)} sections:\n"
            f"{sections}\n\n"
            "Begin with the \"## Financial Health Assessment\" heading "
            "(markdown, double hashtags). Keep the analysis clear and "
            "precise, and support conclusions with the data provided."
        )


def format_financial_summary(
    sheet: BalanceSheet,
    ratios: FinancialRatios,
) -> str:
    """Overview, breakdowns and ratio block for the prompt."""
    ratio_lines = "\n".join(
        f"- {label}: {format_ratio(getattr(ratios, name))}"
        for name, label in _RATIO_LABELS
    )
    return (
        "Financial Overview:\n"
        f"- Total Assets: {format_currency(sheet.total_asset)}\n"
        f"- Total Liabilities: {format_currency(sheet.total_liability)}\n"
        f"- Total Equity: {format_currency(sheet.total_equity)}\n"
        f"- Net Income: {format_currency(sheet.net_income)}\n\n"
        f"Asset Breakdown: {format_breakdown(sheet.asset_breakdown, 'asset')}\n\n"
        "Liability Breakdown: "
        f"{format_breakdown(sheet.liability_breakdown, 'liability')}\n\n"
        f"Equity Breakdown: {format_breakdown(sheet.equity_breakdown, 'equity')}\n\n"
        f"Key Financial Ratios:\n{ratio_lines}"
    )


def _require_ratios(sheet: BalanceSheet) -> FinancialRatios:
    if sheet.ratios is None:
        raise FinancialAnalysisError(
            "Financial analysis failed: balance sheet has no ratios"
        )
    missing = sheet.ratios.missing()
    if missing:
        raise FinancialAnalysisError(
            "Financial analysis failed: balance sheet is missing ratios: "
            + ", ".join(missing)
        )
    return sheet.ratios

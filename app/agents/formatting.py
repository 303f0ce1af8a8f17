# =============================================================================
# Prompt Formatting Helpers
# =============================================================================
# Pure functions shared by the analysts. No clocks, no locale lookups:
# the same input always renders the same text.
# =============================================================================

from __future__ import annotations

from app.models.requests import BalanceSheet, BreakdownItem


def format_currency(value: float) -> str:
    """
    USD with thousands separators and exactly two decimals.

    >>> format_currency(1234.5)
    '$1,234.50'
    >>> format_currency(-20)
    '-$20.00'
    """
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_ratio(value: float) -> str:
    return f"{value:.2f}"


def format_percent(fraction: float) -> str:
    """A fraction rendered as a percentage: 0.032 -> '3.20%'."""
    return f"{fraction * 100:.2f}%"


def format_breakdown(items: list[BreakdownItem], kind: str) -> str:
    """Comma-joined "name: $value" pairs, or a placeholder when empty."""
    if not items:
        return f"No {kind} breakdown available"
    return ", ".join(
        f"{item.name}: {format_currency(item.value)}" for item in items
    )


def format_key_totals(
    sheet: BalanceSheet | None,
    include_equity: bool = True,
) -> list[str]:
    """
    Headline totals of a balance sheet, one line each.

    A missing sheet contributes nothing. Totals are already defaulted to
    zero by the model.
    """
    if sheet is None:
        return []
    lines = [
        f"Total Assets: {format_currency(sheet.total_asset)}",
        f"Total Liabilities: {format_currency(sheet.total_liability)}",
    ]
    if include_equity:
        lines.append(f"Total Equity: {format_currency(sheet.total_equity)}")
    lines.append(f"Net Income: {format_currency(sheet.net_income)}")
    return lines

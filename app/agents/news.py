# =============================================================================
# News Analyst — Sentiment & Financial Impact of Recent Coverage
# =============================================================================
#
# Summarises a batch of news articles and asks the LLM how the coverage
# bears on the company's financial position.
#
# SUMMARISATION RULES:
#   - Newest first by full ISO timestamp. Stable sort: articles with the
#     same timestamp keep their input order.
#   - Missing sentiment labels are derived from the score:
#       score < -0.2 → negative, score > 0.2 → positive, else neutral.
#     No score and no label → unknown.
#   - Bodies longer than 300 characters are cut to 300 plus "...".
#
# DESIGN DECISION: Lower temperature (0.4 by default).
# News analysis should stay close to what was reported; the factory
# builds this agent with the cooler news temperature.
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timezone

from app.agents.base import AgentConfig, BaseAgent, NewsAnalysisError
from app.agents.formatting import format_key_totals
from app.models.requests import (
    FinancialSnapshot,
    NewsAnalysisRequest,
    NewsArticle,
)
from app.services.llm import LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_NEWS_TEMPERATURE = 0.4

NEGATIVE_THRESHOLD = -0.2
POSITIVE_THRESHOLD = 0.2

CONTENT_SUMMARY_LIMIT = 300
ELLIPSIS = "..."

ANALYSIS_SECTIONS: tuple[str, ...] = (
    "News Sentiment Overview: Evaluate the overall sentiment of news "
    "coverage during this period and identify any significant shifts.",
    "Key News Themes: Identify and analyze the main themes or topics "
    "emerging from the news articles.",
    "Industry News Context: Place the company-specific news within the "
    "broader industry context, noting any sector-wide trends or issues.",
    "Financial Impact Assessment: Assess the potential impact of the news "
    "on the company's financial metrics, stock performance, and investor "
    "confidence.",
    "Risk Identification: Identify any potential risks or threats revealed "
    "by the news coverage that could affect the company's financial health.",
    "Opportunity Analysis: Highlight any potential opportunities mentioned "
    "in the news that the company could leverage for financial growth.",
    "Strategic Implications: Discuss the strategic implications of the news "
    "for the company's short and long-term financial planning.",
    "Recommendations: Provide actionable recommendations for how the "
    "company should respond to the news coverage from a financial "
    "perspective.",
)


class NewsAnalyst(BaseAgent):
    """Turns recent coverage into a financial impact assessment."""

    agent_type = "news"

    def __init__(
        self,
        config: AgentConfig | None = None,
        llm: LLMProvider | None = None,
    ) -> None:
        super().__init__(
            config or AgentConfig(temperature=DEFAULT_NEWS_TEMPERATURE), llm,
        )

    async def analyze(self, request: NewsAnalysisRequest) -> str:
        """
        Raises:
            NewsAnalysisError: Wraps any failure during summarisation,
                context extraction or generation.
        """
        try:
            prompt = self.build_prompt(request)
            logger.info(
                "News analyst summarised %d articles for %s",
                len(request.news_articles), request.company_name,
            )
            return await self.generate_analysis(prompt)
        except Exception as e:
            logger.error("News analysis failed: %s", e)
            raise NewsAnalysisError(f"News analysis failed: {e}") from e

    def build_prompt(self, request: NewsAnalysisRequest) -> str:
        news_summary = summarize_news_articles(request.news_articles)
        financial_context = (
            extract_financial_context(request.financial_data)
            or "No company financial data supplied"
        )
        sections = "\n\n".join(
            f"{i}. {section}"
            for i, section in enumerate(ANALYSIS_SECTIONS, 1)
        )

        return (
            f"Company: {request.company_name}\n"
            f"Industry: {request.industry}\n"
            f"Date of Analysis: {request.target_date or 'Not specified'}\n"
            f"Timeframe: {request.timeframe or 'recent'}\n\n"
            f"Financial Context:\n{financial_context}\n\n"
            f"News Articles:\n{news_summary}\n\n"
            "As a financial news analyst, analyze the provided news "
            "articles and their potential impact on the company's "
            "financial position and market perception. Your analysis "
            f"should include:\n\n{sections}\n\n"
            "Ensure your analysis is balanced, fact-based, and focuses on "
            "the financial implications rather than speculative market "
            "reactions."
        )


# ---------------------------------------------------------------------------
# Summarisation Helpers
# ---------------------------------------------------------------------------


def sentiment_label(article: NewsArticle) -> str:
    """Supplied label, else derived from the score, else "unknown"."""
    sentiment = article.sentiment
    if sentiment is None:
        return "unknown"
    if sentiment.label:
        return sentiment.label
    if sentiment.score is None:
        return "unknown"
    if sentiment.score < NEGATIVE_THRESHOLD:
        return "negative"
    if sentiment.score > POSITIVE_THRESHOLD:
        return "positive"
    return "neutral"


def truncate_content(content: str, limit: int = CONTENT_SUMMARY_LIMIT) -> str:
    if len(content) > limit:
        return content[:limit] + ELLIPSIS
    return content


def sort_articles(articles: list[NewsArticle]) -> list[NewsArticle]:
    """
    Most recent first. `sorted` is stable, so equal timestamps keep input order.

    Raises:
        ValueError: If an article date is not an ISO date or timestamp.
    """
    return sorted(articles, key=_article_date, reverse=True)


def summarize_news_articles(articles: list[NewsArticle]) -> str:
    """
    Numbered, newest-first summaries of `articles`.

    Example output:
        Article 1:
        Title: Company Inc. Reports Strong Quarterly Earnings
        Source: Financial Times
        Date: 2024-03-01
        Sentiment: positive (0.80)
        Topics: earnings, guidance
        Content Summary: Company Inc. has reported ...
    """
    if not articles:
        return "No news articles supplied"

    summaries = []
    for index, article in enumerate(sort_articles(articles), 1):
        lines = [
            f"Article {index}:",
            f"Title: {article.title}",
            f"Source: {article.source}",
            f"Date: {article.date}",
            f"Sentiment: {sentiment_label(article)}{_score_suffix(article)}",
        ]
        if article.topics:
            lines.append(f"Topics: {', '.join(article.topics)}")
        lines.append(f"Content Summary: {truncate_content(article.content)}")
        summaries.append("\n".join(lines))
    return "\n\n".join(summaries)


def extract_financial_context(financial_data: FinancialSnapshot) -> str:
    """Total assets, total liabilities and net income."""
    return "\n".join(
        format_key_totals(financial_data.balance_sheet, include_equity=False)
    )


def _score_suffix(article: NewsArticle) -> str:
    if article.sentiment is None or article.sentiment.score is None:
        return ""
    return f" ({article.sentiment.score:.2f})"


def _article_date(article: NewsArticle) -> datetime:
    # Date-only and naive timestamps are read as UTC
    published = datetime.fromisoformat(article.date)
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return published

# =============================================================================
# Base Agent — Shared Configuration & Text Generation
# =============================================================================
#
# Every analyst (financial, economic, news) is a BaseAgent. The base class
# owns the generation parameters and the single capability the analysts
# share: turn a prompt into analysis text via the backend client.
#
# DESIGN DECISION: Backend injected at construction.
# The agent never looks up a global client. It receives a default
# LLMProvider from the factory; when its AgentConfig carries an api_key
# override it builds its own client bound to that key instead.
#
# DESIGN DECISION: Errors are wrapped, not swallowed.
# A failed backend call becomes AnalysisGenerationError. The specialised
# agents wrap again with their own message, and only the orchestrator
# turns the exception into a failed result.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.services.llm import LLMProvider, create_llm_provider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4-turbo"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1500

NO_ANALYSIS_FALLBACK = "No analysis could be generated."


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class AgentError(Exception):
    """Base class for every analysis failure raised by an agent."""


class AnalysisGenerationError(AgentError):
    """The backend call failed."""


class FinancialAnalysisError(AgentError):
    """Raised by SeniorFinancialAnalyst."""


class EconomicAnalysisError(AgentError):
    """Raised by EconomicAnalyst."""


class NewsAnalysisError(AgentError):
    """Raised by NewsAnalyst."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AgentConfig:
    """
    Generation parameters for one agent.

    Immutable once built. `provider_type` and `base_url` are only used
    when `api_key` is set and the agent has to build its own client.
    """

    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    api_key: str | None = None
    provider_type: str = "openai_compatible"
    base_url: str | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(
                f"temperature must be within [0.0, 2.0], got {self.temperature}"
            )
        if self.max_tokens <= 0:
            raise ValueError(
                f"max_tokens must be positive, got {self.max_tokens}"
            )


# ---------------------------------------------------------------------------
# Base Agent
# ---------------------------------------------------------------------------


class BaseAgent:
    """Common parent for the specialised analysts."""

    agent_type: str = "base"

    def __init__(
        self,
        config: AgentConfig | None = None,
        llm: LLMProvider | None = None,
    ) -> None:
        self.config = config or AgentConfig()
        self._default_llm = llm

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def temperature(self) -> float:
        return self.config.temperature

    @property
    def max_tokens(self) -> int:
        return self.config.max_tokens

    def _select_llm(self) -> LLMProvider:
        """
        Pick the backend for this call.

        A credential override on the config wins. Otherwise the injected
        default is used; with neither, a client is built with no key,
        which yields the placeholder backend.
        """
        if self.config.api_key:
            return create_llm_provider(
                provider_type=self.config.provider_type,
                api_key=self.config.api_key,
                model=self.config.model,
                base_url=self.config.base_url,
            )
        if self._default_llm is not None:
            return self._default_llm
        return create_llm_provider(provider_type=self.config.provider_type)

    async def generate_analysis(
        self,
        prompt: str,
        temperature: float | None = None,
    ) -> str:
        """
        Send `prompt` to the backend and return the generated text.

        Args:
            prompt: The complete user prompt.
            temperature: Per-call override of the configured temperature.

        Returns:
            The generated text, or NO_ANALYSIS_FALLBACK when the backend
            answered with no content.

        Raises:
            AnalysisGenerationError: If the backend call failed.
        """
        llm = self._select_llm()
        try:
            response = await llm.complete(
                messages=[{"role": "user", "content": prompt}],
                model=self.model,
                temperature=(
                    self.temperature if temperature is None else temperature
                ),
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error("%s agent generation failed: %s", self.agent_type, e)
            raise AnalysisGenerationError(
                f"Failed to generate analysis: {str(e) or type(e).__name__}"
            ) from e

        logger.debug(
            "%s agent generated analysis: model=%s, tokens=%d+%d",
            self.agent_type, response.model,
            response.input_tokens, response.output_tokens,
        )
        return response.content or NO_ANALYSIS_FALLBACK

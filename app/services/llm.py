# =============================================================================
# Multi-Provider LLM Abstraction — Analysis Backend Client
# =============================================================================
#
# Provides a common interface for text generation, with concrete
# implementations for Anthropic (Claude), OpenAI-compatible APIs
# (OpenAI, DeepSeek, Qwen, ...) and a placeholder used when no
# credential is configured.
#
# DESIGN DECISION: Protocol (structural typing) over ABC.
# Any class with the right `complete()` method works, which keeps test
# doubles (AsyncMock, small fakes) trivial.
#
# DESIGN DECISION: Native SDKs over LangChain wrappers.
# Using the anthropic and openai SDKs directly gives direct control over
# request parameters and easier debugging.
#
# DESIGN DECISION: Missing credential is not an error.
# create_llm_provider() returns a PlaceholderProvider when no API key is
# available. The pipeline stays exercisable end to end without network
# access; every analysis carries PLACEHOLDER_ANALYSIS instead.
#
# DESIGN DECISION: No retries. SDK clients are built with max_retries=0.
# One attempt per call; failures propagate to the agent.
#
# ARCHITECTURE:
#   LLMProvider (Protocol)
#   ├── AnthropicProvider        — Claude via native Anthropic SDK
#   ├── OpenAICompatibleProvider — Any OpenAI-compatible API
#   ├── PlaceholderProvider      — Deterministic text, no network
#   └── create_llm_provider()    — Factory; picks placeholder when unkeyed
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

PLACEHOLDER_ANALYSIS = (
    "Analysis unavailable: no LLM API key is configured. "
    "Set LLM_API_KEY (or OPENAI_API_KEY / ANTHROPIC_API_KEY) "
    "to generate a real analysis."
)

PLACEHOLDER_MODEL = "placeholder"

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-6"
DEFAULT_OPENAI_MODEL = "gpt-4-turbo"

_KNOWN_PROVIDER_TYPES = {"anthropic", "openai_compatible"}


# ---------------------------------------------------------------------------
# Data Structures
# ---------------------------------------------------------------------------


@dataclass
class LLMResponse:
    """
    Standardised response from any LLM provider.

    Normalises the different response formats (Anthropic vs OpenAI)
    into a single structure that downstream code can consume.
    """

    content: str           # The generated text ("" when the provider returned none)
    model: str             # Model identifier reported by the provider
    input_tokens: int      # Tokens consumed by the prompt
    output_tokens: int     # Tokens generated in the response


# ---------------------------------------------------------------------------
# Protocol Definition
# ---------------------------------------------------------------------------


class LLMProvider(Protocol):
    """
    Protocol defining the analysis backend interface.

    Every implementation must provide `complete()`. Checked statically
    by mypy.
    """

    async def complete(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Generate a completion from the backend.

        Args:
            messages: Conversation messages as dicts with "role" and "content".
            model: Model identifier. Falls back to the provider default.
            system: Optional system prompt.
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.

        Returns:
            LLMResponse with generated text and usage metrics.
        """
        ...


# ---------------------------------------------------------------------------
# Implementation 1: Anthropic (Claude)
# ---------------------------------------------------------------------------


class AnthropicProvider:
    """
    Anthropic Claude provider using the native SDK.

    KEY API DIFFERENCE: Anthropic takes system prompts as a top-level
    `system=` kwarg, NOT as a message with role "system".
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_ANTHROPIC_MODEL,
    ) -> None:
        from anthropic import AsyncAnthropic

        if not api_key:
            raise ValueError("AnthropicProvider requires an API key")

        self._client = AsyncAnthropic(api_key=api_key, max_retries=0)
        self._model = model

        logger.info("Initialized AnthropicProvider (model=%s)", self._model)

    async def complete(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Generate a completion using Claude."""
        kwargs: dict = {
            "model": model or self._model,
            "messages": messages,
            "max_tokens": max_tokens or 1500,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature

        # Anthropic: system prompt is a top-level kwarg, not a message
        if system:
            kwargs["system"] = system

        response = await self._client.messages.create(**kwargs)

        content = ""
        for block in response.content:
            if block.type == "text":
                content = block.text
                break

        return LLMResponse(
            content=content,
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )


# ---------------------------------------------------------------------------
# Implementation 2: OpenAI-Compatible (OpenAI, DeepSeek, Qwen, etc.)
# ---------------------------------------------------------------------------


class OpenAICompatibleProvider:
    """
    OpenAI-compatible provider for any API that follows the OpenAI spec.

    Switching hosts is a config change:
        LLM_PROVIDER=openai_compatible
        LLM_BASE_URL=https://api.deepseek.com/v1
        LLM_API_KEY=your-key
        AGENT_MODEL=deepseek-chat
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        base_url: str | None = None,
    ) -> None:
        from openai import AsyncOpenAI

        if not api_key:
            raise ValueError("OpenAICompatibleProvider requires an API key")

        client_kwargs: dict = {"api_key": api_key, "max_retries": 0}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = AsyncOpenAI(**client_kwargs)
        self._model = model

        logger.info(
            "Initialized OpenAICompatibleProvider (model=%s, base_url=%s)",
            self._model,
            base_url or "https://api.openai.com/v1",
        )

    async def complete(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Generate a completion using an OpenAI-compatible API."""
        # OpenAI: system prompt goes as the first message
        all_messages: list[dict[str, str]] = []
        if system:
            all_messages.append({"role": "system", "content": system})
        all_messages.extend(messages)

        kwargs: dict = {
            "model": model or self._model,
            "messages": all_messages,
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if temperature is not None:
            kwargs["temperature"] = temperature

        response = await self._client.chat.completions.create(**kwargs)

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        usage = response.usage
        return LLMResponse(
            content=content,
            model=response.model or kwargs["model"],
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
        )


# ---------------------------------------------------------------------------
# Implementation 3: Placeholder (no credential)
# ---------------------------------------------------------------------------


class PlaceholderProvider:
    """
    Backend used when no API key is configured.

    Never touches the network. Always answers with PLACEHOLDER_ANALYSIS.
    """

    async def complete(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        logger.warning(
            "No LLM API key configured; returning placeholder analysis",
        )
        return LLMResponse(
            content=PLACEHOLDER_ANALYSIS,
            model=PLACEHOLDER_MODEL,
            input_tokens=0,
            output_tokens=0,
        )


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------


def create_llm_provider(
    provider_type: str = "openai_compatible",
    api_key: str | None = None,
    model: str | None = None,
    base_url: str | None = None,
) -> LLMProvider:
    """
    Build a fresh backend client.

    Args:
        provider_type: "openai_compatible" or "anthropic".
        api_key: Credential. Empty or None selects PlaceholderProvider.
        model: Default model for the client (agents normally pass their own).
        base_url: Custom endpoint for OpenAI-compatible hosts.

    Raises:
        ValueError: If provider_type is unknown.
    """
    if provider_type not in _KNOWN_PROVIDER_TYPES:
        raise ValueError(
            f"Unknown provider type '{provider_type}'. "
            f"Supported types: {sorted(_KNOWN_PROVIDER_TYPES)}"
        )

    if not api_key:
        return PlaceholderProvider()

    if provider_type == "anthropic":
        return AnthropicProvider(
            api_key=api_key, model=model or DEFAULT_ANTHROPIC_MODEL,
        )

    return OpenAICompatibleProvider(
        api_key=api_key,
        model=model or DEFAULT_OPENAI_MODEL,
        base_url=base_url,
    )

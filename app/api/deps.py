# =============================================================================
# API Dependencies — Agent Factory per Request
# =============================================================================
#
# get_agent_factory() builds a fresh AgentFactory for every request. The
# default backend client is built once (get_default_llm) and shared; a
# caller can supply their own credential with the X-LLM-API-Key header,
# in which case the agents build a client bound to that key.
#
# DESIGN DECISION: FastAPI dependency (not middleware).
# Testable via dependency_overrides, and route handlers receive the
# factory as a plain argument.
# =============================================================================

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, Header

from app.agents.orchestrator import AgentFactory
from app.config import Settings, get_settings
from app.services.llm import LLMProvider, create_llm_provider

logger = logging.getLogger(__name__)


@lru_cache
def get_default_llm() -> LLMProvider:
    """
    The process-wide default backend client, built lazily from settings.

    Returns the placeholder backend when no key is configured.
    """
    settings = get_settings()
    llm = create_llm_provider(
        provider_type=settings.llm_provider,
        api_key=settings.resolved_api_key(),
        model=settings.agent_model,
        base_url=settings.llm_base_url,
    )
    logger.info("Default LLM backend: %s", type(llm).__name__)
    return llm


def get_agent_factory(
    settings: Settings = Depends(get_settings),
    llm: LLMProvider = Depends(get_default_llm),
    x_llm_api_key: str | None = Header(default=None),
) -> AgentFactory:
    """FastAPI dependency returning a request-scoped AgentFactory."""
    return AgentFactory.from_settings(
        settings,
        api_key=x_llm_api_key or None,
        llm=llm,
    )

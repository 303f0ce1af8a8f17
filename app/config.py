# =============================================================================
# Application Configuration — Pydantic Settings
# =============================================================================
#
# DESIGN DECISION: We use Pydantic V2's `BaseSettings` for configuration.
# This provides:
# 1. Type-safe configuration with validation at startup
# 2. Automatic loading from environment variables
# 3. Support for .env files (via `env_file` in model_config)
#
# HOW IT WORKS:
# Pydantic Settings loads values in this priority order (highest first):
#   1. Environment variables (e.g., `LLM_API_KEY=...`)
#   2. Values from the .env file
#   3. Default values defined below
#
# DESIGN DECISION: Settings are read at the edges only.
# The agents never import `settings`. AgentFactory.from_settings() turns
# a Settings object into an AgentConfig and a backend client, and the
# agents receive those explicitly at construction.
#
# USAGE:
#   from app.config import settings
#   factory = AgentFactory.from_settings(settings)
# =============================================================================

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    With no API key configured the service still runs: every analysis
    returns the placeholder text instead of calling a provider.
    """

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------
    app_name: str = "Financial Analysis Agents"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # -------------------------------------------------------------------------
    # API Keys — Text Generation Backend
    # -------------------------------------------------------------------------
    # No defaults are provided. An empty key selects the placeholder
    # backend rather than failing at startup.
    # -------------------------------------------------------------------------
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # -------------------------------------------------------------------------
    # LLM Provider
    # -------------------------------------------------------------------------
    #   - "openai_compatible": any OpenAI-compatible API (OpenAI, DeepSeek,
    #     Qwen, ...). Set LLM_BASE_URL for non-OpenAI hosts.
    #   - "anthropic": Claude via the native Anthropic SDK
    # -------------------------------------------------------------------------
    llm_provider: str = "openai_compatible"
    llm_base_url: str | None = None
    llm_api_key: str | None = None  # Overrides provider-specific key if set

    # -------------------------------------------------------------------------
    # Agent Defaults
    # -------------------------------------------------------------------------
    # agent_temperature applies to the financial and economic analysts.
    # The news analyst runs cooler (news_temperature) because it should
    # stay close to the reported facts. The financial analyst never runs
    # below financial_min_temperature.
    # -------------------------------------------------------------------------
    agent_model: str = "gpt-4-turbo"
    agent_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    agent_max_tokens: int = Field(default=1500, gt=0)
    news_temperature: float = Field(default=0.4, ge=0.0, le=2.0)
    financial_min_temperature: float = Field(default=0.5, ge=0.0, le=2.0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def resolved_api_key(self) -> str | None:
        """
        Return the credential for the configured provider, or None.

        LLM_API_KEY wins over the provider-specific variable.
        """
        if self.llm_api_key:
            return self.llm_api_key
        if self.llm_provider == "anthropic":
            return self.anthropic_api_key or None
        return self.openai_api_key or None


@lru_cache
def get_settings() -> Settings:
    """
    Create and cache a Settings instance.

    In tests, override with FastAPI's dependency_overrides:
        app.dependency_overrides[get_settings] = lambda: Settings(debug=True)
    """
    return Settings()


settings = get_settings()

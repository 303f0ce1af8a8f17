# =============================================================================
# Financial Analysis Agents
# =============================================================================
# Specialised LLM agents that turn structured financial, economic and news
# data into natural-language analysis, plus an orchestrator that runs them
# alone or all together with per-agent failure isolation.
#
# Package structure:
#   app/
#   ├── api/          → FastAPI route handlers (analysis endpoints)
#   ├── agents/       → Analysts, prompt formatting, factory/orchestrator
#   ├── models/       → Pydantic V2 request/response schemas
#   └── services/     → Text generation backend (Anthropic, OpenAI-compatible,
#                        placeholder)
# =============================================================================

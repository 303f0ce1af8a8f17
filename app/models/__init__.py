# =============================================================================
# Models Package — Pydantic V2 Schemas
# =============================================================================
# Request shapes consumed by the agents (balance sheet, economic context,
# news articles) and the result objects the orchestrator returns.
# =============================================================================

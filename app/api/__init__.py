# =============================================================================
# API Package — FastAPI Route Handlers
# =============================================================================
#   - analysis.py: POST /analysis/{financial,economic,news,comprehensive}
#   - deps.py: request-scoped AgentFactory dependency
# =============================================================================

# =============================================================================
# Services Package — External Collaborators
# =============================================================================
#   - llm.py: Multi-provider text generation (Anthropic, OpenAI-compatible)
#     with a placeholder backend when no API key is configured
# =============================================================================

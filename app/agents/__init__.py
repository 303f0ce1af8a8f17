# =============================================================================
# Agents Package — Specialised Analysts & Orchestration
# =============================================================================
#   - base.py: AgentConfig, BaseAgent.generate_analysis(), error hierarchy
#   - formatting.py: currency / ratio / percent helpers shared by prompts
#   - financial.py: SeniorFinancialAnalyst (balance sheet health report)
#   - economic.py: EconomicAnalyst (macro context impact)
#   - news.py: NewsAnalyst (coverage sentiment and financial impact)
#   - orchestrator.py: AgentFactory — create agents, run one or all three
#     concurrently (LangGraph fan-out), isolate failures per agent
# =============================================================================

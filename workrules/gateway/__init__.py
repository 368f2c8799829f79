"""Provider gateway layer.

Sends built prompts to the external analysis provider:
  - Request/response DTOs with a normalized status
  - Anthropic Messages API adapter (wire protocol)
  - AnalysisProvider capability used by the orchestrator
"""

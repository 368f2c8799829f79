"""Document analysis pipeline.

  1. Input validation and credential check
  2. Prompt construction (prompt_engine)
  3. Provider call (gateway)
  4. Summary derivation: issue count, risk level, compliance score

Input:  AnalysisRequest (plain text of an uploaded workplace-rules document)
Output: AnalysisResult (free-text report + Summary)
"""

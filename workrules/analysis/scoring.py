"""Summary scoring — derives headline metrics from the provider's text.

Computes:
  - total_issues: lexical count of issue keywords (a coarse proxy, the
    provider's answer is not parsed structurally)
  - risk_level: HIGH if any high-risk keyword, else MEDIUM if any
    medium-risk keyword, else LOW
  - compliance_score: produced by a score policy

Score policies:
  - "random": uniform integer in [70, 100). Preliminary estimate only; it
    does not look at the analysis. Repeated runs on the same document differ.
  - "derived": deterministic function of risk level and issue count,
    clamped to [70, 99] so both policies share a range.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod

from workrules.analysis.keywords import (
    HIGH_RISK_KEYWORDS,
    ISSUE_KEYWORDS,
    MEDIUM_RISK_KEYWORDS,
    KeywordTable,
)
from workrules.analysis.types import RiskLevel, Summary

logger = logging.getLogger(__name__)

SCORE_MIN = 70
SCORE_MAX = 100  # exclusive

# Starting points for the derived policy, before per-issue deductions
_RISK_BASE_SCORE: dict[RiskLevel, int] = {
    RiskLevel.LOW: 99,
    RiskLevel.MEDIUM: 90,
    RiskLevel.HIGH: 80,
}
_PER_ISSUE_PENALTY = 1


def count_issues(text: str, table: KeywordTable = ISSUE_KEYWORDS) -> int:
    return table.count(text)


def classify_risk(
    text: str,
    high: KeywordTable = HIGH_RISK_KEYWORDS,
    medium: KeywordTable = MEDIUM_RISK_KEYWORDS,
) -> RiskLevel:
    """Classify risk from keyword presence; HIGH keywords take priority."""
    if high.matches(text):
        return RiskLevel.HIGH
    if medium.matches(text):
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class ScorePolicy(ABC):
    """Strategy for the compliance score."""

    name: str

    @abstractmethod
    def score(self, risk_level: RiskLevel, total_issues: int) -> int: ...


class RandomScorePolicy(ScorePolicy):
    """Preliminary estimate: uniform in [70, 100), independent of the text."""

    name = "random"

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    def score(self, risk_level: RiskLevel, total_issues: int) -> int:
        return self._rng.randrange(SCORE_MIN, SCORE_MAX)


class DerivedScorePolicy(ScorePolicy):
    """Deterministic: risk-tier base score minus one point per issue."""

    name = "derived"

    def score(self, risk_level: RiskLevel, total_issues: int) -> int:
        raw = _RISK_BASE_SCORE[risk_level] - _PER_ISSUE_PENALTY * max(total_issues, 0)
        return max(SCORE_MIN, min(SCORE_MAX - 1, raw))


SCORE_POLICIES: dict[str, type[ScorePolicy]] = {
    RandomScorePolicy.name: RandomScorePolicy,
    DerivedScorePolicy.name: DerivedScorePolicy,
}


def get_score_policy(name: str) -> ScorePolicy:
    """Factory: get a score policy by its configured name."""
    cls = SCORE_POLICIES.get(name)
    if cls is None:
        raise ValueError(f"Unknown compliance score mode: {name}")
    return cls()


def summarize(text: str, policy: ScorePolicy) -> Summary:
    """Derive the full Summary for one analysis text."""
    total_issues = count_issues(text)
    risk_level = classify_risk(text)
    compliance_score = policy.score(risk_level, total_issues)

    logger.debug(
        "Scoring: issues=%d risk=%s score=%d policy=%s",
        total_issues,
        risk_level.value,
        compliance_score,
        policy.name,
    )

    return Summary(
        total_issues=total_issues,
        risk_level=risk_level,
        compliance_score=compliance_score,
    )

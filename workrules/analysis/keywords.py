"""Keyword tables for summary derivation.

Classification rules live here, not in the orchestration code. Bump
``KEYWORD_TABLE_VERSION`` whenever a table changes so stored or logged
summaries can be traced back to the rules that produced them.

Keywords within one table must not overlap (no keyword may contain
another), otherwise counts depend on alternation order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

KEYWORD_TABLE_VERSION = "2024.2"


@dataclass(frozen=True)
class KeywordTable:
    """A named set of keywords matched case-insensitively as substrings.

    ``keywords`` are literal and escaped. ``patterns`` are regex fragments for
    terms that need a lookaround, e.g. a word that must not start a heading.
    """

    name: str
    keywords: tuple[str, ...]
    patterns: tuple[str, ...] = ()
    pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Longest first so a longer keyword wins over its prefix
        ordered = sorted(self.keywords, key=len, reverse=True)
        alternatives = [re.escape(k) for k in ordered] + list(self.patterns)
        compiled = re.compile("|".join(alternatives), re.IGNORECASE)
        object.__setattr__(self, "pattern", compiled)

    def count(self, text: str) -> int:
        """Number of non-overlapping keyword occurrences in ``text``."""
        if not text or not (self.keywords or self.patterns):
            return 0
        return sum(1 for _ in self.pattern.finditer(text))

    def matches(self, text: str) -> bool:
        if not text or not (self.keywords or self.patterns):
            return False
        return self.pattern.search(text) is not None


# Problem / violation / improvement / recommendation terms
ISSUE_KEYWORDS = KeywordTable(
    name="issue",
    keywords=("문제", "위반", "개선", "권고", "problem", "violation", "improvement", "recommendation"),
)

# Severe / dangerous terms → HIGH
HIGH_RISK_KEYWORDS = KeywordTable(
    name="high_risk",
    keywords=("심각", "severe", "dangerous", "critical"),
    # "위험도" is the risk-level heading, not a finding
    patterns=(r"위험(?!도)",),
)

# Caution / improvement-needed terms → MEDIUM
MEDIUM_RISK_KEYWORDS = KeywordTable(
    name="medium_risk",
    keywords=("주의", "개선", "보완", "caution", "improvement"),
)

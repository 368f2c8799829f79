"""Tests for keyword tables and summary scoring."""

import random

import pytest

from workrules.analysis.keywords import (
    HIGH_RISK_KEYWORDS,
    ISSUE_KEYWORDS,
    KEYWORD_TABLE_VERSION,
    MEDIUM_RISK_KEYWORDS,
    KeywordTable,
)
from workrules.analysis.scoring import (
    SCORE_MAX,
    SCORE_MIN,
    DerivedScorePolicy,
    RandomScorePolicy,
    classify_risk,
    count_issues,
    get_score_policy,
    summarize,
)
from workrules.analysis.types import RiskLevel, Summary


class TestKeywordTable:
    def test_count_non_overlapping(self):
        table = KeywordTable(name="t", keywords=("ab", "cd"))
        assert table.count("ab cd abab") == 4

    def test_longer_keyword_wins(self):
        table = KeywordTable(name="t", keywords=("개선", "개선사항"))
        assert table.count("개선사항") == 1

    def test_case_insensitive(self):
        table = KeywordTable(name="t", keywords=("violation",))
        assert table.count("Violation and VIOLATION") == 2

    def test_pattern_entry_with_lookahead(self):
        table = KeywordTable(name="t", keywords=(), patterns=(r"위험(?!도)",))
        assert table.count("위험도 위험 위험한") == 2
        assert not table.matches("위험도")

    def test_special_chars_escaped(self):
        table = KeywordTable(name="t", keywords=("a.b",))
        assert table.count("axb") == 0
        assert table.count("a.b") == 1

    def test_empty_text(self):
        assert ISSUE_KEYWORDS.count("") == 0
        assert not HIGH_RISK_KEYWORDS.matches("")

    def test_tables_have_no_internal_overlap(self):
        for table in (ISSUE_KEYWORDS, HIGH_RISK_KEYWORDS, MEDIUM_RISK_KEYWORDS):
            for kw in table.keywords:
                others = [o for o in table.keywords if o != kw]
                assert not any(kw in o for o in others), f"{kw!r} overlaps in {table.name}"

    def test_version_present(self):
        assert KEYWORD_TABLE_VERSION


class TestCountIssues:
    def test_counts_each_occurrence(self):
        assert count_issues("문제가 있습니다. 위반입니다. 권고합니다.") == 3

    def test_adjacent_keywords(self):
        assert count_issues("개선권고") == 2

    def test_english_keywords(self):
        assert count_issues("Violation found. PROBLEM noted.") == 2

    def test_no_keywords(self):
        assert count_issues("모든 조항이 법령에 부합합니다.") == 0


class TestClassifyRisk:
    def test_high(self):
        assert classify_risk("해고 예고 규정에 심각한 위반이 있습니다.") == RiskLevel.HIGH

    def test_high_takes_priority(self):
        assert classify_risk("개선이 필요하며 위험한 조항도 있습니다.") == RiskLevel.HIGH

    def test_medium_improvement(self):
        assert classify_risk("연차휴가 규정의 개선이 필요합니다.") == RiskLevel.MEDIUM

    def test_medium_caution(self):
        assert classify_risk("연장근로 한도에 주의하세요.") == RiskLevel.MEDIUM

    def test_low(self):
        assert classify_risk("모든 조항이 법령에 부합합니다.") == RiskLevel.LOW

    def test_risk_level_heading_alone_is_not_high(self):
        assert classify_risk("위험도: 낮음") == RiskLevel.LOW

    def test_bare_danger_term_is_high(self):
        assert classify_risk("징계 해고 규정은 법적 위험이 큽니다.") == RiskLevel.HIGH

    def test_heading_does_not_hide_later_danger(self):
        assert classify_risk("위험도: 높음. 퇴직금 미지급 위험이 있습니다.") == RiskLevel.HIGH


class TestScorePolicies:
    def test_random_in_range(self):
        policy = RandomScorePolicy(rng=random.Random(42))
        scores = {policy.score(RiskLevel.HIGH, 10) for _ in range(2000)}
        assert all(SCORE_MIN <= s < SCORE_MAX for s in scores)
        assert all(isinstance(s, int) for s in scores)
        assert len(scores) > 1

    def test_random_ignores_content(self):
        a = RandomScorePolicy(rng=random.Random(7))
        b = RandomScorePolicy(rng=random.Random(7))
        assert a.score(RiskLevel.LOW, 0) == b.score(RiskLevel.HIGH, 99)

    def test_derived_low_no_issues(self):
        assert DerivedScorePolicy().score(RiskLevel.LOW, 0) == 99

    def test_derived_medium(self):
        assert DerivedScorePolicy().score(RiskLevel.MEDIUM, 4) == 86

    def test_derived_high(self):
        assert DerivedScorePolicy().score(RiskLevel.HIGH, 3) == 77

    def test_derived_clamped(self):
        assert DerivedScorePolicy().score(RiskLevel.HIGH, 500) == SCORE_MIN

    def test_derived_deterministic(self):
        policy = DerivedScorePolicy()
        assert policy.score(RiskLevel.MEDIUM, 2) == policy.score(RiskLevel.MEDIUM, 2)

    def test_get_score_policy(self):
        assert isinstance(get_score_policy("random"), RandomScorePolicy)
        assert isinstance(get_score_policy("derived"), DerivedScorePolicy)

    def test_get_score_policy_unknown(self):
        with pytest.raises(ValueError):
            get_score_policy("magic")


class TestSummarize:
    def test_summary_fields(self):
        text = "근로시간 위반 1건, 휴가 규정 위반 1건. 개선 필요. 추가 개선 권장."
        summary = summarize(text, DerivedScorePolicy())
        assert summary.total_issues == 4
        assert summary.risk_level == RiskLevel.MEDIUM
        assert summary.compliance_score == 86

    def test_caution_only(self):
        summary = summarize("주의", DerivedScorePolicy())
        assert summary == Summary(total_issues=0, risk_level=RiskLevel.MEDIUM, compliance_score=90)

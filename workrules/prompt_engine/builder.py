"""Evaluation prompt builder.

The template is a fixed contract with the provider: five review categories
in a stable order, the document embedded verbatim between markers. Only the
document text and the file name vary.
"""

from __future__ import annotations

# Review categories, in the order the provider is asked to cover them
REVIEW_CATEGORIES: tuple[str, ...] = (
    "법적 준수사항 검토",
    "근로조건 분석",
    "복리후생 평가",
    "징계 및 해고 규정 검토",
    "개선 권고사항",
)

_CATEGORY_INSTRUCTIONS: tuple[str, ...] = (
    "근로기준법, 남녀고용평등법, 최저임금법 등 관련 법령 위반 여부를 조항별로 확인하세요.",
    "근로시간, 휴게, 휴일, 연장·야간·휴일근로, 임금 지급 규정을 분석하세요.",
    "연차휴가, 경조휴가, 각종 수당 및 복리후생 제도의 적정성을 평가하세요.",
    "징계 사유와 절차, 해고 제한 및 예고 규정이 법적 요건을 충족하는지 검토하세요.",
    "발견된 문제마다 구체적인 수정 방안과 우선순위를 제시하세요.",
)

_PROMPT_HEADER = """당신은 한국 노동법 전문가입니다. 아래 취업규칙 문서를 검토하고 법적 준수 여부를 평가해주세요.
"""

_PROMPT_FOOTER = """
각 항목마다 위반 또는 문제가 있는 조항을 인용하고, 위험도가 높은 사항은 '심각', 주의가 필요한 사항은 '주의'로 표시해주세요.
답변은 한국어로, 위 다섯 항목의 순서와 번호를 그대로 사용해 작성해주세요.

[문서 시작]
{content}
[문서 끝]
"""


def _render_categories() -> str:
    lines = []
    for index, (category, instruction) in enumerate(zip(REVIEW_CATEGORIES, _CATEGORY_INSTRUCTIONS), start=1):
        lines.append(f"{index}. {category}\n   - {instruction}")
    return "\n".join(lines)


_CATEGORY_BLOCK = _render_categories()


def build_prompt(content: str, file_name: str | None = None) -> str:
    """Build the evaluation prompt for one document.

    ``content`` is embedded verbatim; the caller is responsible for making
    sure it is non-empty.
    """
    parts = [_PROMPT_HEADER]
    if file_name:
        parts.append(f"파일명: {file_name}\n")
    parts.append("\n다음 다섯 가지 항목을 순서대로 평가해주세요:\n\n")
    parts.append(_CATEGORY_BLOCK)
    parts.append("\n")
    parts.append(_PROMPT_FOOTER.format(content=content))
    return "".join(parts)

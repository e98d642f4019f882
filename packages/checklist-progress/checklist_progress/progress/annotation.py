"""
Annotation Formatter - `(checked/total) ` 접두어 파싱/작성.

노드 텍스트 앞의 진행률 표시만 다루며, 그 뒤의 작성자 텍스트는 절대 수정하지 않습니다.
"""

import re

from checklist_progress.domain.models import AggregateResult

# Leading "(X/Y)" plus at most one separator character, so author
# whitespace after the separator survives a strip/apply round trip
ANNOTATION_PATTERN = re.compile(r"^\((\d+)/(\d+)\)\s?")

# has_annotation requires at least one whitespace character after the prefix
_ANNOTATION_PRESENT = re.compile(r"^\(\d+/\d+\)\s")


class AnnotationFormatter:
    """
    진행률 접두어 포매터.

    Contract:
        apply(apply(x, c, t), c, t) == apply(x, c, t)
        strip(apply(x, c, t)) == strip(x)
    """

    def strip(self, text: str) -> str:
        """선행 진행률 표시 제거 (없으면 no-op)."""
        return ANNOTATION_PATTERN.sub("", text, count=1)

    def apply(self, text: str, checked: int, total: int) -> str:
        """
        기존 표시를 제거하고 새 표시를 붙입니다.

        total == 0 이면 표시 없이 제거된 텍스트만 반환합니다.
        """
        clean = self.strip(text)
        if total == 0:
            return clean
        return f"({checked}/{total}) {clean}"

    def apply_result(self, text: str, result: AggregateResult) -> str:
        return self.apply(text, result.checked, result.total)

    def has_annotation(self, text: str) -> bool:
        return _ANNOTATION_PRESENT.match(text) is not None

    def parse(self, text: str) -> AggregateResult | None:
        """
        기존 표시를 AggregateResult로 읽어옵니다.

        Returns None when absent or when the written counts are inconsistent
        (e.g. hand-edited "(5/2)").
        """
        match = ANNOTATION_PATTERN.match(text)
        if match is None:
            return None
        checked, total = int(match.group(1)), int(match.group(2))
        if checked > total:
            return None
        return AggregateResult(checked=checked, total=total)

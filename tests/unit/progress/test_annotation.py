"""
Annotation Formatter 테스트

- strip / apply / has_annotation / parse
- apply 멱등성, strip 좌역원
- total == 0 이면 표시 없음
"""

import pytest

from checklist_progress.domain.models import AggregateResult
from checklist_progress.progress.annotation import AnnotationFormatter

SAMPLES = [
    "Tasks",
    "(1/2) Tasks",
    "(10/20)Tasks",
    "(3/4)   spaced out",
    "  leading whitespace",
    "",
    "(a/b) not an annotation",
    "Tasks (1/2) in the middle",
    "(0/0) zero",
]


@pytest.fixture
def formatter():
    return AnnotationFormatter()


class TestStrip:
    """선행 진행률 표시 제거"""

    def test_strip_removes_leading_annotation(self, formatter):
        assert formatter.strip("(1/2) Tasks") == "Tasks"

    def test_strip_without_separator(self, formatter):
        assert formatter.strip("(1/2)Tasks") == "Tasks"

    def test_strip_is_noop_without_annotation(self, formatter):
        assert formatter.strip("Tasks") == "Tasks"
        assert formatter.strip("Tasks (1/2)") == "Tasks (1/2)"

    def test_strip_only_first_annotation(self, formatter):
        assert formatter.strip("(1/2) (3/4) Tasks") == "(3/4) Tasks"

    def test_strip_keeps_author_whitespace_after_separator(self, formatter):
        assert formatter.strip("(1/2)   indented") == "  indented"


class TestApply:
    """진행률 표시 작성"""

    def test_apply_prepends_annotation(self, formatter):
        assert formatter.apply("Tasks", 1, 2) == "(1/2) Tasks"

    def test_apply_replaces_existing_annotation(self, formatter):
        assert formatter.apply("(0/2) Tasks", 2, 2) == "(2/2) Tasks"

    def test_apply_zero_total_strips(self, formatter):
        assert formatter.apply("(1/2) Tasks", 0, 0) == "Tasks"
        assert formatter.apply("Tasks", 0, 0) == "Tasks"

    def test_apply_result(self, formatter):
        assert formatter.apply_result("Tasks", AggregateResult(checked=1, total=3)) == "(1/3) Tasks"

    @pytest.mark.parametrize("text", SAMPLES)
    def test_apply_is_idempotent(self, formatter, text):
        once = formatter.apply(text, 1, 2)
        assert formatter.apply(once, 1, 2) == once

    @pytest.mark.parametrize("text", SAMPLES)
    def test_strip_is_left_inverse(self, formatter, text):
        assert formatter.strip(formatter.apply(text, 1, 2)) == formatter.strip(text)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_zero_total_never_annotates(self, formatter, text):
        assert formatter.apply(text, 0, 0) == formatter.strip(text)


class TestInspection:
    """has_annotation / parse"""

    def test_has_annotation(self, formatter):
        assert formatter.has_annotation("(1/2) Tasks")
        assert not formatter.has_annotation("(1/2)Tasks")
        assert not formatter.has_annotation("Tasks")

    def test_has_annotation_does_not_mutate(self, formatter):
        text = "(1/2) Tasks"
        formatter.has_annotation(text)
        assert text == "(1/2) Tasks"

    def test_parse(self, formatter):
        assert formatter.parse("(1/2) Tasks") == AggregateResult(checked=1, total=2)
        assert formatter.parse("Tasks") is None

    def test_parse_inconsistent_counts(self, formatter):
        assert formatter.parse("(5/2) Tasks") is None

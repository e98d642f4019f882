"""
Checklist progress pipeline.

레이어 구조 (leaves first):
- annotation.py: `(checked/total)` 접두어 포매터
- tagging.py: 태그 판정 + 완료 속성 선택 정책
- aggregator.py: 하위 체크박스 집계
- resolver.py: 상위 체크리스트 탐색
- classifier.py: 변경 레코드 필터
- scheduler.py: 디바운스 스케줄러
- orchestrator.py: 변경 피드 → 재계산 파이프라인
"""

from .aggregator import TreeAggregator
from .annotation import AnnotationFormatter
from .classifier import ChangeClassifier
from .orchestrator import ProgressOrchestrator, extract_records
from .resolver import AncestorResolver
from .scheduler import AsyncioTimer, DebounceScheduler, SchedulerState, SchedulerStats
from .tagging import CompletionPropertyPolicy, TagMatcher, TagStrategy

__all__ = [
    "AnnotationFormatter",
    "TagMatcher",
    "TagStrategy",
    "CompletionPropertyPolicy",
    "TreeAggregator",
    "AncestorResolver",
    "ChangeClassifier",
    "DebounceScheduler",
    "SchedulerState",
    "SchedulerStats",
    "AsyncioTimer",
    "ProgressOrchestrator",
    "extract_records",
]

"""
설정 그룹 정의.

Settings를 논리적 그룹으로 분리하여 관리합니다.
각 그룹은 독립적으로 사용 가능하며, Settings에서 통합됩니다.
"""

from pydantic import BaseModel, Field


class TagConfig(BaseModel):
    """태그 / 완료 속성 설정."""

    checklist_tag: str = Field(default="checklist", min_length=1, description="집계 루트(체크리스트) 태그")
    checkbox_tag: str = Field(default="checkbox", min_length=1, description="카운트 대상(체크박스) 태그")
    property_pattern: str | None = Field(
        default=None,
        description="완료 속성 식별자 override (None이면 스키마 조회 후 fallback)",
    )
    property_fallback: str = Field(default="property", min_length=1, description="속성 조회 실패 시 부분 문자열 패턴")


class SchedulerConfig(BaseModel):
    """디바운스 / 탐색 한도 설정."""

    debounce_ms: int = Field(default=300, ge=50, le=5000, description="디바운스 (ms)")
    ancestor_max_hops: int = Field(default=10, ge=1, le=100, description="상위 노드 탐색 최대 hop 수")


class ObservabilityConfig(BaseModel):
    """로깅 설정."""

    log_level: str = Field(default="INFO", description="로그 레벨")
    log_format: str = Field(default="console", pattern="^(json|console)$", description="로그 포맷")

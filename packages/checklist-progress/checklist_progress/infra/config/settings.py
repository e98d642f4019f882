from functools import cached_property
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from checklist_progress.infra.config.groups import ObservabilityConfig, SchedulerConfig, TagConfig


class Settings(BaseSettings):
    """
    Checklist Progress Settings

    Environment variables should use CHECKLIST_ prefix.
    Example: CHECKLIST_CHECKBOX_TAG, CHECKLIST_DEBOUNCE_MS

    그룹화된 설정 접근:
        settings.tags           # TagConfig
        settings.scheduler      # SchedulerConfig
        settings.observability  # ObservabilityConfig
    """

    # NOTE: `.env` may be present but unreadable; fall back to process env vars.
    _dotenv_path = Path(".env")
    _dotenv_file = ".env" if _dotenv_path.is_file() else None
    try:
        if _dotenv_file is not None:
            _dotenv_path.open("r", encoding="utf-8").close()
    except OSError:
        _dotenv_file = None

    model_config = SettingsConfigDict(
        env_file=_dotenv_file,
        env_file_encoding="utf-8",
        env_prefix="CHECKLIST_",
        extra="ignore",
    )

    # ========================================================================
    # Grouped Config Accessors
    # ========================================================================

    @cached_property
    def tags(self) -> TagConfig:
        """태그 설정 그룹."""
        return TagConfig(
            checklist_tag=self.checklist_tag,
            checkbox_tag=self.checkbox_tag,
            property_pattern=self.checkbox_property_pattern,
            property_fallback=self.checkbox_property_fallback,
        )

    @cached_property
    def scheduler(self) -> SchedulerConfig:
        """스케줄러 설정 그룹."""
        return SchedulerConfig(
            debounce_ms=self.debounce_ms,
            ancestor_max_hops=self.ancestor_max_hops,
        )

    @cached_property
    def observability(self) -> ObservabilityConfig:
        """로깅 설정 그룹."""
        return ObservabilityConfig(
            log_level=self.log_level,
            log_format=self.log_format,
        )

    # ========================================================================
    # Tags
    # ========================================================================
    checklist_tag: str = "checklist"
    checkbox_tag: str = "checkbox"
    checkbox_property_pattern: str | None = None  # 완료 속성 override
    checkbox_property_fallback: str = "property"

    # ========================================================================
    # Scheduler
    # ========================================================================
    debounce_ms: int = 300  # 디바운스 시간 (ms)
    ancestor_max_hops: int = 10

    # ========================================================================
    # Observability
    # ========================================================================
    log_level: str = "INFO"
    log_format: str = "console"


# Eager loading (module-level instantiation)
settings = Settings()

from checklist_progress.infra.config.groups import ObservabilityConfig, SchedulerConfig, TagConfig
from checklist_progress.infra.config.settings import Settings, settings

__all__ = [
    # Settings
    "Settings",
    "settings",
    # Config Groups
    "TagConfig",
    "SchedulerConfig",
    "ObservabilityConfig",
]

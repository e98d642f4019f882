"""
Checklist Progress - live "(checked/total)" annotations for checklist nodes.

This package contains:
- domain/: change records, document nodes, aggregate results
- ports.py: store / timer / feed / notifier protocols
- progress/: classifier → resolver → debounce scheduler → aggregator pipeline
- adapters/: in-memory node store (JSON snapshots)
- infra/: config, exceptions, structured logging
"""

from checklist_progress.progress.orchestrator import ProgressOrchestrator
from checklist_progress.service import ChecklistProgressService, build_orchestrator

__all__ = [
    "ChecklistProgressService",
    "ProgressOrchestrator",
    "build_orchestrator",
]

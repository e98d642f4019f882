"""
Test Fakes Module

Provides fake/stub implementations for testing.
These are minimal implementations that satisfy interfaces without real dependencies.
"""

from tests.fakes.fake_node_store import DONE, FlakyNodeStore, checklist_store, item, make_aggregator
from tests.fakes.fake_timer import ManualTimer, ManualTimerHandle

__all__ = [
    "DONE",
    "FlakyNodeStore",
    "ManualTimer",
    "ManualTimerHandle",
    "checklist_store",
    "item",
    "make_aggregator",
]

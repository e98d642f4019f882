import pytest

from checklist_progress.infra.config.settings import Settings
from checklist_progress.progress.annotation import AnnotationFormatter
from checklist_progress.progress.scheduler import DebounceScheduler
from checklist_progress.service import build_orchestrator
from tests.fakes import ManualTimer, checklist_store, make_aggregator


@pytest.fixture
def store():
    """root(#checklist) + a(unchecked) + b(checked) + c(no tag)"""
    return checklist_store()


@pytest.fixture
def timer():
    return ManualTimer()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def aggregator(store):
    return make_aggregator(store)


@pytest.fixture
def scheduler(store, aggregator, timer):
    return DebounceScheduler(store, aggregator, AnnotationFormatter(), debounce_ms=300, timer=timer)


@pytest.fixture
def orchestrator(store, timer, settings):
    return build_orchestrator(store, settings, timer=timer)

"""
ChecklistProgressService 테스트

- 호스트 연결 (변경 피드 구독)
- bootstrap 실패 → 사용자 경고 (유일한 사용자 노출 오류)
"""

import pytest

from checklist_progress.service import ChecklistProgressService
from tests.fakes import DONE


class FakeFeed:
    def __init__(self):
        self.callbacks = []

    def subscribe(self, callback):
        self.callbacks.append(callback)


class FakeNotifier:
    def __init__(self):
        self.messages = []

    def show_message(self, message, level="info"):
        self.messages.append((message, level))


class TestBootstrap:
    """호스트 연결"""

    def test_start_subscribes_on_change(self, store, settings, timer):
        feed = FakeFeed()
        notifier = FakeNotifier()
        service = ChecklistProgressService(store, feed, notifier, settings=settings, timer=timer)

        assert service.start() is True
        assert service.is_running
        assert feed.callbacks == [service.orchestrator.on_change]
        assert notifier.messages == []

    def test_missing_feed_warns_user(self, store, settings):
        notifier = FakeNotifier()
        service = ChecklistProgressService(store, None, notifier, settings=settings)

        assert service.start() is False
        assert not service.is_running
        assert len(notifier.messages) == 1
        message, level = notifier.messages[0]
        assert level == "warning"
        assert "change feed" in message

    def test_feed_without_subscribe_warns_user(self, store, settings):
        notifier = FakeNotifier()
        service = ChecklistProgressService(store, object(), notifier, settings=settings)

        assert service.start() is False
        assert notifier.messages[0][1] == "warning"

    def test_missing_store_warns_user(self, settings):
        notifier = FakeNotifier()
        service = ChecklistProgressService(None, FakeFeed(), notifier, settings=settings)

        assert service.start() is False
        assert "node store" in notifier.messages[0][0]

    def test_missing_notifier_does_not_raise(self, store, settings):
        assert ChecklistProgressService(store, None, None, settings=settings).start() is False


class TestServiceFlow:
    """피드 → 재계산"""

    @pytest.mark.asyncio
    async def test_feed_callback_drives_pipeline(self, store, settings, timer):
        feed = FakeFeed()
        service = ChecklistProgressService(store, feed, FakeNotifier(), settings=settings, timer=timer)
        service.start()

        store.set_property("a", DONE, True)
        await feed.callbacks[0]({"txData": [["a", DONE, True, 1, True]]})
        await timer.fire()

        assert store.content("root") == "(2/2) Tasks"

    @pytest.mark.asyncio
    async def test_stop_flushes_pending(self, store, settings, timer):
        feed = FakeFeed()
        service = ChecklistProgressService(store, feed, FakeNotifier(), settings=settings, timer=timer)
        service.start()

        await feed.callbacks[0]([["a", DONE, False, 1, True]])
        await service.stop()

        assert store.content("root") == "(1/2) Tasks"
        assert not service.is_running

    @pytest.mark.asyncio
    async def test_recompute_all_without_store(self, settings):
        assert await ChecklistProgressService(None, settings=settings).recompute_all() == 0

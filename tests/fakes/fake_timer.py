"""
Fake Timer for Unit Testing

Timer 포트 Fake 구현. 실제 시간 대기 없이 테스트가 직접 타이머를 발화시킵니다.
"""

from collections.abc import Awaitable, Callable


class ManualTimerHandle:
    """수동 타이머 핸들."""

    def __init__(self, delay_seconds: float, callback: Callable[[], Awaitable[None]]):
        self.delay_seconds = delay_seconds
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        if not self.fired:
            self.cancelled = True


class ManualTimer:
    """
    수동 타이머.

    사용 예:
        timer = ManualTimer()
        scheduler = DebounceScheduler(store, aggregator, timer=timer)
        scheduler.enqueue("root")
        await timer.fire()  # 디바운스 윈도우 경과
    """

    def __init__(self):
        self.handles: list[ManualTimerHandle] = []

    def schedule(self, delay_seconds: float, callback: Callable[[], Awaitable[None]]) -> ManualTimerHandle:
        handle = ManualTimerHandle(delay_seconds, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> list[ManualTimerHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    @property
    def cancelled_count(self) -> int:
        return sum(1 for h in self.handles if h.cancelled)

    async def fire(self) -> int:
        """대기 중인 타이머 모두 발화. Returns number of fired handles."""
        handles = self.active
        for handle in handles:
            handle.fired = True
            await handle.callback()
        return len(handles)

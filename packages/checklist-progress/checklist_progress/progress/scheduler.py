"""
Debounce Scheduler - 체크리스트 재계산 디바운싱.

연속적인 체크박스 변경을 체크리스트당 한 번의 재계산으로 병합:
- 디바운싱: debounce_ms 동안 새 enqueue가 없을 때 플러시 (enqueue마다 타이머 리셋)
- 순차 처리: 플러시는 겹치지 않으며 스냅샷 삽입 순서대로 처리
- 최신성: 플러시 시점에 트리를 다시 읽음 (enqueue 시점 데이터 재사용 안 함)
- 쓰기 억제: 결과 텍스트가 현재와 같으면 쓰지 않음

State machine:
    IDLE --enqueue--> PENDING --timer--> FLUSHING --done--> IDLE | PENDING
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from checklist_progress.domain.models import NodeId
from checklist_progress.infra.observability import add_context, clear_context, get_logger, log_error
from checklist_progress.ports import NodeStorePort, Timer, TimerHandle
from checklist_progress.progress.aggregator import TreeAggregator
from checklist_progress.progress.annotation import AnnotationFormatter

logger = get_logger(__name__)


class SchedulerState(Enum):
    """스케줄러 상태."""

    IDLE = "idle"
    PENDING = "pending"
    FLUSHING = "flushing"


@dataclass
class SchedulerStats:
    """누적 처리 통계."""

    flushes: int = 0
    writes: int = 0
    suppressed: int = 0
    failures: int = 0


class _AsyncioTimerHandle:
    def __init__(self, task: asyncio.Task):
        self._task = task
        self.fired = False

    def cancel(self) -> None:
        # A fired timer is running a flush; never interrupt it
        if not self.fired and not self._task.done():
            self._task.cancel()


class AsyncioTimer:
    """asyncio.sleep 기반 기본 타이머."""

    def __init__(self):
        # Live timer tasks; the event loop holds them only weakly
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, delay_seconds: float, callback: Callable[[], Awaitable[None]]) -> TimerHandle:
        handle: _AsyncioTimerHandle

        async def _run():
            try:
                await asyncio.sleep(delay_seconds)
            except asyncio.CancelledError:
                return  # 타이머 리셋됨
            handle.fired = True
            await callback()

        task = asyncio.create_task(_run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        handle = _AsyncioTimerHandle(task)
        return handle


class DebounceScheduler:
    """
    체크리스트 재계산 스케줄러.

    사용 예:
        scheduler = DebounceScheduler(store, aggregator, formatter, debounce_ms=300)
        scheduler.enqueue("checklist-uuid")  # 300ms 내 반복 호출은 한 번으로 병합
        ...
        await scheduler.close()  # 남은 항목 플러시
    """

    def __init__(
        self,
        store: NodeStorePort,
        aggregator: TreeAggregator,
        formatter: AnnotationFormatter | None = None,
        debounce_ms: int = 300,
        timer: Timer | None = None,
    ):
        """
        Args:
            store: 노드 스토어 (읽기/쓰기)
            aggregator: 체크박스 집계기
            formatter: 진행률 포매터
            debounce_ms: 디바운스 시간 (ms)
            timer: 타이머 (None이면 AsyncioTimer)
        """
        self.store = store
        self.aggregator = aggregator
        self.formatter = formatter or AnnotationFormatter()
        self.debounce_ms = debounce_ms
        self.timer = timer or AsyncioTimer()
        self.stats = SchedulerStats()

        # dict as insertion-ordered set
        self._pending: dict[NodeId, None] = {}
        self._timer_handle: TimerHandle | None = None
        self._flush_lock = asyncio.Lock()
        self._flushing = False

    @property
    def state(self) -> SchedulerState:
        if self._flushing:
            return SchedulerState.FLUSHING
        if self._pending:
            return SchedulerState.PENDING
        return SchedulerState.IDLE

    @property
    def pending_ids(self) -> list[NodeId]:
        return list(self._pending)

    def enqueue(self, root_id: NodeId) -> None:
        """체크리스트 id 추가 및 디바운스 타이머 리셋."""
        self._pending[root_id] = None
        self._rearm()
        logger.debug("recompute_enqueued", node_id=root_id, pending=len(self._pending))

    def _rearm(self) -> None:
        if self._timer_handle is not None:
            self._timer_handle.cancel()
        self._timer_handle = self.timer.schedule(self.debounce_ms / 1000, self._on_timer)

    async def _on_timer(self) -> None:
        await self._flush()

    async def flush_now(self) -> int:
        """타이머를 기다리지 않고 즉시 플러시. Returns number of nodes written."""
        if self._timer_handle is not None:
            self._timer_handle.cancel()
            self._timer_handle = None
        return await self._flush()

    async def close(self) -> None:
        """타이머 취소 및 남은 항목 플러시."""
        written = await self.flush_now()
        logger.info("debounce_scheduler_closed", written=written, stats=vars(self.stats))

    async def _flush(self) -> int:
        async with self._flush_lock:
            if not self._pending:
                return 0

            # Atomic swap: later enqueues land in a fresh set with their own timer
            snapshot = list(self._pending)
            self._pending = {}
            self.stats.flushes += 1
            add_context(flush_id=self.stats.flushes)
            try:
                logger.info("flush_started", node_ids=snapshot)

                _, written = await self._process(snapshot)

                logger.info(
                    "flush_completed", processed=len(snapshot), written=written, pending=len(self._pending)
                )
            finally:
                clear_context("flush_id")
            return written

    async def recompute_now(self, node_ids: list[NodeId]) -> tuple[int, int]:
        """
        디바운스 없이 즉시 재계산 (수동 전체 재계산용).

        Shares the flush lock, so it never overlaps a timer-driven flush.

        Returns:
            (recomputed, written)
        """
        async with self._flush_lock:
            return await self._process(list(dict.fromkeys(node_ids)))

    async def _process(self, node_ids: list[NodeId]) -> tuple[int, int]:
        recomputed = 0
        written = 0
        self._flushing = True
        try:
            for node_id in node_ids:
                try:
                    changed = await self.recompute(node_id)
                except Exception as e:
                    self.stats.failures += 1
                    log_error(logger, "recompute_failed", error=e, node_id=node_id)
                    continue
                recomputed += 1
                if changed:
                    written += 1
        finally:
            self._flushing = False
        return recomputed, written

    async def recompute(self, node_id: NodeId) -> bool:
        """
        체크리스트 하나를 재계산하고 필요하면 텍스트를 갱신합니다.

        Returns:
            True if the node's text was rewritten
        """
        node = await self.store.get_node(node_id, include_children=True)
        if node is None:
            logger.warning("checklist_node_missing", node_id=node_id)
            return False

        result = await self.aggregator.count(node)
        current = node.content or ""
        updated = self.formatter.apply_result(current, result)

        if updated == current:
            self.stats.suppressed += 1
            logger.debug("write_suppressed", node_id=node_id, checked=result.checked, total=result.total)
            return False

        await self.store.update_node(node_id, updated)
        self.stats.writes += 1
        logger.info("annotation_written", node_id=node_id, checked=result.checked, total=result.total)
        return True

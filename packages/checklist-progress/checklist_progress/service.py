"""
체크리스트 진행률 서비스 - 설정 기반 파이프라인 조립 및 호스트 연결.

호스트가 변경 피드나 노드 스토어를 제공하지 못하면 (bootstrap 실패)
사용자에게 보이는 경고를 한 번 표시하고, 그 외 오류는 로그로만 남깁니다.

사용 예:
    service = ChecklistProgressService(store=host_store, feed=host_feed, notifier=host_ui)
    service.start()
    ...
    await service.stop()
"""

from checklist_progress.infra.config.settings import Settings, settings as default_settings
from checklist_progress.infra.exceptions import BootstrapError
from checklist_progress.infra.observability import get_logger
from checklist_progress.ports import ChangeFeedPort, NodeStorePort, NotifierPort, Timer
from checklist_progress.progress.aggregator import TreeAggregator
from checklist_progress.progress.annotation import AnnotationFormatter
from checklist_progress.progress.classifier import ChangeClassifier
from checklist_progress.progress.orchestrator import ProgressOrchestrator
from checklist_progress.progress.resolver import AncestorResolver
from checklist_progress.progress.scheduler import DebounceScheduler
from checklist_progress.progress.tagging import CompletionPropertyPolicy, TagMatcher

logger = get_logger(__name__)

BOOTSTRAP_WARNING = "Checklist progress: automatic updates are not available ({missing})"


class ChecklistProgressService:
    """파이프라인 조립 + 호스트 구독."""

    def __init__(
        self,
        store: NodeStorePort | None,
        feed: ChangeFeedPort | None = None,
        notifier: NotifierPort | None = None,
        settings: Settings | None = None,
        timer: Timer | None = None,
    ):
        self.store = store
        self.feed = feed
        self.notifier = notifier
        self.settings = settings or default_settings
        self.timer = timer
        self.orchestrator: ProgressOrchestrator | None = None
        self._is_running = False

        if store is not None:
            self.orchestrator = build_orchestrator(store, self.settings, timer=timer)

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start(self) -> bool:
        """
        변경 피드 구독 시작.

        Returns:
            False when the host cannot supply a store or a feed (warning shown)
        """
        try:
            self._check_host()
        except BootstrapError as e:
            logger.warning("bootstrap_failed", missing=e.missing)
            if self.notifier is not None:
                self.notifier.show_message(BOOTSTRAP_WARNING.format(missing=e.missing), "warning")
            return False

        self.feed.subscribe(self.orchestrator.on_change)
        self._is_running = True
        tags = self.settings.tags
        logger.info(
            "checklist_progress_started",
            checklist_tag=tags.checklist_tag,
            checkbox_tag=tags.checkbox_tag,
            debounce_ms=self.settings.scheduler.debounce_ms,
        )
        return True

    def _check_host(self) -> None:
        if self.orchestrator is None:
            raise BootstrapError("node store")
        if self.feed is None or not callable(getattr(self.feed, "subscribe", None)):
            raise BootstrapError("change feed")

    async def stop(self) -> None:
        """남은 재계산 플러시."""
        if self.orchestrator is not None:
            await self.orchestrator.scheduler.close()
        self._is_running = False

    async def recompute_all(self) -> int:
        if self.orchestrator is None:
            return 0
        return await self.orchestrator.recompute_all()


def build_orchestrator(
    store: NodeStorePort,
    settings: Settings | None = None,
    timer: Timer | None = None,
) -> ProgressOrchestrator:
    """Settings → 파이프라인 조립."""
    settings = settings or default_settings
    tags = settings.tags
    scheduler_config = settings.scheduler

    matcher = TagMatcher(store)
    policy = CompletionPropertyPolicy(
        store,
        item_tag=tags.checkbox_tag,
        override=tags.property_pattern,
        fallback=tags.property_fallback,
    )
    aggregator = TreeAggregator(store, matcher, policy, item_tag=tags.checkbox_tag)
    resolver = AncestorResolver(
        store,
        matcher,
        aggregate_tag=tags.checklist_tag,
        max_hops=scheduler_config.ancestor_max_hops,
    )
    scheduler = DebounceScheduler(
        store,
        aggregator,
        AnnotationFormatter(),
        debounce_ms=scheduler_config.debounce_ms,
        timer=timer,
    )
    return ProgressOrchestrator(store, ChangeClassifier(), policy, resolver, scheduler)

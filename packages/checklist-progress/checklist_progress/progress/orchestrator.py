"""
Progress Orchestrator - 변경 피드 → 체크리스트 재계산 파이프라인.

파이프라인:
    change batch
        ↓
    ChangeClassifier (완료 속성 변경만 통과)
        ↓
    NodeStore.get_node (엔티티 → 노드)
        ↓
    AncestorResolver (가장 가까운 #checklist 상위 노드)
        ↓
    DebounceScheduler (300ms 디바운스 후 재계산)
"""

from collections.abc import Mapping
from typing import Any

from checklist_progress.domain.models import ChangeRecord, NodeId, QueryKind, StoreQuery
from checklist_progress.infra.observability import get_logger, log_error
from checklist_progress.ports import NodeStorePort
from checklist_progress.progress.classifier import ChangeClassifier
from checklist_progress.progress.resolver import AncestorResolver
from checklist_progress.progress.scheduler import DebounceScheduler
from checklist_progress.progress.tagging import CompletionPropertyPolicy

logger = get_logger(__name__)

# Batch keys carrying the record list, in lookup order
TX_DATA_KEYS = ("txData", "transactionData", "tx_data")


def extract_records(batch: Any) -> list[Any]:
    """
    변경 배치에서 레코드 목록 추출.

    Accepts a mapping with one of TX_DATA_KEYS, an object with a `tx_data`
    attribute, or a list/tuple of records. Anything else is an empty list.
    """
    if batch is None:
        return []

    if isinstance(batch, (list, tuple)):
        return list(batch)

    if isinstance(batch, Mapping):
        tx_data = next((batch[key] for key in TX_DATA_KEYS if key in batch), None)
    else:
        tx_data = getattr(batch, "tx_data", None)

    if not isinstance(tx_data, (list, tuple)):
        logger.debug("change_batch_ignored", reason="no_tx_data", tx_data_type=type(tx_data).__name__)
        return []
    return list(tx_data)


class ProgressOrchestrator:
    """
    체크리스트 진행률 오케스트레이터.

    Produced interface:
        on_change(batch)   - change feed callback
        recompute_all()    - manual/forced recompute of every checklist
    """

    def __init__(
        self,
        store: NodeStorePort,
        classifier: ChangeClassifier,
        policy: CompletionPropertyPolicy,
        resolver: AncestorResolver,
        scheduler: DebounceScheduler,
    ):
        self.store = store
        self.classifier = classifier
        self.policy = policy
        self.resolver = resolver
        self.scheduler = scheduler

    async def on_change(self, batch: Any) -> list[NodeId]:
        """
        변경 배치 처리.

        Returns:
            Checklist ids enqueued for recomputation (in order, deduplicated)
        """
        raw_records = extract_records(batch)
        if not raw_records:
            return []

        pattern = await self.policy.resolve_identifier()

        relevant: list[ChangeRecord] = []
        for raw in raw_records:
            record = ChangeRecord.from_raw(raw)
            if record is not None and self.classifier.is_relevant(record, pattern):
                relevant.append(record)

        if not relevant:
            logger.debug("no_relevant_changes", records=len(raw_records), pattern=pattern)
            return []

        logger.debug("relevant_changes_found", count=len(relevant), pattern=pattern)

        enqueued: dict[NodeId, None] = {}
        seen_entities: set = set()
        for record in relevant:
            if record.entity_id in seen_entities:
                continue
            seen_entities.add(record.entity_id)

            ancestor_id = await self._resolve_ancestor(record)
            if ancestor_id is None:
                continue
            self.scheduler.enqueue(ancestor_id)
            enqueued[ancestor_id] = None

        return list(enqueued)

    async def _resolve_ancestor(self, record: ChangeRecord) -> NodeId | None:
        try:
            node = await self.store.get_node(record.entity_id)
        except Exception as e:
            log_error(logger, "changed_node_lookup_failed", error=e, entity_id=record.entity_id)
            return None

        if node is None:
            logger.debug("changed_node_missing", entity_id=record.entity_id)
            return None

        return await self.resolver.resolve_node(node)

    async def recompute_all(self) -> int:
        """
        모든 체크리스트를 디바운스 없이 재계산합니다.

        Returns:
            Number of checklists recomputed
        """
        tag = self.resolver.aggregate_tag
        try:
            rows = await self.store.query(StoreQuery(kind=QueryKind.TAGGED_NODES, tag=tag))
        except Exception as e:
            log_error(logger, "checklist_query_failed", error=e, tag=tag)
            return 0

        node_ids = [row["id"] for row in rows or () if isinstance(row, dict) and "id" in row]
        if not node_ids:
            logger.info("recompute_all_completed", checklists=0, recomputed=0, written=0)
            return 0

        recomputed, written = await self.scheduler.recompute_now(node_ids)

        logger.info("recompute_all_completed", checklists=len(node_ids), recomputed=recomputed, written=written)
        return recomputed

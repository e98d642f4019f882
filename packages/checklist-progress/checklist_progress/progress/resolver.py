"""
Ancestor Resolver - 가장 가까운 체크리스트 상위 노드 탐색.

Walks parent links upward from a node, testing each visited node (the start
node included) for the aggregate tag. The walk follows at most `max_hops`
parent links; hitting the bound, revisiting an id, or a missing parent is
NotFound (None), never an error.
"""

from checklist_progress.domain.models import DocumentNode, NodeId
from checklist_progress.infra.observability import get_logger, log_error
from checklist_progress.ports import NodeStorePort
from checklist_progress.progress.tagging import TagMatcher

logger = get_logger(__name__)

DEFAULT_MAX_HOPS = 10


class AncestorResolver:
    """상위 체크리스트 탐색기."""

    def __init__(
        self,
        store: NodeStorePort,
        matcher: TagMatcher,
        aggregate_tag: str,
        max_hops: int = DEFAULT_MAX_HOPS,
    ):
        self.store = store
        self.matcher = matcher
        self.aggregate_tag = aggregate_tag
        self.max_hops = max_hops

    async def resolve(self, start_id: NodeId) -> NodeId | None:
        node = await self._read(start_id)
        if node is None:
            return None
        return await self.resolve_node(node)

    async def resolve_node(self, node: DocumentNode) -> NodeId | None:
        start_id = node.id
        visited = {node.id}
        hops = 0

        while True:
            if await self.matcher.has_tag(node, self.aggregate_tag):
                logger.debug("ancestor_resolved", start_id=start_id, ancestor_id=node.id, hops=hops)
                return node.id

            parent_id = node.parent_id
            if parent_id is None:
                logger.debug("ancestor_not_found", start_id=start_id, reason="root_reached", hops=hops)
                return None
            if hops >= self.max_hops:
                logger.debug("ancestor_not_found", start_id=start_id, reason="hop_limit", hops=hops)
                return None
            if parent_id in visited:
                logger.debug("ancestor_not_found", start_id=start_id, reason="cycle", hops=hops)
                return None

            parent = await self._read(parent_id)
            if parent is None:
                logger.debug("ancestor_not_found", start_id=start_id, reason="missing_parent", parent_id=parent_id)
                return None

            visited.add(parent_id)
            hops += 1
            node = parent

    async def _read(self, node_id: NodeId) -> DocumentNode | None:
        try:
            return await self.store.get_node(node_id)
        except Exception as e:
            log_error(logger, "ancestor_lookup_failed", error=e, node_id=node_id)
            return None

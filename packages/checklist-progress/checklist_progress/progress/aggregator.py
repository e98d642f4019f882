"""
Tree Aggregator - 하위 체크박스 완료 집계.

Iterative depth-first walk with an explicit stack and a visited set, so
stack depth is independent of tree depth and a cyclic child graph still
terminates (each node id contributes at most once).
"""

from checklist_progress.domain.models import AggregateResult, DocumentNode
from checklist_progress.infra.observability import get_logger, log_error
from checklist_progress.ports import NodeStorePort
from checklist_progress.progress.tagging import CompletionPropertyPolicy, TagMatcher

logger = get_logger(__name__)


class TreeAggregator:
    """
    체크박스 집계기.

    사용 예:
        aggregator = TreeAggregator(store, matcher, policy, item_tag="checkbox")
        node = await store.get_node(root_id, include_children=True)
        result = await aggregator.count(node)  # AggregateResult(checked=1, total=2)
    """

    def __init__(
        self,
        store: NodeStorePort,
        matcher: TagMatcher,
        policy: CompletionPropertyPolicy,
        item_tag: str,
    ):
        self.store = store
        self.matcher = matcher
        self.policy = policy
        self.item_tag = item_tag

    async def count(self, node: DocumentNode) -> AggregateResult:
        checked = 0
        total = 0
        visited: set = set()
        stack: list[DocumentNode] = [node]

        while stack:
            current = stack.pop()
            if current.id in visited:
                logger.debug("aggregate_revisit_skipped", node_id=current.id)
                continue
            visited.add(current.id)

            if await self.matcher.has_tag(current, self.item_tag):
                total += 1
                if await self.policy.completion_value(current) is True:
                    checked += 1

            # reversed() keeps document order when popping
            stack.extend(reversed(await self._children(current)))

        result = AggregateResult(checked=checked, total=total)
        logger.debug("aggregate_counted", node_id=node.id, checked=checked, total=total, visited=len(visited))
        return result

    async def _children(self, node: DocumentNode) -> list[DocumentNode]:
        if node.children is not None:
            children = []
            for child in node.children:
                if isinstance(child, DocumentNode):
                    children.append(child)
                else:
                    logger.debug("malformed_child_skipped", parent_id=node.id, child=repr(child)[:80])
            return children

        children = []
        for child_id in node.child_ids:
            child = await self._read_child(node, child_id)
            if child is not None:
                children.append(child)
        return children

    async def _read_child(self, parent: DocumentNode, child_id) -> DocumentNode | None:
        try:
            child = await self.store.get_node(child_id)
        except Exception as e:
            log_error(logger, "child_lookup_failed", error=e, parent_id=parent.id, child_id=child_id)
            return None

        if not isinstance(child, DocumentNode):
            logger.debug("malformed_child_skipped", parent_id=parent.id, child_id=child_id)
            return None
        return child

"""
Tag membership and completion-property selection.

TagMatcher is the single tag-detection capability shared by the aggregator
and the ancestor resolver. Strategy order is fixed, first positive wins:

    1. content substring  ("#tag" in node text)
    2. store query        (QueryKind.TAGGED_NODES)
    3. node tag list      (DocumentNode.tags)

CompletionPropertyPolicy decides which boolean property is "the" completion
flag of an item node and which identifier the change classifier matches.
"""

from enum import Enum

from checklist_progress.domain.models import DocumentNode, QueryKind, StoreQuery
from checklist_progress.infra.observability import get_logger, log_error
from checklist_progress.ports import NodeStorePort

logger = get_logger(__name__)

# Namespaced property keys that are metadata, never completion flags
METADATA_PROPERTY_KEYS = frozenset({":logseq.property/created-by-ref"})

# Schema types that denote a boolean-valued property
BOOLEAN_PROPERTY_TYPES = frozenset({"checkbox", "boolean"})


class TagStrategy(Enum):
    """Tag 감지 전략 (순서 = 우선순위)."""

    CONTENT = "content"
    QUERY = "query"
    TAG_LIST = "tag_list"


DEFAULT_STRATEGIES: tuple[TagStrategy, ...] = (TagStrategy.CONTENT, TagStrategy.QUERY, TagStrategy.TAG_LIST)


class TagMatcher:
    """
    노드 태그 판정기.

    A failing strategy (store query error of any kind) is logged and treated as a
    negative answer, so the next strategy still runs.
    """

    def __init__(self, store: NodeStorePort, strategies: tuple[TagStrategy, ...] = DEFAULT_STRATEGIES):
        self.store = store
        self.strategies = strategies

    async def has_tag(self, node: DocumentNode, tag: str) -> bool:
        for strategy in self.strategies:
            if await self._check(strategy, node, tag):
                logger.debug("tag_matched", node_id=node.id, tag=tag, strategy=strategy.value)
                return True
        return False

    async def _check(self, strategy: TagStrategy, node: DocumentNode, tag: str) -> bool:
        if strategy is TagStrategy.CONTENT:
            return f"#{tag}" in (node.content or "")
        if strategy is TagStrategy.QUERY:
            return await self._query_membership(node, tag)
        return tag in node.tags

    async def _query_membership(self, node: DocumentNode, tag: str) -> bool:
        try:
            rows = await self.store.query(StoreQuery(kind=QueryKind.TAGGED_NODES, tag=tag))
        except Exception as e:
            log_error(logger, "tag_query_failed", error=e, node_id=node.id, tag=tag)
            return False

        return any(_row_id(row) == node.id for row in rows or ())


def _row_id(row) -> object:
    if isinstance(row, dict):
        return row.get("id")
    return None


class CompletionPropertyPolicy:
    """
    완료 속성 선택 정책.

    Identifier resolution (once, cached until `reset()`):
        1. configured override, if any
        2. the single boolean property bound to the item tag's schema
           (QueryKind.TAG_PROPERTIES)
        3. the generic fallback substring

    Only 1 and 2 are authoritative: the node must carry exactly that key.
    With the fallback, candidates are boolean properties whose key contains
    the pattern (metadata keys excluded); one candidate decides, several
    candidates are ambiguous and count as unchecked.
    """

    def __init__(
        self,
        store: NodeStorePort,
        item_tag: str,
        override: str | None = None,
        fallback: str = "property",
    ):
        self.store = store
        self.item_tag = item_tag
        self.override = override or None
        self.fallback = fallback
        self._identifier: str | None = None
        self._authoritative = False

    @property
    def authoritative(self) -> bool:
        return self._authoritative

    def reset(self) -> None:
        """Forget the resolved identifier (e.g. after a schema change)."""
        self._identifier = None
        self._authoritative = False

    async def resolve_identifier(self) -> str:
        if self._identifier is not None:
            return self._identifier

        if self.override:
            self._set(self.override, authoritative=True, source="override")
            return self._identifier

        ident = await self._query_schema_ident()
        if ident is not None:
            self._set(ident, authoritative=True, source="schema")
        else:
            self._set(self.fallback, authoritative=False, source="fallback")
        return self._identifier

    def _set(self, identifier: str, authoritative: bool, source: str) -> None:
        self._identifier = identifier
        self._authoritative = authoritative
        logger.info("completion_property_resolved", identifier=identifier, source=source)

    async def _query_schema_ident(self) -> str | None:
        try:
            rows = await self.store.query(StoreQuery(kind=QueryKind.TAG_PROPERTIES, tag=self.item_tag))
        except Exception as e:
            log_error(logger, "property_schema_query_failed", error=e, tag=self.item_tag)
            return None

        idents = [
            row["ident"]
            for row in rows or ()
            if isinstance(row, dict)
            and isinstance(row.get("ident"), str)
            and row.get("type") in BOOLEAN_PROPERTY_TYPES
        ]
        if len(idents) == 1:
            return idents[0]
        if len(idents) > 1:
            logger.warning("ambiguous_schema_properties", tag=self.item_tag, candidates=idents)
        return None

    async def completion_value(self, node: DocumentNode) -> bool | None:
        """
        노드의 완료 값.

        Returns:
            True/False from the selected flag, or None when no single flag
            can be selected
        """
        identifier = await self.resolve_identifier()
        flags = node.boolean_properties()

        if self._authoritative:
            return flags.get(identifier)

        candidates = [
            key for key in flags if identifier in key and key not in METADATA_PROPERTY_KEYS
        ]
        if len(candidates) == 1:
            return flags[candidates[0]]
        if len(candidates) > 1:
            logger.warning("ambiguous_completion_property", node_id=node.id, candidates=sorted(candidates))
        return None

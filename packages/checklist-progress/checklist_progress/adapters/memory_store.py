"""
In-memory Node Store

NodeStorePort 구현 (dict 기반). CLI의 JSON 스냅샷 처리와 테스트에서 사용합니다.

Snapshot format:
    {
      "nodes": [
        {"id": "root", "content": "Tasks", "tags": ["checklist"],
         "properties": {}, "parent": null, "children": ["a", "b"]},
        ...
      ],
      "schema": {"checkbox": [{"ident": ":user.property/done", "type": "checkbox"}]}
    }
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from checklist_progress.domain.models import DocumentNode, NodeId, QueryKind, StoreQuery
from checklist_progress.infra.exceptions import NodeWriteError, SnapshotFormatError, StoreQueryError
from checklist_progress.infra.observability import get_logger

logger = get_logger(__name__)


class InMemoryNodeStore:
    """
    dict 기반 노드 스토어.

    Attributes:
        writes: (node_id, content) pairs in write order
        reads: node ids in read order
    """

    def __init__(
        self,
        nodes: Iterable[DocumentNode] = (),
        schema: Mapping[str, list[dict[str, Any]]] | None = None,
    ):
        self.nodes: dict[NodeId, DocumentNode] = {node.id: node for node in nodes}
        self.schema: dict[str, list[dict[str, Any]]] = {tag: list(rows) for tag, rows in (schema or {}).items()}
        self.writes: list[tuple[NodeId, str]] = []
        self.reads: list[NodeId] = []

    # ========================================================================
    # NodeStorePort
    # ========================================================================

    async def get_node(self, node_id: NodeId, include_children: bool = False) -> DocumentNode | None:
        self.reads.append(node_id)
        node = self.nodes.get(node_id)
        if node is None or not include_children:
            return node
        return self._materialize(node, visited=set())

    async def update_node(self, node_id: NodeId, content: str) -> None:
        node = self.nodes.get(node_id)
        if node is None:
            raise NodeWriteError(node_id, "node not found")
        self.nodes[node_id] = replace(node, content=content)
        self.writes.append((node_id, content))

    async def query(self, query: StoreQuery) -> list[dict[str, Any]]:
        if query.kind is QueryKind.TAGGED_NODES:
            return [{"id": node.id} for node in self.nodes.values() if query.tag in node.tags]
        if query.kind is QueryKind.TAG_PROPERTIES:
            return [dict(row) for row in self.schema.get(query.tag, [])]
        raise StoreQueryError(query, f"unsupported query kind: {query.kind}")

    def _materialize(self, node: DocumentNode, visited: set) -> DocumentNode:
        visited.add(node.id)
        children = []
        for child_id in node.child_ids:
            child = self.nodes.get(child_id)
            if child is None or child_id in visited:
                continue
            children.append(self._materialize(child, visited))
        return replace(node, children=tuple(children))

    # ========================================================================
    # Mutation helpers
    # ========================================================================

    def add(self, node: DocumentNode) -> None:
        self.nodes[node.id] = node

    def set_property(self, node_id: NodeId, key: str, value: Any) -> None:
        node = self.nodes[node_id]
        self.nodes[node_id] = replace(node, properties={**node.properties, key: value})

    def content(self, node_id: NodeId) -> str:
        return self.nodes[node_id].content

    # ========================================================================
    # Snapshot
    # ========================================================================

    @classmethod
    def from_snapshot(cls, data: Any) -> "InMemoryNodeStore":
        if not isinstance(data, Mapping):
            raise SnapshotFormatError("top level must be an object")

        raw_nodes = data.get("nodes", [])
        if not isinstance(raw_nodes, list):
            raise SnapshotFormatError("'nodes' must be a list")

        nodes = [_node_from_dict(raw, index) for index, raw in enumerate(raw_nodes)]

        # Parent links default to the inverse of child lists
        parents: dict[NodeId, NodeId] = {}
        for node in nodes:
            for child_id in node.child_ids:
                parents.setdefault(child_id, node.id)
        nodes = [
            node if node.parent_id is not None or node.id not in parents else replace(node, parent_id=parents[node.id])
            for node in nodes
        ]

        schema = data.get("schema", {})
        if not isinstance(schema, Mapping):
            raise SnapshotFormatError("'schema' must be an object")

        store = cls(nodes, schema=schema)
        logger.debug("snapshot_loaded", nodes=len(store.nodes), schema_tags=len(store.schema))
        return store

    def to_snapshot(self) -> dict[str, Any]:
        nodes = []
        for node in self.nodes.values():
            entry: dict[str, Any] = {
                "id": node.id,
                "content": node.content,
                "tags": list(node.tags),
                "properties": dict(node.properties),
                "parent": node.parent_id,
                "children": list(node.child_ids),
            }
            nodes.append(entry)
        return {"nodes": nodes, "schema": self.schema}


def _node_from_dict(raw: Any, index: int) -> DocumentNode:
    if not isinstance(raw, Mapping) or "id" not in raw:
        raise SnapshotFormatError("node entry must be an object with an 'id'", details={"index": index})

    properties = raw.get("properties") or {}
    if not isinstance(properties, Mapping):
        raise SnapshotFormatError("'properties' must be an object", details={"index": index, "id": raw["id"]})

    return DocumentNode(
        id=raw["id"],
        content=str(raw.get("content", "")),
        tags=tuple(raw.get("tags") or ()),
        properties=dict(properties),
        parent_id=raw.get("parent"),
        child_ids=tuple(raw.get("children") or ()),
    )

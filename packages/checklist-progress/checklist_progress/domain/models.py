"""
Checklist Progress Domain Models

변경 피드 레코드, 문서 노드, 집계 결과, 스토어 쿼리 모델.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

NodeId = int | str


def _is_node_id(value: Any) -> bool:
    # bool is an int subclass but never a node id
    return isinstance(value, (int, str)) and not isinstance(value, bool)


@dataclass(frozen=True)
class ChangeRecord:
    """
    단일 변경 레코드 (datom).

    `(entity_id, attribute, value, tx_id, added)` 형태로 변경 피드가 전달합니다.
    """

    entity_id: NodeId
    attribute: str
    value: Any
    tx_id: int | None = None
    added: bool = True

    @classmethod
    def from_raw(cls, raw: Any) -> "ChangeRecord | None":
        """
        Raw 레코드 → ChangeRecord 변환.

        Accepts an existing ChangeRecord, a mapping with the field names, or a
        positional sequence `[e, a, v, t, added]`. Anything else, including an
        entity id that is not an int or str (lookup refs, maps), is None.
        """
        if isinstance(raw, ChangeRecord):
            return raw

        if isinstance(raw, Mapping):
            entity_id = raw.get("entity_id", raw.get("e"))
            attribute = raw.get("attribute", raw.get("a"))
            if not _is_node_id(entity_id) or not isinstance(attribute, str):
                return None
            return cls(
                entity_id=entity_id,
                attribute=attribute,
                value=raw.get("value", raw.get("v")),
                tx_id=raw.get("tx_id", raw.get("t")),
                added=bool(raw.get("added", True)),
            )

        if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
            if len(raw) < 2 or not _is_node_id(raw[0]) or not isinstance(raw[1], str):
                return None
            return cls(
                entity_id=raw[0],
                attribute=raw[1],
                value=raw[2] if len(raw) > 2 else None,
                tx_id=raw[3] if len(raw) > 3 else None,
                added=bool(raw[4]) if len(raw) > 4 else True,
            )

        return None


@dataclass(frozen=True)
class DocumentNode:
    """
    문서 트리 노드 (block).

    `children` is only populated when the node was read with
    `include_children=True`; otherwise it is None and `child_ids` is the
    source of truth.
    """

    id: NodeId
    content: str = ""
    tags: tuple[str, ...] = ()
    properties: Mapping[str, Any] = field(default_factory=dict)
    parent_id: NodeId | None = None
    child_ids: tuple[NodeId, ...] = ()
    children: tuple["DocumentNode", ...] | None = None

    def boolean_properties(self) -> dict[str, bool]:
        """Boolean-valued properties only."""
        return {key: value for key, value in self.properties.items() if isinstance(value, bool)}


@dataclass(frozen=True)
class AggregateResult:
    """집계 결과 (checked ≤ total)."""

    checked: int = 0
    total: int = 0

    def __post_init__(self):
        if self.checked < 0 or self.total < 0:
            raise ValueError(f"counts must be non-negative: {self.checked}/{self.total}")
        if self.checked > self.total:
            raise ValueError(f"checked exceeds total: {self.checked}/{self.total}")

    def __add__(self, other: "AggregateResult") -> "AggregateResult":
        return AggregateResult(checked=self.checked + other.checked, total=self.total + other.total)

    @property
    def is_empty(self) -> bool:
        return self.total == 0


class QueryKind(Enum):
    """스토어 쿼리 유형."""

    TAGGED_NODES = "tagged_nodes"  # rows: {"id": ...}
    TAG_PROPERTIES = "tag_properties"  # rows: {"ident": ..., "type": ...}


@dataclass(frozen=True)
class StoreQuery:
    """Declarative store query pattern."""

    kind: QueryKind
    tag: str

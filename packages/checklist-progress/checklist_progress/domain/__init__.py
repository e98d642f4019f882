from .models import AggregateResult, ChangeRecord, DocumentNode, NodeId, QueryKind, StoreQuery

__all__ = [
    "AggregateResult",
    "ChangeRecord",
    "DocumentNode",
    "NodeId",
    "QueryKind",
    "StoreQuery",
]

"""
Checklist Progress Exceptions

Exception hierarchy for the node store, snapshot loading and host bootstrap.
Pipeline components catch these at their boundary and log them; only
BootstrapError is ever surfaced to the end user.
"""

from typing import Any

# ============================================================================
# Base Exception
# ============================================================================


class ProgressException(Exception):
    """
    Base exception for all checklist progress errors.

    Attributes:
        message: Human-readable error message
        details: Additional context (dict)
        retryable: Whether the operation can be retried
        component: Which component failed
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        component: str = "unknown",
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.retryable = retryable
        self.component = component

    def __str__(self) -> str:
        base = f"[{self.component}] {self.message}"
        if self.details:
            base += f" | details={self.details}"
        return base


# ============================================================================
# Node Store Exceptions
# ============================================================================


class NodeStoreError(ProgressException):
    """Base exception for node store errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None, retryable: bool = False):
        super().__init__(message, details, retryable, component="node_store")


class NodeLookupError(NodeStoreError):
    """Reading a node failed (distinct from "node does not exist", which is None)."""

    def __init__(self, node_id: Any, cause: Exception | str):
        super().__init__(
            f"Failed to read node: {node_id}",
            details={"node_id": node_id, "cause": str(cause)},
        )
        self.node_id = node_id


class NodeWriteError(NodeStoreError):
    """Rewriting a node's content failed."""

    def __init__(self, node_id: Any, cause: Exception | str):
        super().__init__(
            f"Failed to update node: {node_id}",
            details={"node_id": node_id, "cause": str(cause)},
        )
        self.node_id = node_id


class StoreQueryError(NodeStoreError):
    """Declarative store query failed."""

    def __init__(self, query: Any, cause: Exception | str):
        super().__init__(
            "Store query failed",
            details={"query": str(query)[:200], "cause": str(cause)},
        )


# ============================================================================
# Snapshot / Bootstrap Exceptions
# ============================================================================


class SnapshotFormatError(ProgressException):
    """Document snapshot is not in the expected shape."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None):
        super().__init__(f"Invalid document snapshot: {reason}", details, component="snapshot")


class BootstrapError(ProgressException):
    """The host cannot supply a change feed or node store."""

    def __init__(self, missing: str):
        super().__init__(
            f"Host does not provide {missing}",
            details={
                "missing": missing,
                "suggestion": "Automatic progress updates are disabled; manual recompute still works.",
            },
            component="bootstrap",
        )
        self.missing = missing


__all__ = [
    "ProgressException",
    "NodeStoreError",
    "NodeLookupError",
    "NodeWriteError",
    "StoreQueryError",
    "SnapshotFormatError",
    "BootstrapError",
]

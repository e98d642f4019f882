"""
Checklist Progress Ports

코어가 소비하는 외부 협력자의 포트 인터페이스 (Protocol 기반).

- NodeStorePort: 문서 트리 읽기/쓰기 + 선언적 쿼리
- Timer / TimerHandle: 디바운스 타이머 (테스트에서 교체 가능)
- ChangeFeedPort: 호스트 변경 피드 구독
- NotifierPort: 사용자에게 보이는 경고 (bootstrap 실패 전용)
"""

from abc import abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

from checklist_progress.domain.models import DocumentNode, NodeId, StoreQuery


@runtime_checkable
class NodeStorePort(Protocol):
    """
    Document node store.

    Implementations return None for a node that does not exist and raise
    NodeStoreError subclasses for genuine lookup failures.
    """

    @abstractmethod
    async def get_node(self, node_id: NodeId, include_children: bool = False) -> DocumentNode | None:
        """
        Read a node.

        Args:
            node_id: Node identifier
            include_children: Materialise the full descendant tree in `children`

        Returns:
            DocumentNode or None if not found
        """
        ...

    @abstractmethod
    async def update_node(self, node_id: NodeId, content: str) -> None:
        """Rewrite a node's text content."""
        ...

    @abstractmethod
    async def query(self, query: StoreQuery) -> list[dict[str, Any]]:
        """
        Run a declarative query.

        Returns:
            Rows as dicts (shape depends on query.kind)
        """
        ...


class TimerHandle(Protocol):
    """Cancellable scheduled callback."""

    def cancel(self) -> None:
        """Cancel if not yet fired. No-op afterwards."""
        ...


class Timer(Protocol):
    """Delayed-execution abstraction used by the debounce scheduler."""

    def schedule(self, delay_seconds: float, callback: Callable[[], Awaitable[None]]) -> TimerHandle:
        ...


class ChangeFeedPort(Protocol):
    """Host change feed."""

    def subscribe(self, callback: Callable[[Any], Awaitable[None]]) -> None:
        ...


class NotifierPort(Protocol):
    """User-visible messages."""

    def show_message(self, message: str, level: str = "info") -> None:
        ...

from .memory_store import InMemoryNodeStore

__all__ = ["InMemoryNodeStore"]

from .adapter import InMemoryAdapter

__all__ = ["InMemoryAdapter"]

"""Content store backends for HeartSpace user content."""
from .engine import ContentStore, InMemoryContentStore, RedisContentStore, create_store

__all__ = ["ContentStore", "InMemoryContentStore", "RedisContentStore", "create_store"]

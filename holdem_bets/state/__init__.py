"""State management module."""
from .store import StateStore
from .memory_store import MemoryStore
from .redis_client import RedisClient
from .redis_store import RedisStore
from .locks import LocalLockManager, RedisLockManager

__all__ = [
    "StateStore",
    "MemoryStore",
    "RedisClient",
    "RedisStore",
    "LocalLockManager",
    "RedisLockManager",
]

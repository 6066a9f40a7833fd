"""Per-game mutual exclusion."""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from holdem_bets.config import config
from holdem_bets.state.redis_client import RedisClient, redis_client
from holdem_bets.utils.logger import get_logger

logger = get_logger(__name__)


class LocalLockManager:
    """One asyncio lock per game, for a single-process server."""

    def __init__(self):
        self._locks: dict[int, asyncio.Lock] = {}

    @asynccontextmanager
    async def hold(self, game_id: int) -> AsyncIterator[None]:
        """Serialize work on one game."""
        lock = self._locks.setdefault(game_id, asyncio.Lock())
        async with lock:
            yield


class RedisLockManager:
    """Distributed per-game locks, for servers sharing one Redis."""

    def __init__(self, client: Optional[RedisClient] = None, timeout: Optional[float] = None):
        self.client = client or redis_client
        self.timeout = timeout if timeout is not None else config.lock_timeout_seconds

    @asynccontextmanager
    async def hold(self, game_id: int) -> AsyncIterator[None]:
        """Serialize work on one game across processes."""
        async with self.client.lock(f"lock:game:{game_id}", timeout=self.timeout):
            logger.debug(f"Acquired lock for game {game_id}")
            yield

"""
Redis lock that keeps two scheduled runs from writing the same report.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import LockError

from .config import AuditConfig
from .core.errors import LockUnavailableError

logger = logging.getLogger(__name__)


class RunLock:
    """
    Неблокирующий redis lock на время запуска.

    Usage:
        async with RunLock(client, "ontology_audit:report:lock", 3600):
            await runner.run()
    """

    def __init__(self, client, name: str, timeout_seconds: float, owns_client: bool = False):
        self.client = client
        self.name = name
        self.timeout_seconds = timeout_seconds
        self._owns_client = owns_client
        self._lock = None

    @classmethod
    def from_config(cls, config: AuditConfig) -> Optional["RunLock"]:
        """Lock из конфигурации, None если redis URL не задан."""
        if not config.has_redis_url():
            return None
        client = redis.from_url(config.redis_url, decode_responses=True)
        return cls(client, config.lock_name, config.lock_timeout_seconds, owns_client=True)

    async def __aenter__(self) -> "RunLock":
        self._lock = self.client.lock(self.name, timeout=self.timeout_seconds, blocking=False)
        acquired = await self._lock.acquire()
        if not acquired:
            self._lock = None
            await self._close()
            raise LockUnavailableError(f"Lock {self.name} is held by another run")
        logger.info(f"Acquired lock {self.name}")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if self._lock is not None:
                await self._lock.release()
                logger.info(f"Released lock {self.name}")
        except LockError as e:
            logger.warning(f"Lock {self.name} expired before release: {e}")
        finally:
            self._lock = None
            await self._close()

    async def _close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

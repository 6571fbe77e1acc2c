import logging
import redis.asyncio as redis
from typing import Optional

logger = logging.getLogger(__name__)

class RedisCache:
    """Optional read-through cache for code -> url.

    Every method degrades to a no-op when Redis is not configured or
    unreachable; the registry stays the source of truth.
    """

    def __init__(self, url: Optional[str] = None, ttl: int = 86400):
        self.url = url
        self.ttl = ttl
        self.client: Optional[redis.Redis] = None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def connect(self):
        if not self.url:
            return
        self.client = redis.from_url(
            self.url,
            encoding="utf-8",
            decode_responses=True
        )
        try:
            await self.client.ping()
        except redis.RedisError as e:
            logger.warning(f"Redis unavailable at startup, cache disabled: {e}")
            await self.client.aclose()
            self.client = None

    async def close(self):
        if self.client:
            await self.client.aclose()
            self.client = None

    @staticmethod
    def key(code: str) -> str:
        return f"code:{code}"

    async def get(self, code: str) -> Optional[str]:
        if not self.client:
            return None
        try:
            return await self.client.get(self.key(code))
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for {code}: {e}")
            return None

    async def set(self, code: str, url: str):
        if not self.client:
            return
        try:
            await self.client.set(self.key(code), url, ex=self.ttl)
        except redis.RedisError as e:
            logger.warning(f"Cache write failed for {code}: {e}")

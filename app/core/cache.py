# ============================================================================
# FILE: app/core/cache.py
# ============================================================================
import json
from typing import Optional, Any
from redis import asyncio as aioredis
from redis.exceptions import RedisError
from app.config import settings
import logging

logger = logging.getLogger(__name__)

class RedisCache:
    """
    Async Redis JSON cache.
    Every operation degrades to a miss when Redis is unreachable, so callers
    never fail because of the cache.
    """
    
    def __init__(self, url: str = None, client: Optional[aioredis.Redis] = None):
        self.url = url or settings.REDIS_URL
        self.redis_client = client
    
    async def connect(self) -> None:
        client = aioredis.from_url(
            self.url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            logger.warning(f"Redis connection failed: {e}. Caching disabled.")
            await client.aclose()
            self.redis_client = None
            return
        self.redis_client = client
        logger.info("Redis connection established")
    
    async def close(self) -> None:
        if self.redis_client is not None:
            await self.redis_client.aclose()
            self.redis_client = None
    
    async def set_cache(self, key: str, value: Any, expire: int = None) -> bool:
        """Store value as JSON, with a TTL in seconds when expire is given"""
        if self.redis_client is None:
            return False
        
        try:
            await self.redis_client.set(key, json.dumps(value), ex=expire or None)
        except (RedisError, OSError, TypeError) as e:
            logger.error(f"Cache write failed for {key}: {e}")
            return False
        return True
    
    async def get_cache(self, key: str) -> Optional[Any]:
        """Decoded JSON value for key, or None on a miss or any cache failure"""
        if self.redis_client is None:
            return None
        
        try:
            raw = await self.redis_client.get(key)
        except (RedisError, OSError) as e:
            logger.error(f"Cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            return None

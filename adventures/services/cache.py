# adventures/services/cache.py

"""
Необязательный кэш первой страницы ленты поверх Redis.

Кэш - не источник истины: без REDIS_URL он выключен, а при недоступном
Redis операции логируются и ведут себя как промах/no-op. Ошибка кэша
никогда не должна ломать запрос, который уже записал данные в БД.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from adventures.config import settings

logger = logging.getLogger(__name__)


class PostListCache:
    def __init__(self, url: Optional[str]):
        self._url = url
        self._client: Optional[redis.Redis] = None

    async def connect(self):
        if self._client is None and self._url:
            self._client = redis.from_url(
                self._url,
                encoding="utf-8",
                decode_responses=True,
            )

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(self, key: str) -> Optional[Any]:
        """Значение по ключу или None (нет ключа, нет Redis, Redis упал)"""
        if self._client is None:
            return None
        try:
            raw_data = await self._client.get(key)
        except RedisError as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            return None
        return json.loads(raw_data) if raw_data is not None else None

    async def set(self, key: str, value: Any, ttl: int = 300) -> None:
        if self._client is None:
            return
        try:
            await self._client.setex(key, ttl, json.dumps(value, default=str))
        except RedisError as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)

    async def delete(self, key: str) -> None:
        if self._client is None:
            return
        try:
            await self._client.delete(key)
        except RedisError as exc:
            # Запись остается до истечения ttl
            logger.warning("Cache invalidation failed for %s: %s", key, exc)


cache = PostListCache(settings.REDIS_URL)

"""검색어 변형 결과 캐시

키: (필드 or ANY) + '|' + 정규화된 원문, 값: 채택된 변형 리스트, TTL 10분.
- 만료 항목은 읽을 때 지연 삭제합니다 (백그라운드 정리 없음).
- 전체 항목 수가 상한을 넘으면 전부 비웁니다 (LRU 아님).
"""

from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from redis import Redis

from src.core.exceptions import CacheConnectionException
from src.core.logging import logger
from src.utils.hash_utils import generate_redis_variant_key


class VariantCache(Protocol):
    """변형 캐시 인터페이스 - 실패는 미스로 취급되어야 함"""

    def get(self, key: str) -> Optional[list[str]]:
        ...

    def set(self, key: str, value: list[str]) -> None:
        ...

    def clear(self) -> None:
        ...


@dataclass(frozen=True)
class CacheEntry:
    value: tuple[str, ...]
    expires_at: float


class InMemoryVariantCache:
    """프로세스 내 캐시 (동시 요청에서 안전)"""

    def __init__(
        self,
        ttl_seconds: float = 600,
        max_size: int = 5000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[list[str]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() > entry.expires_at:
                self._entries.pop(key, None)
                return None
            return list(entry.value)

    def set(self, key: str, value: list[str]) -> None:
        if value is None:
            return
        with self._lock:
            if len(self._entries) >= self.max_size:
                logger.info(f"[VariantCache] size limit reached ({len(self._entries)}), clearing")
                self._entries.clear()
            self._entries[key] = CacheEntry(
                value=tuple(value),
                expires_at=self._clock() + self.ttl_seconds,
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisVariantCache:
    """Redis 공유 캐시 (여러 워커 프로세스가 같은 변형 결과를 재사용)

    TTL은 SETEX로 Redis가 관리하고, 상한은 키 인덱스 집합 크기로 판단합니다.
    """

    INDEX_KEY = "recall:variants:index"

    def __init__(self, redis_url: str, ttl_seconds: int = 600, max_size: int = 5000):
        self.ttl_seconds = int(ttl_seconds)
        self.max_size = max_size
        try:
            self.redis_client = Redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            self.redis_client.ping()
            logger.info("[VariantCache] Redis connection established")
        except Exception as e:
            logger.error(f"[VariantCache] Failed to connect to Redis: {e}")
            raise CacheConnectionException(str(e)) from e

    def get(self, key: str) -> Optional[list[str]]:
        try:
            cached = self.redis_client.get(generate_redis_variant_key(key))
            if not cached:
                return None
            data = json.loads(cached)
            if not isinstance(data, list):
                return None
            return [str(item) for item in data]
        except Exception as e:
            logger.warning(f"[VariantCache] Redis read failed, treating as miss: {type(e).__name__}: {e}")
            return None

    def set(self, key: str, value: list[str]) -> None:
        if value is None:
            return
        redis_key = generate_redis_variant_key(key)
        try:
            if self.redis_client.scard(self.INDEX_KEY) >= self.max_size:
                logger.info("[VariantCache] size limit reached, clearing")
                self.clear()
            pipe = self.redis_client.pipeline()
            pipe.setex(redis_key, self.ttl_seconds, json.dumps(value, ensure_ascii=False))
            pipe.sadd(self.INDEX_KEY, redis_key)
            pipe.execute()
        except Exception as e:
            logger.warning(f"[VariantCache] Redis write failed: {type(e).__name__}: {e}")

    def clear(self) -> None:
        try:
            keys = list(self.redis_client.smembers(self.INDEX_KEY))
            if keys:
                self.redis_client.delete(*keys)
            self.redis_client.delete(self.INDEX_KEY)
        except Exception as e:
            logger.warning(f"[VariantCache] Redis clear failed: {type(e).__name__}: {e}")

    def health_check(self) -> bool:
        try:
            self.redis_client.ping()
            return True
        except Exception:
            return False


def create_variant_cache(redis_url: str, ttl_seconds: int, max_size: int) -> VariantCache:
    """설정에 맞는 캐시 생성 (Redis 연결 실패 시 메모리 캐시)"""
    if redis_url:
        try:
            return RedisVariantCache(redis_url, ttl_seconds=ttl_seconds, max_size=max_size)
        except CacheConnectionException as e:
            logger.warning(f"[VariantCache] falling back to in-memory cache: {e}")
    return InMemoryVariantCache(ttl_seconds=ttl_seconds, max_size=max_size)

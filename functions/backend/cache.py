"""
Translation cache abstraction.

Supports a process-wide in-memory map for tests/local runs and a
Redis-backed implementation shared between service instances.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Callable, Optional, Protocol

import redis
from redis import exceptions as redis_exceptions

from shared.api import CachedTranslation
from shared.constants import (
    TRANSLATION_CACHE_MAX_ENTRIES,
    TRANSLATION_CACHE_TTL_SECONDS,
)

logger = logging.getLogger(__name__)


class TranslationCache(Protocol):
    """Minimal cache interface keyed by `text:targetLanguage`."""

    def get(self, key: str) -> Optional[CachedTranslation]:
        ...

    def set(self, key: str, value: CachedTranslation) -> None:
        ...


@dataclass
class InMemoryTranslationCache:
    """
    Single TTL map. Expired entries are only swept on insert once the map
    grows beyond `max_entries`.
    """

    ttl_seconds: float = TRANSLATION_CACHE_TTL_SECONDS
    max_entries: int = TRANSLATION_CACHE_MAX_ENTRIES
    clock: Callable[[], float] = time.time
    entries: dict[str, CachedTranslation] = field(default_factory=dict)

    def _is_fresh(self, entry: CachedTranslation) -> bool:
        return self.clock() - entry.timestamp < self.ttl_seconds

    def get(self, key: str) -> Optional[CachedTranslation]:
        entry = self.entries.get(key)
        if entry and self._is_fresh(entry):
            return entry
        return None

    def set(self, key: str, value: CachedTranslation) -> None:
        self.entries[key] = value
        if len(self.entries) > self.max_entries:
            self._sweep()

    def _sweep(self) -> None:
        expired = [key for key, entry in self.entries.items() if not self._is_fresh(entry)]
        for key in expired:
            del self.entries[key]
        if expired:
            logger.info("Swept %d expired translations", len(expired))


@dataclass
class RedisTranslationCache:
    """Redis-backed cache storing JSON values with a SETEX expiry."""

    url: str
    key_prefix: str = "needyou:translations:"
    ttl_seconds: int = TRANSLATION_CACHE_TTL_SECONDS

    def __post_init__(self):
        self.client = redis.Redis.from_url(self.url)

    def get(self, key: str) -> Optional[CachedTranslation]:
        try:
            raw = self.client.get(self.key_prefix + key)
        except redis_exceptions.ConnectionError:
            # Managed Redis drops idle connections. Treat as a miss.
            logger.warning("Redis connection lost, reconnecting")
            self.client = redis.Redis.from_url(self.url)
            return None
        if raw is None:
            return None
        return CachedTranslation(**json.loads(raw))

    def set(self, key: str, value: CachedTranslation) -> None:
        try:
            self.client.setex(
                self.key_prefix + key, self.ttl_seconds, json.dumps(asdict(value))
            )
        except redis_exceptions.ConnectionError:
            logger.warning("Redis connection lost, translation not cached")
            self.client = redis.Redis.from_url(self.url)

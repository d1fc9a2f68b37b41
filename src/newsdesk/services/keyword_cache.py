"""Time-boxed cache of moderation keyword rules.

The cache owns a single immutable ``KeywordSnapshot``. Readers always receive a
complete snapshot: refreshes build a new one and swap the reference.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import redis

from newsdesk.core.settings import settings
from newsdesk.models.keyword import (
    KEYWORD_ACTION_BLOCK,
    KEYWORD_ACTION_FLAG,
    KEYWORD_ACTION_REPLACE,
)
from newsdesk.repositories.keyword_repo import KeywordRule, load_keywords_from_database
from newsdesk.services.errors import KeywordStoreUnavailableError

logger = logging.getLogger(__name__)

KeywordLoader = Callable[[], Iterable[KeywordRule]]


@dataclass(frozen=True)
class KeywordSnapshot:
    """Point-in-time view of the active keyword rules.

    All keywords are lowercased; matching is case-insensitive.
    """

    blocked: frozenset[str] = frozenset()
    flagged: frozenset[str] = frozenset()
    replacements: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    loaded_at: float = 0.0
    generation: int = 0

    @classmethod
    def from_rules(
        cls,
        rules: Iterable[KeywordRule],
        *,
        loaded_at: float = 0.0,
        generation: int = 0,
    ) -> KeywordSnapshot:
        """Build a snapshot; a later rule for the same keyword replaces an earlier one."""
        latest: dict[str, KeywordRule] = {}
        for rule in rules:
            keyword = rule.keyword.strip().lower()
            if keyword:
                latest[keyword] = rule

        blocked: set[str] = set()
        flagged: set[str] = set()
        replacements: dict[str, str] = {}
        for keyword, rule in latest.items():
            action = (rule.action or "").lower()
            if action == KEYWORD_ACTION_BLOCK:
                blocked.add(keyword)
            elif action == KEYWORD_ACTION_FLAG:
                flagged.add(keyword)
            elif action == KEYWORD_ACTION_REPLACE and rule.replacement:
                replacements[keyword] = rule.replacement

        return cls(
            blocked=frozenset(blocked),
            flagged=frozenset(flagged),
            replacements=MappingProxyType(replacements),
            loaded_at=loaded_at,
            generation=generation,
        )

    @property
    def is_empty(self) -> bool:
        return not (self.blocked or self.flagged or self.replacements)


class KeywordCache:
    """Lazily refreshed keyword snapshot with manual invalidation.

    Args:
        loader: Callable returning the active rules from the keyword store.
        ttl_seconds: Maximum snapshot age before the next read reloads it.
        fail_open: Moderate with an empty snapshot when the store fails,
            instead of raising ``KeywordStoreUnavailableError``.
        clock: Monotonic time source, injectable for tests.
        redis_client: Optional Redis connection carrying a generation counter
            so an invalidation in one worker reaches every worker.
        redis_key: Key holding the generation counter.
    """

    def __init__(
        self,
        loader: KeywordLoader,
        *,
        ttl_seconds: float = 300.0,
        fail_open: bool = True,
        clock: Callable[[], float] = time.monotonic,
        redis_client: Any | None = None,
        redis_key: str = "newsdesk:keywords:generation",
    ) -> None:
        self._loader = loader
        self._ttl_seconds = ttl_seconds
        self._fail_open = fail_open
        self._clock = clock
        self._redis = redis_client
        self._redis_key = redis_key
        self._snapshot: KeywordSnapshot | None = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get_active_keywords(self) -> KeywordSnapshot:
        """Return the current snapshot, reloading it when absent or expired."""
        generation = self._shared_generation()
        snapshot = self._snapshot
        if snapshot is not None and not self._is_stale(snapshot, generation):
            return snapshot

        with self._lock:
            # Another request may have refreshed while we waited for the lock.
            snapshot = self._snapshot
            if snapshot is not None and not self._is_stale(snapshot, generation):
                return snapshot
            snapshot = self._reload(generation)
            self._snapshot = snapshot
            self._expires_at = self._clock() + self._ttl_seconds
            return snapshot

    def invalidate(self) -> None:
        """Drop the cached snapshot so the next read reloads from the store."""
        with self._lock:
            self._snapshot = None
            self._expires_at = 0.0
        if self._redis is not None:
            try:
                self._redis.incr(self._redis_key)
            except redis.RedisError as exc:
                logger.warning("Could not broadcast keyword cache invalidation: %s", exc)

    def _is_stale(self, snapshot: KeywordSnapshot, generation: int | None) -> bool:
        if self._clock() >= self._expires_at:
            return True
        return generation is not None and generation != snapshot.generation

    def _shared_generation(self) -> int | None:
        if self._redis is None:
            return None
        try:
            value = self._redis.get(self._redis_key)
        except redis.RedisError as exc:
            logger.warning("Keyword cache generation unavailable, using local TTL: %s", exc)
            return None
        return int(value) if value is not None else 0

    def _reload(self, generation: int | None) -> KeywordSnapshot:
        now = self._clock()
        try:
            rules = list(self._loader())
        except Exception as exc:
            if not self._fail_open:
                logger.error("Error loading moderation keywords", exc_info=True)
                raise KeywordStoreUnavailableError("Moderation keywords unavailable") from exc
            logger.error(
                "Error loading moderation keywords; moderating without keyword rules",
                exc_info=True,
            )
            return KeywordSnapshot(loaded_at=now, generation=generation or 0)

        snapshot = KeywordSnapshot.from_rules(rules, loaded_at=now, generation=generation or 0)
        logger.info(
            "Loaded %d blocked, %d flagged, %d replacement keywords",
            len(snapshot.blocked),
            len(snapshot.flagged),
            len(snapshot.replacements),
        )
        return snapshot


def build_keyword_cache() -> KeywordCache:
    """Create a cache wired to the database and the configured tunables."""
    redis_client = None
    if settings.keyword_cache_redis_url:
        redis_client = redis.from_url(settings.keyword_cache_redis_url)
    return KeywordCache(
        load_keywords_from_database,
        ttl_seconds=settings.keyword_cache_seconds,
        fail_open=settings.keyword_store_fail_open,
        redis_client=redis_client,
        redis_key=settings.keyword_cache_redis_key,
    )


class _KeywordCacheSingleton:
    """Singleton wrapper for KeywordCache."""

    _instance: KeywordCache | None = None

    @classmethod
    def get_instance(cls) -> KeywordCache:
        """Get or create the singleton KeywordCache instance."""
        if cls._instance is None:
            cls._instance = build_keyword_cache()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


def get_keyword_cache() -> KeywordCache:
    """Return the process-wide keyword cache."""
    return _KeywordCacheSingleton.get_instance()

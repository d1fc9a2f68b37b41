# tests/test_keyword_cache.py
"""Tests for the keyword snapshot cache."""

from __future__ import annotations

import threading

import pytest
import redis

from newsdesk.repositories.keyword_repo import KeywordRule
from newsdesk.services.errors import KeywordStoreUnavailableError
from newsdesk.services.keyword_cache import KeywordCache, KeywordSnapshot


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingLoader:
    def __init__(self, rules: list[KeywordRule] | None = None) -> None:
        self.rules = list(rules or [])
        self.calls = 0

    def __call__(self) -> list[KeywordRule]:
        self.calls += 1
        return list(self.rules)


class FakeRedis:
    """Minimal stand-in for the two Redis commands the cache uses."""

    def __init__(self) -> None:
        self.values: dict[str, int] = {}

    def get(self, key: str) -> bytes | None:
        value = self.values.get(key)
        return str(value).encode() if value is not None else None

    def incr(self, key: str) -> int:
        self.values[key] = self.values.get(key, 0) + 1
        return self.values[key]


def failing_loader() -> list[KeywordRule]:
    raise ConnectionError("keyword store down")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def loader() -> CountingLoader:
    return CountingLoader(
        [
            KeywordRule("spam", "block"),
            KeywordRule("Scam", "flag"),
            KeywordRule("bad", "replace", "good"),
        ]
    )


def test_snapshot_groups_rules_by_action(loader: CountingLoader, clock: FakeClock) -> None:
    cache = KeywordCache(loader, clock=clock)
    snapshot = cache.get_active_keywords()

    assert snapshot.blocked == frozenset({"spam"})
    assert snapshot.flagged == frozenset({"scam"})
    assert dict(snapshot.replacements) == {"bad": "good"}


def test_reads_within_ttl_share_one_snapshot(loader: CountingLoader, clock: FakeClock) -> None:
    cache = KeywordCache(loader, ttl_seconds=300, clock=clock)

    first = cache.get_active_keywords()
    clock.advance(299)
    second = cache.get_active_keywords()

    assert first is second
    assert loader.calls == 1


def test_snapshot_reloads_after_ttl(loader: CountingLoader, clock: FakeClock) -> None:
    cache = KeywordCache(loader, ttl_seconds=300, clock=clock)
    first = cache.get_active_keywords()

    loader.rules.append(KeywordRule("fraud", "block"))
    clock.advance(300)
    second = cache.get_active_keywords()

    assert second is not first
    assert "fraud" in second.blocked
    assert loader.calls == 2


def test_invalidate_forces_reload(loader: CountingLoader, clock: FakeClock) -> None:
    cache = KeywordCache(loader, clock=clock)
    cache.get_active_keywords()

    loader.rules = [KeywordRule("fraud", "block")]
    cache.invalidate()
    snapshot = cache.get_active_keywords()

    assert snapshot.blocked == frozenset({"fraud"})
    assert loader.calls == 2


def test_snapshot_held_by_reader_is_unchanged_by_reload(
    loader: CountingLoader, clock: FakeClock
) -> None:
    cache = KeywordCache(loader, clock=clock)
    held = cache.get_active_keywords()

    loader.rules = []
    cache.invalidate()
    cache.get_active_keywords()

    assert held.blocked == frozenset({"spam"})
    with pytest.raises(TypeError):
        held.replacements["bad"] = "worse"  # type: ignore[index]


def test_later_rule_for_same_keyword_wins() -> None:
    snapshot = KeywordSnapshot.from_rules(
        [KeywordRule("Darn", "block"), KeywordRule("darn", "replace", "d*rn")]
    )

    assert "darn" not in snapshot.blocked
    assert dict(snapshot.replacements) == {"darn": "d*rn"}


def test_replace_rule_without_replacement_is_ignored() -> None:
    snapshot = KeywordSnapshot.from_rules(
        [KeywordRule("oops", "replace"), KeywordRule("x", "shout")]
    )

    assert snapshot.is_empty


def test_fail_open_returns_empty_snapshot(clock: FakeClock) -> None:
    cache = KeywordCache(failing_loader, fail_open=True, clock=clock)

    snapshot = cache.get_active_keywords()

    assert snapshot.is_empty


def test_fail_closed_raises(clock: FakeClock) -> None:
    cache = KeywordCache(failing_loader, fail_open=False, clock=clock)

    with pytest.raises(KeywordStoreUnavailableError):
        cache.get_active_keywords()


def test_store_recovers_after_failure(clock: FakeClock) -> None:
    rules: list[KeywordRule] = []
    healthy = {"up": False}

    def flaky_loader() -> list[KeywordRule]:
        if not healthy["up"]:
            raise ConnectionError("keyword store down")
        return rules

    cache = KeywordCache(flaky_loader, ttl_seconds=60, clock=clock)
    assert cache.get_active_keywords().is_empty

    healthy["up"] = True
    rules.append(KeywordRule("spam", "block"))
    clock.advance(60)

    assert cache.get_active_keywords().blocked == frozenset({"spam"})


def test_shared_generation_invalidates_other_workers(
    loader: CountingLoader, clock: FakeClock
) -> None:
    shared = FakeRedis()
    worker_a = KeywordCache(loader, clock=clock, redis_client=shared, redis_key="kw")
    worker_b = KeywordCache(loader, clock=clock, redis_client=shared, redis_key="kw")
    worker_a.get_active_keywords()
    stale = worker_b.get_active_keywords()

    loader.rules = [KeywordRule("fraud", "flag")]
    worker_a.invalidate()

    fresh = worker_b.get_active_keywords()
    assert fresh is not stale
    assert fresh.flagged == frozenset({"fraud"})
    assert fresh.generation == 1


def test_redis_outage_falls_back_to_ttl(
    loader: CountingLoader, clock: FakeClock, mocker
) -> None:
    broken = mocker.MagicMock()
    broken.get.side_effect = redis.ConnectionError("no redis")
    broken.incr.side_effect = redis.ConnectionError("no redis")
    cache = KeywordCache(loader, ttl_seconds=300, clock=clock, redis_client=broken)

    first = cache.get_active_keywords()
    assert cache.get_active_keywords() is first

    cache.invalidate()
    assert cache.get_active_keywords() is not first
    assert loader.calls == 2


def test_concurrent_readers_load_once(clock: FakeClock) -> None:
    started = threading.Event()
    release = threading.Event()
    calls: list[int] = []

    def slow_loader() -> list[KeywordRule]:
        calls.append(1)
        started.set()
        release.wait(timeout=5)
        return [KeywordRule("spam", "block")]

    cache = KeywordCache(slow_loader, clock=clock)
    results: list[KeywordSnapshot] = []
    threads = [
        threading.Thread(target=lambda: results.append(cache.get_active_keywords()))
        for _ in range(5)
    ]
    for thread in threads:
        thread.start()
    started.wait(timeout=5)
    release.set()
    for thread in threads:
        thread.join(timeout=5)

    assert len(calls) == 1
    assert len(results) == 5
    assert all(result is results[0] for result in results)

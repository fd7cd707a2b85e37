"""Unit tests for the in-memory TTLCache."""

import threading

import pytest

from github_stats.schemas.stats import RepoStats, StatsResult
from github_stats.utils.ttl_cache import ReadWriteLock, TTLCache

from conftest import FakeClock


def test_set_then_get_returns_value(fake_clock: FakeClock) -> None:
    cache = TTLCache(clock=fake_clock)
    cache.set("alice", {"followers": 10}, ttl=60)

    assert cache.get("alice") == ({"followers": 10}, True)


def test_missing_key_is_not_found() -> None:
    cache = TTLCache()

    assert cache.get("nobody") == (None, False)


def test_entry_expires_after_ttl(fake_clock: FakeClock) -> None:
    cache = TTLCache(clock=fake_clock)
    cache.set("alice", "v", ttl=5)

    fake_clock.advance(4)
    assert cache.get("alice") == ("v", True)

    fake_clock.advance(1)
    assert cache.get("alice") == (None, False)


def test_repeated_gets_on_expired_key_do_not_remove_it(fake_clock: FakeClock) -> None:
    cache = TTLCache(clock=fake_clock)
    cache.set("alice", "v", ttl=1)
    fake_clock.advance(2)

    assert cache.get("alice") == (None, False)
    assert cache.get("alice") == (None, False)
    assert cache.stats()["entries"] == 1
    assert cache.stats()["live_entries"] == 0


def test_set_drops_expired_entries(fake_clock: FakeClock) -> None:
    cache = TTLCache(clock=fake_clock)
    cache.set("old", "v", ttl=1)
    fake_clock.advance(2)

    cache.set("new", "v", ttl=10)

    assert cache.stats()["entries"] == 1


def test_keys_are_isolated(fake_clock: FakeClock) -> None:
    cache = TTLCache(clock=fake_clock)
    cache.set("k1", "one", ttl=60)
    cache.set("k2", "two", ttl=60)

    cache.set("k1", "uno", ttl=60)

    assert cache.get("k1") == ("uno", True)
    assert cache.get("k2") == ("two", True)


def test_overwrite_resets_expiration(fake_clock: FakeClock) -> None:
    cache = TTLCache(clock=fake_clock)
    cache.set("alice", "first", ttl=5)
    fake_clock.advance(4)

    cache.set("alice", "second", ttl=5)
    fake_clock.advance(4)

    assert cache.get("alice") == ("second", True)


def test_callers_receive_copies() -> None:
    cache = TTLCache()
    original = StatsResult(username="alice", repositories=[RepoStats(name="r1", stars=1)])
    cache.set("alice", original, ttl=60)

    original.repositories.append(RepoStats(name="r2"))
    first, _ = cache.get("alice")
    first.repositories[0].stars = 999

    second, found = cache.get("alice")
    assert found is True
    assert [r.name for r in second.repositories] == ["r1"]
    assert second.repositories[0].stars == 1


def test_max_entries_evicts_soonest_expiring(fake_clock: FakeClock) -> None:
    cache = TTLCache(max_entries=2, clock=fake_clock)
    cache.set("short", 1, ttl=10)
    cache.set("long", 2, ttl=100)
    cache.set("newest", 3, ttl=50)

    assert cache.get("short") == (None, False)
    assert cache.get("long") == (2, True)
    assert cache.get("newest") == (3, True)


def test_invalid_max_entries() -> None:
    with pytest.raises(ValueError):
        TTLCache(max_entries=0)


def test_clear_removes_everything() -> None:
    cache = TTLCache()
    cache.set("a", 1, ttl=60)
    cache.set("b", 2, ttl=60)

    cache.clear()

    assert cache.stats()["entries"] == 0
    assert cache.get("a") == (None, False)


def test_thread_safety_under_concurrent_sets_and_gets() -> None:
    cache = TTLCache()
    total_keys = 50
    errors: list[str] = []

    def _writer(idx: int) -> None:
        cache.set(f"k-{idx}", {"v": idx}, ttl=30)

    def _reader(idx: int) -> None:
        value, found = cache.get(f"k-{idx}")
        if found and value != {"v": idx}:
            errors.append(f"k-{idx}")

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(total_keys)]
    threads += [threading.Thread(target=_reader, args=(i,)) for i in range(total_keys)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert cache.stats()["entries"] == total_keys
    assert cache.get("k-0") == ({"v": 0}, True)
    assert cache.get("k-49") == ({"v": 49}, True)


def test_read_lock_allows_concurrent_readers() -> None:
    lock = ReadWriteLock()
    both_inside = threading.Barrier(2, timeout=2)

    def _reader() -> None:
        with lock.read():
            # Would raise BrokenBarrierError if readers excluded each other
            both_inside.wait()

    threads = [threading.Thread(target=_reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not both_inside.broken


def test_write_lock_excludes_readers() -> None:
    lock = ReadWriteLock()
    events: list[str] = []
    writer_inside = threading.Event()
    release_writer = threading.Event()

    def _writer() -> None:
        with lock.write():
            writer_inside.set()
            release_writer.wait(timeout=2)
            events.append("writer_done")

    def _reader() -> None:
        with lock.read():
            events.append("reader")

    writer = threading.Thread(target=_writer)
    writer.start()
    writer_inside.wait(timeout=2)

    reader = threading.Thread(target=_reader)
    reader.start()
    reader.join(timeout=0.1)
    assert events == []

    release_writer.set()
    writer.join()
    reader.join()

    assert events == ["writer_done", "reader"]

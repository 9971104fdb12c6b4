import threading
import time

import pytest

from pico_factories import OnceCache


def test_computes_once_and_caches():
    cache = OnceCache()
    calls = []
    assert cache.get_or_compute("a", lambda k: calls.append(k) or k.upper()) == "A"
    assert cache.get_or_compute("a", lambda k: calls.append(k) or "other") == "A"
    assert calls == ["a"]
    assert "a" in cache
    assert len(cache) == 1
    assert cache.get("a") == "A"
    assert cache.get("b") is None


def test_failures_are_not_cached():
    cache = OnceCache()

    def fail(key):
        raise RuntimeError("scan failed")

    with pytest.raises(RuntimeError):
        cache.get_or_compute("a", fail)
    assert "a" not in cache
    assert cache.get_or_compute("a", lambda k: 1) == 1


def test_clear_drops_entries():
    cache = OnceCache()
    cache.get_or_compute("a", lambda k: 1)
    cache.clear()
    assert len(cache) == 0
    assert cache.get_or_compute("a", lambda k: 2) == 2


def test_concurrent_first_access_computes_once():
    cache = OnceCache()
    calls = []
    lock = threading.Lock()
    barrier = threading.Barrier(8)
    results = []

    def compute(key):
        with lock:
            calls.append(key)
        time.sleep(0.05)
        return object()

    def worker():
        barrier.wait()
        results.append(cache.get_or_compute("ctx", compute))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert calls == ["ctx"]
    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_different_keys_do_not_block_each_other():
    cache = OnceCache()
    started = threading.Event()
    release = threading.Event()

    def slow(key):
        started.set()
        release.wait(5)
        return "slow"

    t = threading.Thread(target=lambda: cache.get_or_compute("slow", slow))
    t.start()
    assert started.wait(5)
    try:
        assert cache.get_or_compute("fast", lambda k: "fast") == "fast"
    finally:
        release.set()
        t.join()
    assert cache.get("slow") == "slow"


def test_failed_computation_releases_its_key_lock():
    cache = OnceCache()

    def fail(key):
        raise RuntimeError("scan failed")

    for _ in range(3):
        with pytest.raises(RuntimeError):
            cache.get_or_compute("a", fail)
    assert cache._pending == {}

    cache.get_or_compute("b", lambda k: 1)
    assert cache._pending == {}


def test_waiters_retry_after_failed_computation():
    cache = OnceCache()
    started = threading.Event()
    release = threading.Event()
    calls = []
    errors = []
    results = []

    def compute(key):
        calls.append(key)
        if len(calls) == 1:
            started.set()
            release.wait(5)
            raise RuntimeError("first attempt failed")
        return "ok"

    def first():
        try:
            cache.get_or_compute("k", compute)
        except RuntimeError as e:
            errors.append(e)

    t1 = threading.Thread(target=first)
    t1.start()
    assert started.wait(5)
    t2 = threading.Thread(target=lambda: results.append(cache.get_or_compute("k", compute)))
    t2.start()
    release.set()
    t1.join()
    t2.join()

    assert len(errors) == 1
    assert results == ["ok"]
    assert calls == ["k", "k"]
    assert cache._pending == {}

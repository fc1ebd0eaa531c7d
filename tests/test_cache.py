import time

import packages.config as config
from apps.api.cache import clear, get_or_set, size
from packages.metrics import reset, snapshot


def _counter():
    counter = {"n": 0}

    def compute():
        counter["n"] += 1
        return counter["n"]

    return compute


def test_cache_ttl():
    clear()
    compute = _counter()

    first = get_or_set("key", 1, None, compute)
    second = get_or_set("key", 1, None, compute)
    assert first == second == 1

    time.sleep(1.1)
    third = get_or_set("key", 1, None, compute)
    assert third == 2


def test_cache_without_ttl_never_expires():
    clear()
    compute = _counter()
    assert get_or_set("past", None, "v1", compute) == 1
    assert get_or_set("past", None, "v1", compute) == 1


def test_version_change_invalidates():
    clear()
    compute = _counter()
    assert get_or_set("month", None, "db:1", compute) == 1
    assert get_or_set("month", None, "db:2", compute) == 2
    assert get_or_set("month", None, "db:2", compute) == 2


def test_cache_is_bounded_lru(monkeypatch):
    clear()
    reset()
    monkeypatch.setattr(config, "CACHE_MAX_ENTRIES", 2)
    compute = _counter()
    get_or_set("a", None, None, compute)
    get_or_set("b", None, None, compute)
    get_or_set("a", None, None, compute)  # refresh "a"
    get_or_set("c", None, None, compute)
    assert size() == 2

    before = compute()
    assert get_or_set("a", None, None, compute) == 1
    assert get_or_set("b", None, None, compute) == before + 1

    counters, _ = snapshot()
    assert counters["cache_evictions_total"] >= 1
    assert counters["cache_hits_total"] >= 2
    clear()

from kural.cache import CacheEntry, RosterCache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_entry_staleness():
    entry = CacheEntry(data=[1], fetched_at=100.0)
    assert entry.is_stale(now=399.0, ttl_sec=300) is False
    assert entry.is_stale(now=400.0, ttl_sec=300) is True


def test_get_within_ttl_then_expire():
    clock = FakeClock()
    cache = RosterCache(ttl_sec=300, clock=clock)
    cache.put(("119", "5"), ["v1", "v2"])

    clock.now += 299
    assert cache.get(("119", "5")) == ["v1", "v2"]
    assert ("119", "5") in cache

    clock.now += 1
    assert cache.get(("119", "5")) is None
    assert cache.is_stale(("119", "5")) is True


def test_stale_entries_are_evicted_on_get():
    clock = FakeClock()
    cache = RosterCache(ttl_sec=300, clock=clock)
    cache.put(("119", "5"), ["v1"])
    cache.put(("119", "6"), ["v2"])
    clock.now += 100
    cache.put(("119", "7"), ["v3"])
    assert len(cache) == 3

    clock.now += 200
    assert cache.get(("119", "5")) is None
    assert len(cache) == 2
    assert cache.get(("119", "7")) == ["v3"]


def test_explicit_now_overrides_clock():
    cache = RosterCache(ttl_sec=60, clock=FakeClock(0.0))
    cache.put("booth", "data", now=500.0)
    assert cache.get("booth", now=530.0) == "data"
    assert cache.get("booth", now=560.0) is None


def test_keys_are_independent_and_invalidate():
    cache = RosterCache(clock=FakeClock())
    cache.put(("1", "a"), "A")
    cache.put(("1", "b"), "B")
    assert len(cache) == 2

    cache.invalidate(("1", "a"))
    assert cache.get(("1", "a")) is None
    assert cache.get(("1", "b")) == "B"

    cache.invalidate()
    assert len(cache) == 0
    # Unknown keys are ignored
    cache.invalidate(("9", "z"))


def test_missing_key_is_stale():
    assert RosterCache().is_stale("nothing") is True

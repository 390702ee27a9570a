"""Fixed-window limiter with an injected clock, plus the 429 path through the API."""
import pytest

from nuclear.ratelimit import FixedWindowRateLimiter, MemoryRateLimitStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_limit_then_reset():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(MemoryRateLimitStore(clock=clock), limit=2, window_seconds=60)
    assert limiter.hit("u").allowed
    assert limiter.hit("u").allowed
    blocked = limiter.hit("u")
    assert not blocked.allowed
    assert blocked.count == 3
    assert blocked.retry_after == 60
    # Other keys have their own counter
    assert limiter.hit("v").allowed
    clock.now += 30
    assert limiter.hit("u").retry_after == 30
    clock.now += 31
    assert limiter.hit("u").allowed


def test_prune_drops_expired_counters():
    clock = FakeClock()
    store = MemoryRateLimitStore(clock=clock)
    store.incr("a", 10)
    store.incr("b", 100)
    clock.now += 50
    assert store.prune() == 1
    assert len(store) == 1


def test_incr_sweeps_expired_counters_periodically():
    clock = FakeClock()
    store = MemoryRateLimitStore(clock=clock, prune_every=3)
    for key in ("a", "b"):
        store.incr(key, 10)
    assert len(store) == 2
    clock.now += 20
    store.incr("c", 10)
    assert len(store) == 1
    count, _ = store.incr("a", 10)
    assert count == 1


def test_prune_every_must_be_positive():
    with pytest.raises(ValueError):
        MemoryRateLimitStore(prune_every=0)


def test_invalid_configuration():
    with pytest.raises(ValueError):
        FixedWindowRateLimiter(MemoryRateLimitStore(), limit=0, window_seconds=60)


@pytest.fixture
def limiter():
    return FixedWindowRateLimiter(MemoryRateLimitStore(), limit=2, window_seconds=60)


def test_mutating_requests_are_limited_per_user(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)
    for i in range(2):
        r = client.post("/api/topics", json={"name": f"t{i}"}, headers=headers)
        assert r.status_code == 201, r.text
    r = client.post("/api/topics", json={"name": "t3"}, headers=headers)
    assert r.status_code == 429
    assert int(r.headers["Retry-After"]) >= 1
    assert "error" in r.json()
    # Reads are not counted
    assert client.get("/api/topics", headers=headers).status_code == 200
    # A different user has a fresh window
    other = auth_headers(make_user())
    assert client.post("/api/topics", json={"name": "t4"}, headers=other).status_code == 201

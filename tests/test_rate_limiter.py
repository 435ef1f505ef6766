from glamflow import rate_limiter
from glamflow.rate_limiter import check_rate_limit


def test_allows_up_to_limit_then_denies():
    rate_limiter.memory_cache.pop("test:1.2.3.4", None)

    results = [check_rate_limit("test:1.2.3.4", limit=3, window_seconds=60) for _ in range(4)]

    assert [allowed for allowed, _, _ in results] == [True, True, True, False]
    assert results[-1][1] == 3
    assert 0 < results[-1][2] <= 60


def test_keys_are_counted_independently():
    for key in ("test:a", "test:b"):
        rate_limiter.memory_cache.pop(key, None)

    assert check_rate_limit("test:a", limit=1, window_seconds=60)[0] is True
    assert check_rate_limit("test:a", limit=1, window_seconds=60)[0] is False
    assert check_rate_limit("test:b", limit=1, window_seconds=60)[0] is True


def test_expired_window_resets():
    rate_limiter.memory_cache["test:expired"] = {
        "count": 5,
        "reset_time": 0,
        "last_redis_sync": 0,
    }

    allowed, count, _ = check_rate_limit("test:expired", limit=5, window_seconds=60)

    assert allowed is True
    assert count == 1

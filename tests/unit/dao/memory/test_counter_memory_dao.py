"""
Unit tests for the CounterMemoryDAO class.

Test coverage includes:

1. Increments
   - Ensures counters start at 1 and count per key.

2. Expiry
   - Ensures a counter restarts once its TTL elapsed, and the TTL isn't extended by increments.

3. Clearing
   - Ensures `clear()` and `clear_all()` drop counters.

4. Concurrency
   - Ensures concurrent increments never observe the same value.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from safeshortener.dao.memory import CounterMemoryDAO


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def dao(clock):
    return CounterMemoryDAO(clock=clock)


# -------------------------------
# 1. Increments
# -------------------------------


def test_increment_and_get(dao):
    assert [dao.increment_and_get('a', ttl=60) for _ in range(3)] == [1, 2, 3]
    assert dao.increment_and_get('b', ttl=60) == 1


# -------------------------------
# 2. Expiry
# -------------------------------


def test_counter_expires_after_ttl(dao, clock):
    dao.increment_and_get('a', ttl=60)
    clock.now += 30
    assert dao.increment_and_get('a', ttl=60) == 2

    clock.now += 30  # 60s after the first increment
    assert dao.increment_and_get('a', ttl=60) == 1


# -------------------------------
# 3. Clearing
# -------------------------------


def test_clear(dao):
    dao.increment_and_get('a', ttl=60)
    dao.increment_and_get('b', ttl=60)

    dao.clear('a')
    dao.clear('missing')

    assert dao.increment_and_get('a', ttl=60) == 1
    assert dao.increment_and_get('b', ttl=60) == 2


def test_clear_all(dao):
    dao.increment_and_get('a', ttl=60)

    dao.clear_all()

    assert dao.increment_and_get('a', ttl=60) == 1


# -------------------------------
# 4. Concurrency
# -------------------------------


def test_concurrent_increments_are_serialized():
    dao = CounterMemoryDAO()

    with ThreadPoolExecutor(max_workers=8) as pool:
        counts = list(pool.map(lambda _: dao.increment_and_get('shared', ttl=60), range(500)))

    assert sorted(counts) == list(range(1, 501))

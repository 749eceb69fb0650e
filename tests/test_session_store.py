from __future__ import annotations

import pytest

from animalsos.db.session import Base, create_db_engine, make_sessionmaker
from animalsos.services.session_store import MemorySessionStore, SQLSessionStore


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture(params=["memory", "sql"])
def store_and_clock(request, tmp_path):
    clock = FakeClock()
    if request.param == "memory":
        yield MemorySessionStore(ttl_seconds=60, clock=clock), clock
        return
    engine = create_db_engine(f"sqlite:///{tmp_path / 'sessions.db'}")
    Base.metadata.create_all(bind=engine)
    yield SQLSessionStore(make_sessionmaker(engine), ttl_seconds=60, clock=clock), clock
    engine.dispose()


def test_set_get_destroy(store_and_clock):
    store, _ = store_and_clock
    store.set("abc", {"userId": 7})

    assert store.get("abc") == {"userId": 7}
    assert store.length() == 1
    store.destroy("abc")
    assert store.get("abc") is None
    store.destroy("abc")


def test_expired_sessions_are_hidden_and_pruned(store_and_clock):
    store, clock = store_and_clock
    store.set("old", {"userId": 1})
    clock.now += 30
    store.set("fresh", {"userId": 2})
    clock.now += 31

    assert store.prune() == 1
    assert store.get("old") is None
    assert store.get("fresh") == {"userId": 2}
    assert store.length() == 1


def test_get_ignores_expired_entry_before_prune(store_and_clock):
    store, clock = store_and_clock
    store.set("s", {"userId": 1}, ttl_seconds=5)
    clock.now += 5

    assert store.get("s") is None


def test_length_ignores_expired_entry_before_prune(store_and_clock):
    store, clock = store_and_clock
    store.set("a", {"userId": 1}, ttl_seconds=5)
    store.set("b", {"userId": 2})
    assert store.length() == 2

    clock.now += 5
    assert store.length() == 1
    clock.now += 60
    assert store.length() == 0


def test_touch_extends_expiry(store_and_clock):
    store, clock = store_and_clock
    store.set("s", {"userId": 1})
    clock.now += 50
    assert store.touch("s") is True
    clock.now += 50

    assert store.get("s") == {"userId": 1}
    assert store.touch("missing") is False


def test_clear(store_and_clock):
    store, _ = store_and_clock
    store.set("a", {})
    store.set("b", {})
    store.clear()
    assert store.length() == 0


def test_memory_store_returns_copies():
    store = MemorySessionStore()
    store.set("s", {"cart": [1]})
    store.get("s")["cart"].append(2)
    assert store.get("s") == {"cart": [1]}


def test_pruning_timer_start_stop():
    store = MemorySessionStore(check_period=3600)
    store.start_pruning()
    store.start_pruning()
    assert store._timer is not None
    assert store._timer.daemon
    store.stop_pruning()
    assert store._timer is None


def test_pruning_disabled_with_non_positive_period():
    store = MemorySessionStore(check_period=0)
    store.start_pruning()
    assert store._timer is None

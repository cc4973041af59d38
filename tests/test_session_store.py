from datetime import datetime, timedelta

import pytest

from app.salonpos.core.error_catalog import AppError
from app.salonpos.services.session_store import InMemorySessionStore, SqlSessionStore


class FakeClock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds: int) -> None:
        if isinstance(self.now, datetime):
            self.now = self.now + timedelta(seconds=seconds)
        else:
            self.now = self.now + seconds


def test_in_memory_store_expires_entries():
    clock = FakeClock(100.0)
    store = InMemorySessionStore(clock=clock)
    store.put("checkout:session:a", "{}", 1800, version=1)

    clock.advance(1799)
    assert store.get("checkout:session:a") == "{}"
    clock.advance(1)
    assert store.get("checkout:session:a") is None


def test_in_memory_store_write_resets_ttl_window():
    clock = FakeClock(0.0)
    store = InMemorySessionStore(clock=clock)
    store.put("k", "v1", 1800, version=1)
    clock.advance(1500)
    store.put("k", "v2", 1800, version=2, expected_version=1)
    clock.advance(1500)

    assert store.get("k") == "v2"
    assert store.version_of("k") == 2


def test_in_memory_store_rejects_stale_versions():
    store = InMemorySessionStore(clock=FakeClock(0.0))
    store.put("k", "v1", 60, version=1)
    store.put("k", "v2", 60, version=2, expected_version=1)

    with pytest.raises(AppError) as stale:
        store.put("k", "v2-late", 60, version=2, expected_version=1)
    assert stale.value.code == "CHECKOUT_SESSION_CONFLICT"

    with pytest.raises(AppError) as duplicate:
        store.put("k", "again", 60, version=1)
    assert duplicate.value.code == "CHECKOUT_SESSION_CONFLICT"
    assert store.get("k") == "v2"


def test_in_memory_store_delete_is_idempotent():
    store = InMemorySessionStore(clock=FakeClock(0.0))
    store.put("k", "v1", 60, version=1)
    store.delete("k")
    store.delete("k")

    assert store.get("k") is None


def test_sql_store_round_trip_and_conditional_write(db_session):
    clock = FakeClock(datetime(2026, 3, 1, 10, 0, 0))
    store = SqlSessionStore(db_session, clock=clock)
    store.put("checkout:session:s1", '{"n": 1}', 1800, version=1)
    store.put("checkout:session:s1", '{"n": 2}', 1800, version=2, expected_version=1)

    assert store.get("checkout:session:s1") == '{"n": 2}'

    with pytest.raises(AppError) as stale:
        store.put("checkout:session:s1", '{"n": 3}', 1800, version=2, expected_version=1)
    assert stale.value.code == "CHECKOUT_SESSION_CONFLICT"
    assert store.get("checkout:session:s1") == '{"n": 2}'


def test_sql_store_hides_and_purges_expired_rows(db_session):
    clock = FakeClock(datetime(2026, 3, 1, 10, 0, 0))
    store = SqlSessionStore(db_session, clock=clock)
    store.put("checkout:session:old", "{}", 1800, version=1)

    clock.advance(1800)
    assert store.get("checkout:session:old") is None
    with pytest.raises(AppError):
        store.put("checkout:session:old", "{}", 1800, version=2, expected_version=1)

    store.put("checkout:session:old", '{"fresh": true}', 1800, version=1)
    assert store.get("checkout:session:old") == '{"fresh": true}'


def test_sql_store_delete_removes_entry(db_session):
    store = SqlSessionStore(db_session, clock=FakeClock(datetime(2026, 3, 1, 10, 0, 0)))
    store.put("checkout:session:gone", "{}", 1800, version=1)
    store.delete("checkout:session:gone")

    assert store.get("checkout:session:gone") is None


def test_in_memory_store_conditional_delete():
    store = InMemorySessionStore(clock=FakeClock(0.0))
    store.put("k", "v1", 60, version=1)
    store.put("k", "v2", 60, version=2, expected_version=1)

    with pytest.raises(AppError) as stale:
        store.delete("k", expected_version=1)
    assert stale.value.code == "CHECKOUT_SESSION_CONFLICT"
    assert store.get("k") == "v2"

    store.delete("k", expected_version=2)
    assert store.get("k") is None


def test_sql_store_conditional_delete(db_session):
    store = SqlSessionStore(db_session, clock=FakeClock(datetime(2026, 3, 1, 10, 0, 0)))
    store.put("checkout:session:cd", "{}", 1800, version=1)
    store.put("checkout:session:cd", '{"n": 2}', 1800, version=2, expected_version=1)

    with pytest.raises(AppError) as stale:
        store.delete("checkout:session:cd", expected_version=1)
    assert stale.value.code == "CHECKOUT_SESSION_CONFLICT"
    assert store.get("checkout:session:cd") == '{"n": 2}'

    store.delete("checkout:session:cd", expected_version=2)
    assert store.get("checkout:session:cd") is None

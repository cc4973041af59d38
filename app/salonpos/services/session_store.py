"""Ephemeral, TTL-bound storage for checkout session snapshots.

Values are opaque JSON strings keyed by ``checkout:session:<id>``. Every write
resets the entry's lifetime to the full TTL window and is conditional on the
caller's ``expected_version``; a create passes ``expected_version=None`` and
fails if the key is already live. A delete may also name the version it
expects; a live entry at any other version is a conflict.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timedelta
from typing import Callable, Protocol

from sqlalchemy.exc import IntegrityError

from app.salonpos.core.error_catalog import AppError, ErrorCatalog
from app.salonpos.repos.checkout_sessions import CheckoutSessionRepository


class SessionStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def put(
        self,
        key: str,
        payload: str,
        ttl_seconds: int,
        *,
        version: int,
        expected_version: int | None = None,
    ) -> None: ...

    def delete(self, key: str, *, expected_version: int | None = None) -> None: ...


def _conflict(key: str, expected_version: int | None) -> AppError:
    return AppError(
        ErrorCatalog.CHECKOUT_SESSION_CONFLICT,
        details={"key": key, "expected_version": expected_version},
    )


class SqlSessionStore:
    def __init__(self, db, clock: Callable[[], datetime] = datetime.utcnow):
        self.repo = CheckoutSessionRepository(db)
        self.db = db
        self._clock = clock

    def get(self, key: str) -> str | None:
        return self.repo.get_live_payload(key, now=self._clock())

    def put(
        self,
        key: str,
        payload: str,
        ttl_seconds: int,
        *,
        version: int,
        expected_version: int | None = None,
    ) -> None:
        now = self._clock()
        expires_at = now + timedelta(seconds=ttl_seconds)
        if expected_version is None:
            self.repo.purge_expired(now=now)
            try:
                self.repo.insert(key=key, payload=payload, version=version, expires_at=expires_at, now=now)
            except IntegrityError as exc:
                self.db.rollback()
                raise _conflict(key, expected_version) from exc
            return

        updated = self.repo.compare_and_set(
            key,
            payload=payload,
            version=version,
            expected_version=expected_version,
            expires_at=expires_at,
            now=now,
        )
        if not updated:
            raise _conflict(key, expected_version)

    def delete(self, key: str, *, expected_version: int | None = None) -> None:
        removed = self.repo.delete(key, expected_version=expected_version)
        if not removed and expected_version is not None and self.get(key) is not None:
            raise _conflict(key, expected_version)


class InMemorySessionStore:
    """Process-local store with an injectable monotonic clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[str, int, float]] = {}
        self._lock = threading.Lock()

    def _live_entry(self, key: str) -> tuple[str, int, float] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry[2] <= self._clock():
            del self._entries[key]
            return None
        return entry

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._live_entry(key)
            return entry[0] if entry else None

    def put(
        self,
        key: str,
        payload: str,
        ttl_seconds: int,
        *,
        version: int,
        expected_version: int | None = None,
    ) -> None:
        with self._lock:
            entry = self._live_entry(key)
            current_version = entry[1] if entry else None
            if current_version != expected_version:
                raise _conflict(key, expected_version)
            self._entries[key] = (payload, version, self._clock() + ttl_seconds)

    def delete(self, key: str, *, expected_version: int | None = None) -> None:
        with self._lock:
            entry = self._live_entry(key)
            if entry and expected_version is not None and entry[1] != expected_version:
                raise _conflict(key, expected_version)
            self._entries.pop(key, None)

    def version_of(self, key: str) -> int | None:
        with self._lock:
            entry = self._live_entry(key)
            return entry[1] if entry else None

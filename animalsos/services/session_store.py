"""
Session persistence for authenticated users.

A session is a small JSON blob addressed by an opaque session id. Entries
expire ``ttl_seconds`` after their last write; expired entries are never
returned and are physically removed by ``prune()``, which runs on a fixed
interval once ``start_pruning()`` has been called.
"""
from __future__ import annotations

import copy
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import sessionmaker

from animalsos.db.models import SessionRecord

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 86400
DEFAULT_CHECK_PERIOD = 86400


class SessionStore(ABC):
    """get/set/destroy by session id, with TTL-based pruning."""

    def __init__(
        self,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        check_period: float = DEFAULT_CHECK_PERIOD,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = max(1, int(ttl_seconds))
        self.check_period = check_period
        self._clock = clock
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()
        self._pruning = False

    def _expiry(self, ttl_seconds: int | None) -> float:
        ttl = self.ttl_seconds if ttl_seconds is None else max(1, int(ttl_seconds))
        return self._clock() + ttl

    @abstractmethod
    def get(self, sid: str) -> Optional[dict[str, Any]]:
        ...

    @abstractmethod
    def set(self, sid: str, data: dict[str, Any], ttl_seconds: int | None = None) -> None:
        ...

    @abstractmethod
    def destroy(self, sid: str) -> None:
        ...

    @abstractmethod
    def touch(self, sid: str, ttl_seconds: int | None = None) -> bool:
        """Push back the expiry of a live session. Returns False if absent."""

    @abstractmethod
    def prune(self) -> int:
        """Remove expired entries, returning how many were dropped."""

    @abstractmethod
    def length(self) -> int:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    # -------------------------- pruning loop --------------------------
    def start_pruning(self) -> None:
        if self.check_period <= 0:
            return
        with self._timer_lock:
            if self._pruning:
                return
            self._pruning = True
            self._schedule()

    def stop_pruning(self) -> None:
        with self._timer_lock:
            self._pruning = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _schedule(self) -> None:
        timer = threading.Timer(self.check_period, self._run_prune)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _run_prune(self) -> None:
        try:
            removed = self.prune()
            if removed:
                logger.info("Pruned %d expired sessions", removed)
        except Exception:
            logger.exception("Session pruning failed")
        with self._timer_lock:
            if self._pruning:
                self._schedule()


class MemorySessionStore(SessionStore):
    """Process-local store; contents are lost on restart."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._entries: dict[str, tuple[dict[str, Any], float]] = {}
        self._lock = threading.Lock()

    def get(self, sid: str) -> Optional[dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(sid)
            if entry is None:
                return None
            data, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[sid]
                return None
            return copy.deepcopy(data)

    def set(self, sid: str, data: dict[str, Any], ttl_seconds: int | None = None) -> None:
        with self._lock:
            self._entries[sid] = (copy.deepcopy(data), self._expiry(ttl_seconds))

    def destroy(self, sid: str) -> None:
        with self._lock:
            self._entries.pop(sid, None)

    def touch(self, sid: str, ttl_seconds: int | None = None) -> bool:
        with self._lock:
            entry = self._entries.get(sid)
            if entry is None or entry[1] <= self._clock():
                return False
            self._entries[sid] = (entry[0], self._expiry(ttl_seconds))
            return True

    def prune(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [sid for sid, (_, expires_at) in self._entries.items() if expires_at <= now]
            for sid in expired:
                del self._entries[sid]
        return len(expired)

    def length(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for _, expires_at in self._entries.values() if expires_at > now)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class SQLSessionStore(SessionStore):
    """Sessions kept in the ``sessions`` table next to the document collections."""

    def __init__(self, session_factory: sessionmaker, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._session_factory = session_factory

    def get(self, sid: str) -> Optional[dict[str, Any]]:
        with self._session_factory() as session:
            record = session.get(SessionRecord, sid)
            if record is None:
                return None
            if record.expires_at <= self._clock():
                session.delete(record)
                session.commit()
                return None
            return dict(record.data or {})

    def set(self, sid: str, data: dict[str, Any], ttl_seconds: int | None = None) -> None:
        with self._session_factory() as session:
            session.merge(SessionRecord(sid=sid, data=dict(data), expires_at=self._expiry(ttl_seconds)))
            session.commit()

    def destroy(self, sid: str) -> None:
        with self._session_factory() as session:
            session.execute(delete(SessionRecord).where(SessionRecord.sid == sid))
            session.commit()

    def touch(self, sid: str, ttl_seconds: int | None = None) -> bool:
        with self._session_factory() as session:
            record = session.get(SessionRecord, sid)
            if record is None or record.expires_at <= self._clock():
                return False
            record.expires_at = self._expiry(ttl_seconds)
            session.commit()
            return True

    def prune(self) -> int:
        with self._session_factory() as session:
            result = session.execute(delete(SessionRecord).where(SessionRecord.expires_at <= self._clock()))
            session.commit()
            return int(result.rowcount or 0)

    def length(self) -> int:
        with self._session_factory() as session:
            stmt = select(func.count()).select_from(SessionRecord).where(SessionRecord.expires_at > self._clock())
            return int(session.execute(stmt).scalar_one())

    def clear(self) -> None:
        with self._session_factory() as session:
            session.execute(delete(SessionRecord))
            session.commit()

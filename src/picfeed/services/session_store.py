"""Server-side session storage.

A session is a server-chosen random token mapped to the authenticated user id
and the CSRF token issued at login. Redis is used in deployment; the memory
backend keeps sessions in-process for development and tests.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Final

import redis

from picfeed.core.security import secure_random_str
from picfeed.core.settings import settings

_KEY_PREFIX: Final[str] = "picfeed:session:"


@dataclass(frozen=True)
class SessionData:
    """Values carried by one login session."""

    session_id: str
    user_id: int
    csrf_token: str


class SessionStore:
    """Create, look up and drop login sessions."""

    def __init__(
        self,
        backend: str = "memory",
        *,
        redis_url: str | None = None,
        ttl_seconds: int = 86_400,
    ) -> None:
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self._redis: Any = None
        if backend == "redis":
            self._redis = redis.from_url(redis_url or settings.redis_url)  # type: ignore[no-untyped-call]
        elif backend != "memory":
            raise ValueError(f"Unknown session backend: {backend}")
        self._sessions: dict[str, tuple[SessionData, float]] = {}
        self._lock = Lock()

    def create(self, user_id: int) -> SessionData:
        """Open a new session for ``user_id`` with a fresh CSRF token."""
        data = SessionData(
            session_id=secure_random_str(32),
            user_id=int(user_id),
            csrf_token=secure_random_str(16),
        )
        if self._redis is not None:
            key = _KEY_PREFIX + data.session_id
            pipe = self._redis.pipeline()
            pipe.hset(key, mapping={"user_id": data.user_id, "csrf_token": data.csrf_token})
            pipe.expire(key, self.ttl_seconds)
            pipe.execute()
            return data

        with self._lock:
            self._sessions[data.session_id] = (data, time.time() + self.ttl_seconds)
        return data

    def get(self, session_id: str) -> SessionData | None:
        """Return the live session for ``session_id`` or None."""
        if self._redis is not None:
            raw = self._redis.hgetall(_KEY_PREFIX + session_id)
            if not raw:
                return None
            values = {_text(k): _text(v) for k, v in raw.items()}
            return SessionData(
                session_id=session_id,
                user_id=int(values["user_id"]),
                csrf_token=values["csrf_token"],
            )

        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            data, expiry = entry
            if expiry < time.time():
                self._sessions.pop(session_id, None)
                return None
            return data

    def delete(self, session_id: str) -> None:
        if self._redis is not None:
            self._redis.delete(_KEY_PREFIX + session_id)
            return
        with self._lock:
            self._sessions.pop(session_id, None)


def _text(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes) else value


_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Return the process-wide session store configured from settings."""
    global _store
    if _store is None:
        _store = SessionStore(
            settings.session_backend,
            redis_url=settings.redis_url,
            ttl_seconds=settings.session_ttl_seconds,
        )
    return _store

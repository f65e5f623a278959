"""Engine and session factory for the row store."""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from picfeed.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Model modules register their tables on Base.metadata at import time.
import picfeed.models  # noqa: E402,F401


def build_engine(url: str, *, echo: bool = False) -> Engine:
    """Create a pooled engine for ``url``.

    SQLite connections are handed between the request threadpool and the
    event loop, so the same-thread check is disabled for them.
    """
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, pool_pre_ping=True, echo=echo, connect_args=connect_args)


engine = build_engine(settings.database_url, echo=settings.sql_debug)

SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session; uncommitted work is rolled back on close."""
    with SessionLocal() as db:
        yield db

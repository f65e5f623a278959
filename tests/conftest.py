# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta
from itertools import count
from typing import Any

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from picfeed.api.v1.dependencies import (
    create_access_token,
    get_file_storage_dep,
    get_session_store_dep,
)
from picfeed.core.security import calculate_passhash
from picfeed.db.session import Base
from picfeed.db.session import get_db as app_get_session
from picfeed.main import app as fastapi_app
from picfeed.models import AUTHORITY_ELEVATED, AUTHORITY_ORDINARY, Comment, Post, User
from picfeed.services.image_store import LocalFileStorage
from picfeed.services.session_store import SessionStore

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)
DEFAULT_PASSWORD = "password_123"

_ACCOUNT_COUNTER = count(1)


class QueryCounter:
    """Collects SQL statements sent to the database."""

    def __init__(self) -> None:
        self.statements: list[str] = []

    def reset(self) -> None:
        self.statements.clear()

    @property
    def selects(self) -> list[str]:
        return [s for s in self.statements if s.lstrip().upper().startswith("SELECT")]


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def query_counter(engine: Engine) -> Iterator[QueryCounter]:
    """Record every statement executed on the test engine."""
    counter = QueryCounter()

    def _record(conn, cursor, statement, parameters, context, executemany) -> None:
        counter.statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    try:
        yield counter
    finally:
        event.remove(engine, "before_cursor_execute", _record)


@pytest.fixture()
def image_storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(tmp_path / "image")


@pytest.fixture()
def session_store() -> SessionStore:
    return SessionStore("memory", ttl_seconds=3600)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    image_storage: LocalFileStorage,
    session_store: SessionStore,
) -> Iterator[None]:
    def _get_session_override() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_file_storage_dep] = lambda: image_storage
    app.dependency_overrides[get_session_store_dep] = lambda: session_store
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users."""

    def _make_user(
        account_name: str | None = None,
        *,
        password: str = DEFAULT_PASSWORD,
        elevated: bool = False,
        banned: bool = False,
        created_at: datetime | None = None,
    ) -> User:
        name = account_name or f"user_{next(_ACCOUNT_COUNTER)}"
        user = User(
            account_name=name,
            passhash=calculate_passhash(name, password),
            authority=AUTHORITY_ELEVATED if elevated else AUTHORITY_ORDINARY,
            del_flg=banned,
            created_at=created_at or BASE_TIME,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory persisting posts; ``minutes`` offsets from BASE_TIME."""

    def _make_post(
        user: User,
        *,
        minutes: float = 0,
        body: str = "caption",
        mime: str = "image/jpeg",
        imgdata: bytes = b"",
        post_id: int | None = None,
    ) -> Post:
        post = Post(
            user_id=user.id,
            body=body,
            mime=mime,
            imgdata=imgdata,
            created_at=BASE_TIME + timedelta(minutes=minutes),
        )
        if post_id is not None:
            post.id = post_id
        db_session.add(post)
        db_session.commit()
        return post

    return _make_post


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    """Return a factory persisting comments; ``minutes`` offsets from BASE_TIME."""

    def _make_comment(
        post: Post,
        user: User | int,
        *,
        minutes: float = 0,
        text: str = "nice",
    ) -> Comment:
        user_id = user if isinstance(user, int) else user.id
        comment = Comment(
            post_id=post.id,
            user_id=user_id,
            comment=text,
            created_at=BASE_TIME + timedelta(minutes=minutes),
        )
        db_session.add(comment)
        db_session.commit()
        return comment

    return _make_comment


@pytest.fixture()
def login_as(session_store: SessionStore) -> Callable[[User], dict[str, Any]]:
    """Open a session for a user and return its auth headers and CSRF token."""

    def _login(user: User) -> dict[str, Any]:
        login = session_store.create(user.id)
        token = create_access_token(user.id, login.session_id)
        return {
            "headers": {"Authorization": f"Bearer {token}"},
            "csrf_token": login.csrf_token,
            "session_id": login.session_id,
        }

    return _login


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    return make_user("bob")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("admin", elevated=True)


@pytest.fixture()
def base_time() -> datetime:
    """Timestamp that ``minutes`` offsets in the factories are relative to."""
    return BASE_TIME

# tests/v1/test_dependencies.py
"""Tests for API dependencies module."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from picfeed.api.v1.dependencies import (
    create_access_token,
    csrf_token_for,
    get_current_login,
    get_current_user,
    get_elevated_user,
    get_login_session,
    verify_csrf,
)
from picfeed.core.settings import settings


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetLoginSession:
    """Test resolving the bearer token into a session."""

    def test_anonymous(self, session_store):
        assert get_login_session(None, session_store) is None

    def test_valid_token(self, session_store, test_user):
        login = session_store.create(test_user.id)
        token = create_access_token(test_user.id, login.session_id)

        assert get_login_session(_credentials(token), session_store) == login

    def test_expired_token(self, session_store, test_user):
        login = session_store.create(test_user.id)
        token = jwt.encode(
            {
                "sub": str(test_user.id),
                "sid": login.session_id,
                "exp": datetime.now(UTC) - timedelta(minutes=1),
            },
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(HTTPException) as exc_info:
            get_login_session(_credentials(token), session_store)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_without_session_id(self, session_store):
        token = jwt.encode({"sub": "1"}, settings.secret_key, algorithm=settings.jwt_algorithm)

        with pytest.raises(HTTPException) as exc_info:
            get_login_session(_credentials(token), session_store)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_subject_must_match_session(self, session_store, test_user, other_user):
        login = session_store.create(test_user.id)
        token = create_access_token(other_user.id, login.session_id)

        with pytest.raises(HTTPException) as exc_info:
            get_login_session(_credentials(token), session_store)

        assert exc_info.value.detail == "Session expired"


class TestCurrentUser:
    """Test the authenticated-user dependencies."""

    def test_requires_login(self):
        with pytest.raises(HTTPException) as exc_info:
            get_current_login(None)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_returns_user(self, db_session, session_store, test_user):
        login = session_store.create(test_user.id)
        assert get_current_user(login, db_session) is test_user

    def test_missing_user(self, db_session, session_store):
        login = session_store.create(424242)
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(login, db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_elevated_required(self, test_user, admin_user):
        assert get_elevated_user(admin_user) is admin_user
        with pytest.raises(HTTPException) as exc_info:
            get_elevated_user(test_user)
        assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN


class TestCsrf:
    """Test CSRF token helpers."""

    def test_token_for_anonymous(self):
        assert csrf_token_for(None) == ""

    def test_verify(self, session_store):
        login = session_store.create(1)
        verify_csrf(login, login.csrf_token)

        with pytest.raises(HTTPException) as exc_info:
            verify_csrf(login, "forged")
        assert exc_info.value.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

        with pytest.raises(HTTPException):
            verify_csrf(login, "")


def test_non_ascii_csrf_token_is_rejected(client, test_user, make_post, login_as):
    """Tokens outside ASCII are a mismatch, not a server error."""
    post = make_post(test_user)
    login = login_as(test_user)

    response = client.post(
        "/api/v1/comments",
        headers=login["headers"],
        json={"post_id": post.id, "comment": "hi", "csrf_token": "é"},
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["detail"] == "CSRF token mismatch"

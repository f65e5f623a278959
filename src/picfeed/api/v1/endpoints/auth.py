# src/picfeed/api/v1/endpoints/auth.py
"""Authentication endpoints for the Picfeed API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from picfeed.api.v1.dependencies import (
    CurrentLoginDep,
    CurrentUserDep,
    SessionDep,
    SessionStoreDep,
    create_access_token,
)
from picfeed.schemas.feed import UserView
from picfeed.schemas.user import LoginRequest, LoginResponse, RegisterRequest
from picfeed.services import user_service
from picfeed.services.session_store import SessionStore

router = APIRouter(prefix="/auth", tags=["authentication"])


def _open_session(store: SessionStore, user_id: int) -> LoginResponse:
    login = store.create(user_id)
    return LoginResponse(
        access_token=create_access_token(user_id, login.session_id),
        csrf_token=login.csrf_token,
        user_id=user_id,
    )


@router.post(
    "/register",
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=LoginResponse,
)
async def register_user(
    payload: RegisterRequest,
    db: SessionDep,
    store: SessionStoreDep,
) -> LoginResponse:
    """Create an account and log it in."""
    user = user_service.register(db, payload.account_name, payload.password)
    return _open_session(store, user.id)


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    db: SessionDep,
    store: SessionStoreDep,
) -> LoginResponse:
    """Authenticate with account name and password.

    Raises:
        HTTPException: If the credentials are wrong or the account is banned
    """
    user = user_service.try_login(db, payload.account_name, payload.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account name or password is incorrect",
        )
    return _open_session(store, user.id)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(login: CurrentLoginDep, store: SessionStoreDep) -> None:
    """Drop the caller's session."""
    store.delete(login.session_id)


@router.get("/me", response_model=UserView)
async def me(user: CurrentUserDep) -> UserView:
    """Return the logged-in account."""
    return UserView.model_validate(user)

"""Shared API dependencies for authentication and common functionality."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from picfeed.core.settings import settings
from picfeed.db.session import get_db
from picfeed.models import User
from picfeed.repositories.user_repo import UserRepository
from picfeed.services.feed import FeedAssembler
from picfeed.services.image_store import ImageStore, LocalFileStorage, get_file_storage
from picfeed.services.session_store import SessionData, SessionStore, get_session_store

# HTTP Bearer scheme; anonymous requests are allowed on read endpoints.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_session_store_dep() -> SessionStore:
    """Return the shared session store."""
    return get_session_store()


def get_file_storage_dep() -> LocalFileStorage:
    """Return the shared image file storage."""
    return get_file_storage()


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store_dep)]
FileStorageDep = Annotated[LocalFileStorage, Depends(get_file_storage_dep)]


def create_access_token(user_id: int, session_id: str) -> str:
    """Create a JWT access token pointing at a server-side session."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: dict[str, object] = {"sub": str(user_id), "sid": session_id, "exp": expire}
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_login_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    store: SessionStoreDep,
) -> SessionData | None:
    """Resolve the caller's session from the bearer token, if one was sent.

    Raises:
        HTTPException: A token was supplied but is invalid or its session expired.
    """
    if credentials is None:
        return None
    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise _unauthorized() from err

    session_id = payload.get("sid")
    subject = payload.get("sub")
    if not session_id or subject is None:
        raise _unauthorized()

    login = store.get(session_id)
    if login is None or str(login.user_id) != str(subject):
        raise _unauthorized("Session expired")
    return login


OptionalLoginDep = Annotated[SessionData | None, Depends(get_login_session)]


def get_current_login(login: OptionalLoginDep) -> SessionData:
    """Require an authenticated session."""
    if login is None:
        raise _unauthorized("Not authenticated")
    return login


CurrentLoginDep = Annotated[SessionData, Depends(get_current_login)]


def get_current_user(login: CurrentLoginDep, db: SessionDep) -> User:
    """Return the logged-in user; banned accounts lose access immediately."""
    user = UserRepository(db).get_by_id(login.user_id)
    if user is None or user.is_banned:
        raise _unauthorized("User not found")
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_elevated_user(user: CurrentUserDep) -> User:
    """Require an account with elevated authority."""
    if not user.is_elevated:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Elevated authority required",
        )
    return user


ElevatedUserDep = Annotated[User, Depends(get_elevated_user)]


def csrf_token_for(login: SessionData | None) -> str:
    """Return the CSRF token to stamp on views, empty for anonymous callers."""
    return login.csrf_token if login is not None else ""


def verify_csrf(login: SessionData, supplied: str) -> None:
    """Reject a mutating request whose CSRF token does not match the session."""
    if not secrets.compare_digest(login.csrf_token.encode(), (supplied or "").encode()):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="CSRF token mismatch",
        )


def get_feed_assembler(db: SessionDep) -> FeedAssembler:
    return FeedAssembler(db, comment_limit=settings.feed_comment_limit)


def get_image_store(db: SessionDep, storage: FileStorageDep) -> ImageStore:
    return ImageStore(db, storage, upload_limit=settings.upload_limit)


FeedAssemblerDep = Annotated[FeedAssembler, Depends(get_feed_assembler)]
ImageStoreDep = Annotated[ImageStore, Depends(get_image_store)]

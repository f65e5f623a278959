"""Account registration and login helpers."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from picfeed.core import security
from picfeed.core.errors import ValidationFault
from picfeed.models import User
from picfeed.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

__all__ = ["register", "try_login"]


def register(db: Session, account_name: str, password: str) -> User:
    """Create an account after validating its credentials.

    Raises:
        ValidationFault: Malformed credentials or an account name already in use.
    """
    if not security.validate_user(account_name, password):
        raise ValidationFault(
            "Account names need at least 3 characters and passwords at least 6"
        )

    repo = UserRepository(db)
    if repo.account_name_exists(account_name):
        raise ValidationFault("Account name is already taken")

    try:
        user = repo.create(
            account_name=account_name,
            passhash=security.calculate_passhash(account_name, password),
        )
        db.commit()
    except IntegrityError as exc:
        # A concurrent registration claimed the name after the pre-check.
        db.rollback()
        raise ValidationFault("Account name is already taken") from exc
    db.refresh(user)
    logger.info("Registered user %d (%s)", user.id, account_name)
    return user


def try_login(db: Session, account_name: str, password: str) -> User | None:
    """Return the unbanned account matching the credentials, or None."""
    user = UserRepository(db).get_active_by_account_name(account_name)
    if user is None:
        return None
    if not security.verify_password(user.account_name, password, user.passhash):
        return None
    return user

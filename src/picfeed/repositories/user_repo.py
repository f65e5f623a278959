"""Data access helpers for working with user accounts."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from picfeed.models import AUTHORITY_ORDINARY, User

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: int) -> User | None:
        """Return a user by identifier regardless of ban state."""
        return self.session.get(User, user_id)

    def get_active_by_account_name(self, account_name: str) -> User | None:
        """Return the unbanned user with ``account_name``."""
        result = self.session.execute(
            select(User).where(User.account_name == account_name, User.del_flg.is_(False))
        )
        return result.scalars().first()

    def account_name_exists(self, account_name: str) -> bool:
        result = self.session.execute(
            select(User.id).where(User.account_name == account_name).limit(1)
        )
        return result.first() is not None

    def get_many(self, user_ids: Iterable[int]) -> list[User]:
        """Return the users matching ``user_ids`` in a single query."""
        ids = list(user_ids)
        if not ids:
            return []
        result = self.session.execute(select(User).where(User.id.in_(ids)))
        return list(result.scalars())

    def list_bannable(self) -> list[User]:
        """Return ordinary, unbanned users, newest first."""
        result = self.session.execute(
            select(User)
            .where(User.authority == AUTHORITY_ORDINARY, User.del_flg.is_(False))
            .order_by(User.created_at.desc(), User.id.desc())
        )
        return list(result.scalars())

    def create(self, *, account_name: str, passhash: str) -> User:
        """Insert a new user and return the flushed ORM instance."""
        user = User(account_name=account_name, passhash=passhash)
        self.session.add(user)
        self.session.flush()
        return user

    def set_banned(self, user_ids: Iterable[int]) -> list[int]:
        """Flag ``user_ids`` as banned and return the ids that changed."""
        ids = list(user_ids)
        if not ids:
            return []
        result = self.session.execute(
            select(User.id).where(User.id.in_(ids), User.del_flg.is_(False))
        )
        changed = sorted(result.scalars())
        if changed:
            self.session.execute(
                update(User).where(User.id.in_(changed)).values(del_flg=True)
            )
        return changed

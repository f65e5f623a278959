# src/picfeed/services/moderation.py
"""Moderation services for Picfeed.

Banning is a soft delete: the user row, posts and comments stay in place and
read paths filter on the banned flag.
"""

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from picfeed.models import User
from picfeed.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class ModerationService:
    """Service handling account bans."""

    @staticmethod
    def list_bannable(db: Session) -> list[User]:
        """Return ordinary, unbanned accounts, newest first."""
        return UserRepository(db).list_bannable()

    @staticmethod
    def ban_users(db: Session, user_ids: Iterable[int], *, moderator_id: int) -> list[int]:
        """Set the banned flag on ``user_ids``.

        Args:
            db: Database session
            user_ids: Accounts to ban; unknown or already banned ids are ignored
            moderator_id: Account performing the ban, for the audit log

        Returns:
            Identifiers whose flag changed
        """
        banned = UserRepository(db).set_banned(user_ids)
        db.commit()
        if banned:
            logger.info("User %d banned users %s", moderator_id, banned)
        return banned

# src/picfeed/models/user.py
"""SQLAlchemy model for user accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from picfeed.db.session import Base
from picfeed.db.time import utcnow

AUTHORITY_ORDINARY = 0
AUTHORITY_ELEVATED = 1


class User(Base):
    """Registered account.

    Banned accounts keep their row (``del_flg`` is a soft delete) so that their
    historical posts and comments stay referentially intact.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    passhash: Mapped[str] = mapped_column(String(128), nullable=False)
    # 0 = ordinary, 1 = elevated (may ban other accounts).
    authority: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        default=AUTHORITY_ORDINARY,
    )
    del_flg: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    @property
    def is_elevated(self) -> bool:
        """Return True if the account may moderate other accounts."""
        return self.authority != AUTHORITY_ORDINARY

    @property
    def is_banned(self) -> bool:
        return bool(self.del_flg)

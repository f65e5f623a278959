# src/picfeed/models/comment.py
"""SQLAlchemy model for comments attached to posts."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from picfeed.db.session import Base
from picfeed.db.time import utcnow


class Comment(Base):
    """A user's remark on a post."""

    __tablename__ = "comments"
    __table_args__ = (
        Index("idx_comments_post_id_created_at", "post_id", "created_at"),
        Index("idx_comments_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(Integer, ForeignKey("posts.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

# src/picfeed/models/post.py
"""SQLAlchemy model for image posts."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, deferred, mapped_column

from picfeed.db.session import Base
from picfeed.db.time import utcnow


class Post(Base):
    """An uploaded image with its caption.

    ``imgdata`` holds image bytes only for legacy rows; newer uploads keep it
    empty and live in the file store. The column is deferred so feed queries
    never pull the blob.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("idx_posts_created_at", "created_at"),
        Index("idx_posts_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    mime: Mapped[str] = mapped_column(String(64), nullable=False)
    imgdata: Mapped[bytes] = deferred(mapped_column(LargeBinary, nullable=False, default=b""))
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

"""Data access helpers for working with posts."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session, undefer

from picfeed.models import Post, User

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities.

    Every listing that feeds a public page joins ``users`` and drops posts
    whose author is banned at the time of the read.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier, without moderation filtering."""
        return self.session.get(Post, post_id)

    def get_with_image(self, post_id: int) -> Post | None:
        """Return a post with its legacy inline image bytes loaded."""
        result = self.session.execute(
            select(Post).options(undefer(Post.imgdata)).where(Post.id == post_id)
        )
        return result.scalars().first()

    def get_visible(self, post_id: int) -> tuple[Post, User] | None:
        """Return the post and its author if the author is not banned."""
        result = self.session.execute(
            select(Post, User)
            .join(User, Post.user_id == User.id)
            .where(Post.id == post_id, User.del_flg.is_(False))
        )
        row = result.first()
        if row is None:
            return None
        return row[0], row[1]

    def list_recent_visible(
        self,
        limit: int,
        *,
        max_created_at: datetime | None = None,
        before_id: int | None = None,
    ) -> list[tuple[Post, User]]:
        """Return newest posts by unbanned authors with their authors.

        ``max_created_at`` alone is an inclusive upper bound; combined with
        ``before_id`` it becomes the strict bound ``(created_at, id) < (max, id)``.
        """
        stmt = (
            select(Post, User)
            .join(User, Post.user_id == User.id)
            .where(User.del_flg.is_(False))
        )
        if max_created_at is not None:
            if before_id is None:
                stmt = stmt.where(Post.created_at <= max_created_at)
            else:
                stmt = stmt.where(
                    or_(
                        Post.created_at < max_created_at,
                        and_(Post.created_at == max_created_at, Post.id < before_id),
                    )
                )
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc()).limit(limit)
        return [(post, user) for post, user in self.session.execute(stmt).all()]

    def list_by_user(self, user_id: int, limit: int) -> list[Post]:
        """Return a user's newest posts."""
        result = self.session.execute(
            select(Post)
            .where(Post.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
        )
        return list(result.scalars())

    def ids_by_user(self, user_id: int) -> list[int]:
        """Return every post identifier owned by ``user_id``."""
        result = self.session.execute(select(Post.id).where(Post.user_id == user_id))
        return list(result.scalars())

    def list_legacy_ids(self, after_id: int, limit: int) -> list[int]:
        """Return ids of posts still carrying inline image bytes."""
        result = self.session.execute(
            select(Post.id)
            .where(Post.id > after_id, func.length(Post.imgdata) > 0)
            .order_by(Post.id)
            .limit(limit)
        )
        return list(result.scalars())

    def create(self, *, user_id: int, mime: str, body: str) -> Post:
        """Insert a new post with empty inline image data."""
        post = Post(user_id=user_id, mime=mime, body=body, imgdata=b"")
        self.session.add(post)
        self.session.flush()
        return post

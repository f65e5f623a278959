"""Data access helpers for working with comments."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from picfeed.models import Comment

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comment entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_posts(
        self,
        post_ids: Iterable[int],
        limit_per_post: int | None = None,
    ) -> list[Comment]:
        """Return comments for ``post_ids`` in one query.

        Rows come back grouped by post, newest first within each post. With
        ``limit_per_post`` only the newest N comments of each post are kept,
        using a per-post ``ROW_NUMBER()`` rank.
        """
        ids = list(post_ids)
        if not ids:
            return []

        order = (Comment.post_id, Comment.created_at.desc(), Comment.id.desc())
        if limit_per_post is None:
            stmt = select(Comment).where(Comment.post_id.in_(ids)).order_by(*order)
        else:
            rank = (
                func.row_number()
                .over(
                    partition_by=Comment.post_id,
                    order_by=(Comment.created_at.desc(), Comment.id.desc()),
                )
                .label("rn")
            )
            ranked = (
                select(Comment.id.label("comment_id"), rank)
                .where(Comment.post_id.in_(ids))
                .subquery("ranked")
            )
            stmt = (
                select(Comment)
                .join(ranked, ranked.c.comment_id == Comment.id)
                .where(ranked.c.rn <= limit_per_post)
                .order_by(*order)
            )
        return list(self.session.execute(stmt).scalars())

    def count_for_posts(self, post_ids: Iterable[int]) -> dict[int, int]:
        """Return ``{post_id: comment_count}`` for posts that have comments."""
        ids = list(post_ids)
        if not ids:
            return {}
        result = self.session.execute(
            select(Comment.post_id, func.count())
            .where(Comment.post_id.in_(ids))
            .group_by(Comment.post_id)
        )
        return {post_id: int(count) for post_id, count in result.all()}

    def count_on_posts(self, post_ids: Iterable[int]) -> int:
        """Return the number of comments left on any of ``post_ids``."""
        ids = list(post_ids)
        if not ids:
            return 0
        result = self.session.execute(
            select(func.count()).select_from(Comment).where(Comment.post_id.in_(ids))
        )
        return int(result.scalar_one())

    def count_by_user(self, user_id: int) -> int:
        """Return the number of comments written by ``user_id``."""
        result = self.session.execute(
            select(func.count()).select_from(Comment).where(Comment.user_id == user_id)
        )
        return int(result.scalar_one())

    def create(self, *, post_id: int, user_id: int, comment: str) -> Comment:
        new_comment = Comment(post_id=post_id, user_id=user_id, comment=comment)
        self.session.add(new_comment)
        self.session.flush()
        return new_comment

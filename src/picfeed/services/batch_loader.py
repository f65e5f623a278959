"""Batched comment and author loading for feed assembly.

Resolving comments one post at a time (and authors one comment at a time)
turns a 20-post page into dozens of queries. The loader instead issues one
comment query and one author query for the whole page and joins in memory.
"""
from __future__ import annotations

from collections.abc import Collection

from sqlalchemy.orm import Session

from picfeed.core.errors import CommentAuthorMissingError
from picfeed.repositories.comment_repo import CommentRepository
from picfeed.repositories.user_repo import UserRepository
from picfeed.schemas.feed import CommentView, UserView

__all__ = ["BatchLoader"]


class BatchLoader:
    """Resolve comments and their authors for a set of posts."""

    def __init__(self, session: Session) -> None:
        self.comments = CommentRepository(session)
        self.users = UserRepository(session)

    def load_comments_and_authors(
        self,
        post_ids: Collection[int],
        limit_per_post: int | None = None,
    ) -> dict[int, list[CommentView]]:
        """Return ``{post_id: [CommentView, ...]}`` newest first.

        Args:
            post_ids: Posts whose comments should be loaded.
            limit_per_post: Keep only the newest N comments of each post;
                ``None`` loads every comment.

        Returns:
            Mapping from post id to its ordered comment views. Posts without
            comments are absent from the mapping.

        Raises:
            CommentAuthorMissingError: A comment's author row does not exist.
        """
        if not post_ids:
            return {}

        comments = self.comments.list_for_posts(post_ids, limit_per_post)
        author_ids = {comment.user_id for comment in comments}
        authors = {
            user.id: UserView.model_validate(user)
            for user in self.users.get_many(author_ids)
        }

        by_post: dict[int, list[CommentView]] = {}
        for comment in comments:
            author = authors.get(comment.user_id)
            if author is None:
                raise CommentAuthorMissingError(comment.id, comment.user_id)
            by_post.setdefault(comment.post_id, []).append(
                CommentView(
                    id=comment.id,
                    post_id=comment.post_id,
                    user_id=comment.user_id,
                    comment=comment.comment,
                    created_at=comment.created_at,
                    user=author,
                )
            )
        return by_post

    def count_comments(self, post_ids: Collection[int]) -> dict[int, int]:
        """Return the total comment count of every post in ``post_ids``."""
        if not post_ids:
            return {}
        counts = self.comments.count_for_posts(post_ids)
        return {post_id: counts.get(post_id, 0) for post_id in post_ids}

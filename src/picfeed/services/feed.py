"""Feed and single-post assembly.

The assembler turns post, comment and user rows into immutable
:class:`~picfeed.schemas.feed.PostView` trees. Authors are joined once per
batch and ban state is always read from the current user row.
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from picfeed.core.errors import NotFoundError
from picfeed.db.time import as_db_time
from picfeed.models import Post, User
from picfeed.repositories.comment_repo import CommentRepository
from picfeed.repositories.post_repo import PostRepository
from picfeed.repositories.user_repo import UserRepository
from picfeed.schemas.feed import CommentView, PostView, ProfileView, UserView
from picfeed.services.batch_loader import BatchLoader
from picfeed.services.image_store import image_url

logger = logging.getLogger(__name__)

__all__ = ["FeedAssembler"]


class FeedAssembler:
    """Build feed pages, profile pages and single-post views."""

    def __init__(self, session: Session, *, comment_limit: int = 3) -> None:
        self.posts = PostRepository(session)
        self.users = UserRepository(session)
        self.comments = CommentRepository(session)
        self.loader = BatchLoader(session)
        self.comment_limit = comment_limit

    def latest_feed(self, page_size: int, csrf_token: str) -> list[PostView]:
        """Return the newest ``page_size`` posts by unbanned authors."""
        rows = self.posts.list_recent_visible(page_size)
        return self._assemble(rows, csrf_token)

    def feed_before(
        self,
        cursor: datetime,
        page_size: int,
        csrf_token: str = "",
        before_id: int | None = None,
    ) -> list[PostView]:
        """Return the page of posts created at or before ``cursor``.

        The timestamp bound is inclusive, so a caller paging with the oldest
        timestamp of the previous page sees that boundary post again. Passing
        ``before_id`` (the id of that post) excludes it and every post with the
        same timestamp and a higher id.

        An empty list means there are no more pages.
        """
        rows = self.posts.list_recent_visible(
            page_size,
            max_created_at=as_db_time(cursor),
            before_id=before_id,
        )
        return self._assemble(rows, csrf_token)

    def profile_feed(
        self,
        account_name: str,
        page_size: int,
        csrf_token: str = "",
    ) -> ProfileView:
        """Return a user's newest posts with account-wide counters.

        Raises:
            NotFoundError: The account does not exist or is banned.
        """
        user = self.users.get_active_by_account_name(account_name)
        if user is None:
            logger.debug("Profile %r not found or banned", account_name)
            raise NotFoundError(f"User {account_name} not found")

        posts = self.posts.list_by_user(user.id, page_size)
        views = self._assemble([(post, user) for post in posts], csrf_token)

        all_post_ids = self.posts.ids_by_user(user.id)
        # Short-circuit avoids an IN () query for users without posts.
        commented_count = self.comments.count_on_posts(all_post_ids) if all_post_ids else 0

        return ProfileView(
            user=UserView.model_validate(user),
            posts=tuple(views),
            post_count=len(all_post_ids),
            comment_count=self.comments.count_by_user(user.id),
            commented_count=commented_count,
        )

    def resolve_post(self, post_id: int, csrf_token: str) -> PostView:
        """Return one post with its complete comment thread.

        Raises:
            NotFoundError: The post does not exist or its author is banned.
        """
        row = self.posts.get_visible(post_id)
        if row is None:
            raise NotFoundError(f"Post {post_id} not found")
        post, author = row

        comments = self.loader.load_comments_and_authors([post.id]).get(post.id, [])
        return _post_view(post, author, comments, len(comments), csrf_token)

    def _assemble(self, rows: list[tuple[Post, User]], csrf_token: str) -> list[PostView]:
        post_ids = [post.id for post, _ in rows]
        comments = self.loader.load_comments_and_authors(post_ids, self.comment_limit)
        counts = self.loader.count_comments(post_ids)
        return [
            _post_view(
                post,
                author,
                comments.get(post.id, []),
                counts.get(post.id, 0),
                csrf_token,
            )
            for post, author in rows
        ]


def _post_view(
    post: Post,
    author: User,
    comments: list[CommentView],
    comment_count: int,
    csrf_token: str,
) -> PostView:
    return PostView(
        id=post.id,
        user_id=post.user_id,
        body=post.body,
        mime=post.mime,
        created_at=post.created_at,
        image_url=image_url(post.id, post.mime),
        comment_count=comment_count,
        comments=tuple(comments),
        user=UserView.model_validate(author),
        csrf_token=csrf_token,
    )

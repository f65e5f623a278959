"""Service-level helpers for writing comments."""
from __future__ import annotations

from sqlalchemy.orm import Session

from picfeed.core.errors import NotFoundError, ValidationFault
from picfeed.models import Comment
from picfeed.repositories.comment_repo import CommentRepository
from picfeed.repositories.post_repo import PostRepository


def add_comment(db: Session, *, post_id: int, user_id: int, text: str) -> Comment:
    """Attach a comment to a visible post.

    Raises:
        NotFoundError: The post does not exist or its author is banned.
        ValidationFault: The comment is empty.
    """
    if not text.strip():
        raise ValidationFault("Comment must not be empty")
    if PostRepository(db).get_visible(post_id) is None:
        raise NotFoundError(f"Post {post_id} not found")

    comment = CommentRepository(db).create(post_id=post_id, user_id=user_id, comment=text)
    db.commit()
    db.refresh(comment)
    return comment

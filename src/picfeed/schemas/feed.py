# src/picfeed/schemas/feed.py
"""Read-only view models assembled for feed and post responses.

View models are rebuilt on every request and never persisted. They are frozen
so that a fully joined tree cannot be mutated after assembly.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserView(BaseModel):
    """Public projection of a user row (no password hash)."""

    id: int
    account_name: str
    authority: int
    created_at: datetime

    model_config = ConfigDict(frozen=True, from_attributes=True)


class CommentView(BaseModel):
    """A comment joined with its resolved author."""

    id: int
    post_id: int
    user_id: int
    comment: str
    created_at: datetime
    user: UserView

    model_config = ConfigDict(frozen=True)


class PostView(BaseModel):
    """A post joined with its author, bounded comments and total comment count."""

    id: int
    user_id: int
    body: str
    mime: str
    created_at: datetime
    image_url: str
    comment_count: int
    comments: tuple[CommentView, ...]
    user: UserView
    csrf_token: str

    model_config = ConfigDict(frozen=True)


class ProfileView(BaseModel):
    """A user's page: newest posts plus account-wide aggregates."""

    user: UserView
    posts: tuple[PostView, ...]
    post_count: int
    comment_count: int
    commented_count: int

    model_config = ConfigDict(frozen=True)

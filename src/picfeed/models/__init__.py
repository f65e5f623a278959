# src/picfeed/models/__init__.py
"""SQLAlchemy models for the Picfeed application."""

from .comment import Comment
from .post import Post
from .user import AUTHORITY_ELEVATED, AUTHORITY_ORDINARY, User

__all__ = [
    "AUTHORITY_ELEVATED", "AUTHORITY_ORDINARY",
    "Comment",
    "Post",
    "User",
]

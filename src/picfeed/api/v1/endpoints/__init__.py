# src/picfeed/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .comments import router as comments_router
from .feed import router as feed_router
from .images import router as images_router
from .posts import router as posts_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "auth_router",
    "comments_router",
    "feed_router",
    "images_router",
    "posts_router",
    "users_router",
]

# src/picfeed/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    auth_router,
    comments_router,
    feed_router,
    images_router,
    posts_router,
    users_router,
)

__all__ = [
    "admin_router",
    "auth_router",
    "comments_router",
    "feed_router",
    "images_router",
    "posts_router",
    "users_router",
]

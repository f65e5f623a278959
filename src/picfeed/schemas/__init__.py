# src/picfeed/schemas/__init__.py
"""
Pydantic schemas for API request/response models and feed view models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import BanRequest, BanResponse
from .comment import CommentCreate, CommentResponse
from .feed import CommentView, PostView, ProfileView, UserView
from .post import PostCreated
from .user import LoginRequest, LoginResponse, RegisterRequest

__all__ = [
    "BanRequest", "BanResponse",
    "CommentCreate", "CommentResponse",
    "CommentView", "PostView", "ProfileView", "UserView",
    "PostCreated",
    "LoginRequest", "LoginResponse", "RegisterRequest",
]

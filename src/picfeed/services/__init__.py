# src/picfeed/services/__init__.py
"""Business logic services for the Picfeed application."""

from .batch_loader import BatchLoader
from .feed import FeedAssembler
from .image_store import ImageStore, LocalFileStorage
from .moderation import ModerationService
from .session_store import SessionStore

__all__ = [
    "BatchLoader",
    "FeedAssembler",
    "ImageStore",
    "LocalFileStorage",
    "ModerationService",
    "SessionStore",
]

"""Error taxonomy shared by services and the API boundary."""

from __future__ import annotations


class PicfeedError(RuntimeError):
    """Base exception for all application-level failures."""


class NotFoundError(PicfeedError):
    """Entity absent or hidden by moderation.

    This is a normal outcome and is rendered as a 404 without error logging.
    """


class ValidationFault(PicfeedError):
    """Rejected input, carrying a human-readable reason."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class Fault(PicfeedError):
    """Unexpected persistence or storage failure.

    Faults are logged with context and surfaced as a generic failure.
    """


class CommentAuthorMissingError(Fault):
    """A comment references a user row that could not be loaded."""

    def __init__(self, comment_id: int, user_id: int) -> None:
        super().__init__(f"comment {comment_id} references missing user {user_id}")
        self.comment_id = comment_id
        self.user_id = user_id


class StorageFault(Fault):
    """The image file store could not complete an operation."""

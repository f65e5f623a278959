"""Moderation request/response schemas."""

from pydantic import BaseModel, Field


class BanRequest(BaseModel):
    """Schema for banning one or more accounts."""

    user_ids: list[int] = Field(..., min_length=1)
    csrf_token: str


class BanResponse(BaseModel):
    """Accounts whose banned flag was set by the request."""

    banned: list[int]

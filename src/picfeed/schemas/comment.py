"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for posting a comment."""

    post_id: int
    comment: str = Field(..., max_length=5000)
    csrf_token: str


class CommentResponse(BaseModel):
    """Schema for a freshly stored comment."""

    id: int
    post_id: int
    user_id: int
    comment: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

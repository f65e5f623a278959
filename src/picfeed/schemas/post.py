# src/picfeed/schemas/post.py
"""Post-related Pydantic schemas."""

from pydantic import BaseModel, Field


class PostCreated(BaseModel):
    """Schema returned after an image upload."""

    id: int = Field(..., description="Identifier assigned to the new post")
    image_url: str = Field(..., description="Path serving the uploaded image")

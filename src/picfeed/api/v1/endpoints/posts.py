# src/picfeed/api/v1/endpoints/posts.py
"""Post-related endpoints for the Picfeed API."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from picfeed.api.v1.dependencies import (
    CurrentLoginDep,
    CurrentUserDep,
    FeedAssemblerDep,
    ImageStoreDep,
    OptionalLoginDep,
    csrf_token_for,
    verify_csrf,
)
from picfeed.core.settings import settings
from picfeed.schemas.feed import PostView
from picfeed.schemas.post import PostCreated
from picfeed.services.image_store import image_url, mime_from_content_type

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=list[PostView])
async def list_posts(
    assembler: FeedAssemblerDep,
    login: OptionalLoginDep,
    max_created_at: datetime = Query(..., description="Return posts created at or before this time"),
    before_id: int | None = Query(
        None,
        description="Id of the last post seen; excludes it and its timestamp peers with higher ids",
    ),
) -> list[PostView]:
    """Return the next page of the global feed.

    Args:
        assembler: Feed assembler bound to the request's database session
        login: Caller's session, if any
        max_created_at: Cursor timestamp (ISO-8601)
        before_id: Optional tie-break identifier for exact de-duplication

    Returns:
        Up to one page of posts, newest first; an empty list when exhausted
    """
    return assembler.feed_before(
        max_created_at,
        settings.posts_per_page,
        csrf_token_for(login),
        before_id=before_id,
    )


@router.get("/{post_id}", response_model=PostView)
async def get_post(
    post_id: int,
    assembler: FeedAssemblerDep,
    login: OptionalLoginDep,
) -> PostView:
    """Get a post with all of its comments."""
    return assembler.resolve_post(post_id, csrf_token_for(login))


@router.post("", response_model=PostCreated, status_code=status.HTTP_201_CREATED)
async def create_post(
    user: CurrentUserDep,
    login: CurrentLoginDep,
    images: ImageStoreDep,
    file: Annotated[UploadFile, File(description="JPEG, PNG or GIF image")],
    csrf_token: Annotated[str, Form()],
    body: Annotated[str, Form()] = "",
) -> PostCreated:
    """Upload an image with a caption.

    Raises:
        HTTPException: If the CSRF token does not match the session
    """
    verify_csrf(login, csrf_token)
    mime = mime_from_content_type(file.content_type)
    # One byte past the limit is enough to reject oversized uploads.
    data = await file.read(settings.upload_limit + 1)
    post_id = images.store_upload(user.id, data, mime, body)
    return PostCreated(id=post_id, image_url=image_url(post_id, mime))

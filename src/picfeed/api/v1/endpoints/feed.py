"""Global feed endpoint."""
from __future__ import annotations

from fastapi import APIRouter

from picfeed.api.v1.dependencies import FeedAssemblerDep, OptionalLoginDep, csrf_token_for
from picfeed.core.settings import settings
from picfeed.schemas.feed import PostView

router = APIRouter(tags=["feed"])


@router.get("/feed", response_model=list[PostView])
async def get_latest_feed(assembler: FeedAssemblerDep, login: OptionalLoginDep) -> list[PostView]:
    """Return the first page of the global feed."""
    return assembler.latest_feed(settings.posts_per_page, csrf_token_for(login))

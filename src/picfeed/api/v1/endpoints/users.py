"""User profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from picfeed.api.v1.dependencies import FeedAssemblerDep, OptionalLoginDep, csrf_token_for
from picfeed.core.settings import settings
from picfeed.schemas.feed import ProfileView

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{account_name}", response_model=ProfileView)
async def get_profile(
    account_name: str,
    assembler: FeedAssemblerDep,
    login: OptionalLoginDep,
) -> ProfileView:
    """Return a user's newest posts and activity counters.

    Banned and unknown accounts both answer 404.
    """
    return assembler.profile_feed(account_name, settings.posts_per_page, csrf_token_for(login))

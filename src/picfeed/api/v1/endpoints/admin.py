"""Moderation endpoints restricted to elevated accounts."""

from __future__ import annotations

from fastapi import APIRouter

from picfeed.api.v1.dependencies import (
    CurrentLoginDep,
    ElevatedUserDep,
    SessionDep,
    verify_csrf,
)
from picfeed.schemas.admin import BanRequest, BanResponse
from picfeed.schemas.feed import UserView
from picfeed.services.moderation import ModerationService

router = APIRouter(prefix="/admin", tags=["moderation"])


@router.get("/banned", response_model=list[UserView])
async def list_bannable_users(moderator: ElevatedUserDep, db: SessionDep) -> list[UserView]:
    """List ordinary accounts that can still be banned, newest first."""
    return [UserView.model_validate(user) for user in ModerationService.list_bannable(db)]


@router.post("/banned", response_model=BanResponse)
async def ban_users(
    payload: BanRequest,
    moderator: ElevatedUserDep,
    login: CurrentLoginDep,
    db: SessionDep,
) -> BanResponse:
    """Soft-ban the given accounts."""
    verify_csrf(login, payload.csrf_token)
    banned = ModerationService.ban_users(db, payload.user_ids, moderator_id=moderator.id)
    return BanResponse(banned=banned)

"""Comment endpoints for the Picfeed API."""

from fastapi import APIRouter, status

from picfeed.api.v1.dependencies import CurrentLoginDep, CurrentUserDep, SessionDep, verify_csrf
from picfeed.schemas.comment import CommentCreate, CommentResponse
from picfeed.services.comment_service import add_comment

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    user: CurrentUserDep,
    login: CurrentLoginDep,
    db: SessionDep,
) -> CommentResponse:
    """Comment on a post."""
    verify_csrf(login, payload.csrf_token)
    comment = add_comment(db, post_id=payload.post_id, user_id=user.id, text=payload.comment)
    return CommentResponse.model_validate(comment)

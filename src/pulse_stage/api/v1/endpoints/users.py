"""User profile and activity endpoints for the Pulse API."""

from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status

from pulse_stage.models import User
from pulse_stage.schemas.post import PostResponse
from pulse_stage.schemas.user import UserEarnings, UserPublicProfile, UserResponse, UserStats
from pulse_stage.services import feed
from pulse_stage.services.post_service import to_post_response

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUserDep) -> User:
    """Return the authenticated user's profile, balance included."""
    return current_user


@router.get("/me/stats", response_model=UserStats)
async def get_my_stats(current_user: CurrentUserDep, db: SessionDep) -> UserStats:
    """Count bookmarks, votes and tips given by the caller and posts written."""
    return feed.user_stats(db, current_user.id)


@router.get("/me/earnings", response_model=UserEarnings)
async def get_my_earnings(current_user: CurrentUserDep, db: SessionDep) -> UserEarnings:
    """Summarise tips received against tips and downvotes spent."""
    return feed.user_earnings(db, current_user.id)


@router.get("/me/posts", response_model=list[PostResponse])
async def get_my_voted_posts(
    current_user: CurrentUserDep,
    db: SessionDep,
    type: Literal["upvoted", "downvoted", "bookmarked"] = Query("upvoted"),  # noqa: A002
    page: int = Query(1, ge=1),
    per_page: int = Query(feed.DEFAULT_PER_PAGE, ge=1, le=feed.MAX_PER_PAGE),
) -> list[PostResponse]:
    """List posts the caller upvoted, downvoted or bookmarked."""
    posts = feed.voted_posts(db, current_user.id, type, page, per_page)
    return [to_post_response(post) for post in posts]


@router.get("/{user_id}/posts", response_model=list[PostResponse])
async def get_user_posts(
    user_id: int,
    db: SessionDep,
    page: int = Query(1, ge=1),
    per_page: int = Query(feed.DEFAULT_PER_PAGE, ge=1, le=feed.MAX_PER_PAGE),
) -> list[PostResponse]:
    """List a user's top-level posts, newest first."""
    if db.get(User, user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return [to_post_response(post) for post in feed.user_posts(db, user_id, page, per_page)]


@router.get("/{user_id}", response_model=UserPublicProfile)
async def get_public_profile(user_id: int, db: SessionDep) -> UserPublicProfile:
    """Return a user's public profile with post and received-vote totals."""
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return feed.public_profile(db, user)

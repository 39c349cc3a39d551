"""Feed endpoints for the Pulse API."""

from fastapi import APIRouter, Query

from pulse_stage.schemas.post import PostResponse
from pulse_stage.services import feed
from pulse_stage.services.post_service import to_post_response

from ..dependencies import SessionDep

router = APIRouter(prefix="/feed", tags=["feed"])

PageQuery = Query(1, ge=1, description="1-based page number")
PerPageQuery = Query(feed.DEFAULT_PER_PAGE, ge=1, le=feed.MAX_PER_PAGE)


@router.get("/explore", response_model=list[PostResponse])
async def explore(
    db: SessionDep,
    page: int = PageQuery,
    per_page: int = PerPageQuery,
) -> list[PostResponse]:
    """Newest top-level posts."""
    return [to_post_response(post) for post in feed.explore(db, page, per_page)]


@router.get("/trending", response_model=list[PostResponse])
async def trending(
    db: SessionDep,
    page: int = PageQuery,
    per_page: int = PerPageQuery,
) -> list[PostResponse]:
    """Top-level posts ranked by reputation, then by net votes."""
    return [to_post_response(post) for post in feed.trending(db, page, per_page)]

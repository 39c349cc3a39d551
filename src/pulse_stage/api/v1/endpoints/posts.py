"""Post-related endpoints for the Pulse API."""

from fastapi import APIRouter, Query, Response, status

from pulse_stage.schemas.post import BookmarkResponse, PostCreate, PostResponse, PostUpdate
from pulse_stage.services import feed
from pulse_stage.services.post_service import to_post_response

from ..dependencies import CurrentUserDep, PostServiceDep, SessionDep

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> PostResponse:
    """Create a new top-level post.

    Args:
        post_data: Title, body, images and optional preview id
        current_user: Authenticated author
        service: Post service bound to the request session

    Returns:
        The created post
    """
    post = service.create_post(current_user.id, post_data)
    return to_post_response(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, service: PostServiceDep) -> PostResponse:
    """Get a single post by id."""
    return to_post_response(service.get_post(post_id))


@router.patch("/{post_id}", response_model=PostResponse)
async def edit_post(
    post_id: int,
    post_data: PostUpdate,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> PostResponse:
    """Edit a post owned by the caller; omitted fields are left unchanged."""
    post = service.edit_post(post_id, current_user.id, post_data)
    return to_post_response(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> Response:
    """Delete a post owned by the caller together with all of its replies."""
    service.delete_post(post_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{post_id}/replies",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reply(
    post_id: int,
    post_data: PostCreate,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> PostResponse:
    """Reply to an existing post."""
    post = service.create_reply(post_id, current_user.id, post_data)
    return to_post_response(post)


@router.get("/{post_id}/replies", response_model=list[PostResponse])
async def list_replies(
    post_id: int,
    db: SessionDep,
    service: PostServiceDep,
    page: int = Query(1, ge=1),
    per_page: int = Query(feed.DEFAULT_PER_PAGE, ge=1, le=feed.MAX_PER_PAGE),
) -> list[PostResponse]:
    """List direct replies of a post, oldest first."""
    service.get_post(post_id)
    return [to_post_response(post) for post in feed.replies_of(db, post_id, page, per_page)]


@router.post("/{post_id}/bookmark", response_model=BookmarkResponse)
async def toggle_bookmark(
    post_id: int,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> BookmarkResponse:
    """Bookmark the post, or remove the caller's existing bookmark."""
    bookmarked = service.toggle_bookmark(post_id, current_user.id)
    return BookmarkResponse(post_id=post_id, bookmarked=bookmarked)

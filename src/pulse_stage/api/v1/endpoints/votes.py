"""Vote-related endpoints for the Pulse API."""

from fastapi import APIRouter

from pulse_stage.schemas.post import PostResponse
from pulse_stage.schemas.vote import MyVoteResponse, VoteCreate
from pulse_stage.services.post_service import to_post_response
from pulse_stage.services.votes import VoteLedger

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", response_model=PostResponse)
async def cast_vote(
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostResponse:
    """Upvote (direction 1) or downvote (direction -1) a post.

    Voting the opposite way flips an existing vote; repeating the same
    vote leaves everything unchanged.
    """
    ledger = VoteLedger(db)
    if vote_data.direction == 1:
        post = ledger.upvote(vote_data.post_id, current_user.id)
    else:
        post = ledger.downvote(vote_data.post_id, current_user.id)
    return to_post_response(post)


@router.get("/{post_id}/my-vote", response_model=MyVoteResponse)
async def get_my_vote(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVoteResponse:
    """Return the caller's current vote on a post."""
    return MyVoteResponse(direction=VoteLedger(db).current_direction(post_id, current_user.id))

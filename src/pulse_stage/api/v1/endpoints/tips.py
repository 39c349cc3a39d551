"""Tip endpoints for the Pulse API."""

from fastapi import APIRouter

from pulse_stage.schemas.vote import TipCreate, TipResponse
from pulse_stage.services.tips import TipLedger

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/tips", tags=["tips"])


@router.post("/", response_model=TipResponse)
async def tip_post(
    tip_data: TipCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> TipResponse:
    """Pay one unit of balance to the author of a post."""
    tip = TipLedger(db).tip(tip_data.post_id, current_user.id)
    return TipResponse(post_id=tip.post_id, count=tip.count)

"""Link preview endpoints for the Pulse API."""

from fastapi import APIRouter, Query

from pulse_stage.schemas.preview import PreviewResponse
from pulse_stage.services.previews import PreviewResolver, to_preview_response

from ..dependencies import CurrentUserDep, MetadataClientDep, SessionDep

router = APIRouter(prefix="/previews", tags=["previews"])


@router.get("", response_model=PreviewResponse)
async def resolve_preview(
    db: SessionDep,
    client: MetadataClientDep,
    current_user: CurrentUserDep,
    url: str = Query("", description="URL to resolve into a link preview"),
) -> PreviewResponse:
    """Resolve a URL to its deduplicated link preview.

    Known URLs and their aliases are served from the database; anything else
    is fetched from the metadata-extraction service and stored.
    """
    preview = await PreviewResolver(db, client).resolve(url)
    return to_preview_response(preview)

"""Resolution of URLs to deduplicated link previews.

A URL maps to exactly one :class:`~pulse_stage.models.Preview`. Lookups match
either the preview's canonical ``url`` or one of its recorded aliases
(``canonicals``); only a miss reaches the metadata-extraction service. When the
service reports a canonical URL that already has a preview, the submitted URL
is recorded as a new alias instead of creating a duplicate row.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Any
from urllib.parse import urlsplit

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pulse_stage.core.errors import InternalError, InvalidInputError
from pulse_stage.models import Preview, PreviewCanonical
from pulse_stage.schemas.post import PreviewSummary
from pulse_stage.schemas.preview import PreviewResponse, SourcePostSummary
from pulse_stage.services.metadata import MetadataClient

logger = logging.getLogger(__name__)

YOUTUBE_ID_PATTERN = re.compile(
    r"^(?:https?://)?(?:www\.)?(?:youtube\.com|youtu\.be)/(?:watch\?v=)?([a-zA-Z0-9_-]{11}).*"
)
YOUTUBE_ID_LENGTH = 11


def is_valid_url(value: str) -> bool:
    """Return True for a single absolute URL with no embedded whitespace."""
    candidate = value.strip()
    if not candidate or any(char.isspace() for char in candidate):
        return False
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def extract_youtube_id(url: str) -> str | None:
    """Return the 11-character video id of a youtube.com / youtu.be URL."""
    match = YOUTUBE_ID_PATTERN.match(url)
    if match and len(match.group(1)) == YOUTUBE_ID_LENGTH:
        return match.group(1)
    return None


def find_preview(db: Session, url: str) -> Preview | None:
    """Return the preview whose canonical URL or alias equals ``url``."""
    alias_owner = select(PreviewCanonical.preview_id).where(PreviewCanonical.url == url)
    stmt = select(Preview).where(or_(Preview.url == url, Preview.id.in_(alias_owner)))
    return db.execute(stmt).scalars().first()


def add_alias(preview: Preview, url: str) -> bool:
    """Record ``url`` as an alias of ``preview``; False if already known."""
    if url == preview.url or url in preview.canonicals:
        return False
    preview.aliases.append(PreviewCanonical(url=url))
    return True


def _decode(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return html.unescape(value)


def _first_href(links: dict[str, Any], key: str) -> str | None:
    entries = links.get(key) or []
    if isinstance(entries, list) and entries and isinstance(entries[0], dict):
        return entries[0].get("href")
    return None


class PreviewResolver:
    """Resolve URLs to previews, consulting the metadata service on a cache miss."""

    def __init__(self, db: Session, client: MetadataClient) -> None:
        self.db = db
        self.client = client

    async def resolve(self, url: str) -> Preview:
        """Return the single preview representing ``url``, creating it if needed.

        Raises:
            InvalidInputError: If ``url`` is empty or not a valid URL.
            UpstreamError: If the metadata service fails.
        """
        candidate = (url or "").strip()
        if not candidate:
            raise InvalidInputError("Url required")
        if not is_valid_url(candidate):
            raise InvalidInputError("Invalid url provided")

        cached = find_preview(self.db, candidate)
        if cached is not None:
            return cached

        payload = await self.client.fetch(candidate)
        meta = payload.get("meta") or {}
        links = payload.get("links") or {}
        canonical = (meta.get("canonical") or "").strip() or None

        if canonical and canonical != candidate:
            existing = find_preview(self.db, canonical)
            if existing is not None:
                return self._record_alias(existing, candidate)

        preview = Preview(
            url=canonical or candidate,
            title=_decode(meta.get("title")),
            description=_decode(meta.get("description")),
            site_name=meta.get("site"),
            favicon=_first_href(links, "icon"),
            image=_first_href(links, "thumbnail"),
            youtube_id=extract_youtube_id(candidate),
        )
        if canonical and canonical != candidate:
            preview.aliases.append(PreviewCanonical(url=candidate))
        target_url = preview.url
        self.db.add(preview)
        try:
            self.db.commit()
        except IntegrityError:
            # Another request stored the same canonical URL first.
            self.db.rollback()
            return self._alias_onto_winner(target_url, candidate)
        return preview

    def _record_alias(self, preview: Preview, candidate: str) -> Preview:
        canonical = preview.url
        if not add_alias(preview, candidate):
            return preview
        try:
            self.db.commit()
        except IntegrityError:
            # Another request recorded the same alias first.
            self.db.rollback()
            return self._alias_onto_winner(canonical, candidate)
        logger.debug("Recorded alias %s for preview %s", candidate, preview.id)
        return preview

    def _alias_onto_winner(self, canonical: str, candidate: str) -> Preview:
        winner = find_preview(self.db, canonical) or find_preview(self.db, candidate)
        if winner is None:
            raise InternalError("Preview could not be stored")
        if add_alias(winner, candidate):
            self.db.commit()
        return winner


def to_preview_summary(preview: Preview | None) -> PreviewSummary | None:
    """Convert a Preview ORM instance to the summary embedded in posts."""
    if preview is None:
        return None
    return PreviewSummary(
        id=preview.id,
        url=preview.url,
        title=preview.title,
        description=preview.description,
        site_name=preview.site_name,
        favicon=preview.favicon,
        image=preview.image,
        youtube_id=preview.youtube_id,
    )


def to_preview_response(preview: Preview) -> PreviewResponse:
    """Convert a Preview ORM instance to an API schema."""
    source = preview.source_post
    return PreviewResponse(
        id=preview.id,
        url=preview.url,
        canonicals=preview.canonicals,
        title=preview.title,
        description=preview.description,
        site_name=preview.site_name,
        favicon=preview.favicon,
        image=preview.image,
        youtube_id=preview.youtube_id,
        source_post=(
            SourcePostSummary(id=source.id, user_id=source.user_id, created_at=source.created_at)
            if source is not None
            else None
        ),
    )

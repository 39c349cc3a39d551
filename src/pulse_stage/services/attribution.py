"""Source-post attribution for link previews.

``Preview.sourcePost`` names the oldest existing post that uses the preview.
It is recomputed with an explicit query whenever a post's preview association
is created, changed or removed, rather than maintained incrementally.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from pulse_stage.models import Post, Preview

logger = logging.getLogger(__name__)


def oldest_post_using_preview(db: Session, preview_id: int, excluded_post_id: int | None) -> int | None:
    """Return the id of the oldest post referencing the preview, skipping one post."""
    stmt = select(Post.id).where(Post.preview_id == preview_id)
    if excluded_post_id is not None:
        stmt = stmt.where(Post.id != excluded_post_id)
    stmt = stmt.order_by(Post.created_at.asc(), Post.id.asc()).limit(1)
    return db.execute(stmt).scalar_one_or_none()


def reattribute(
    db: Session,
    preview_id: int | None,
    post_id: int,
    set_only: bool = False,
) -> Preview | None:
    """Maintain the source post of a preview.

    Args:
        db: Database session; the change is flushed, not committed.
        preview_id: Preview whose attribution is affected.
        post_id: Post gaining the preview (``set_only``) or losing it.
        set_only: Claim the preview for ``post_id`` only if nobody holds it.
            Otherwise recompute from the remaining posts, excluding ``post_id``.

    Returns:
        The preview, or None if it does not exist.
    """
    if preview_id is None:
        return None
    preview = db.get(Preview, preview_id)
    if preview is None:
        return None

    if set_only:
        if preview.source_post_id is None:
            preview.source_post_id = post_id
            logger.debug("Preview %s attributed to post %s", preview_id, post_id)
    else:
        oldest_id = oldest_post_using_preview(db, preview_id, post_id)
        if oldest_id is None:
            preview.source_post_id = None
            logger.debug("Preview %s no longer has a source post", preview_id)
        elif oldest_id != preview.source_post_id:
            preview.source_post_id = oldest_id
            logger.debug("Preview %s re-attributed to post %s", preview_id, oldest_id)

    db.flush()
    return preview

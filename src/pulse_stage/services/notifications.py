"""Grouped notification bookkeeping."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from pulse_stage.models import NotificationGroup


def bump_notification_group(
    db: Session,
    *,
    post_id: int,
    recipient_id: int,
    kind: str,
) -> NotificationGroup:
    """Increment the (post, kind) notification group, creating it with count 1."""
    group = db.execute(
        select(NotificationGroup).where(
            NotificationGroup.post_id == post_id,
            NotificationGroup.type == kind,
        )
    ).scalars().first()

    if group is None:
        group = NotificationGroup(post_id=post_id, user_id=recipient_id, type=kind, count=1)
        db.add(group)
    else:
        group.count = NotificationGroup.count + 1
    db.flush()
    return group

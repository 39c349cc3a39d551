"""Grouped notifications aggregated per (post, type)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pulse_stage.db.session import Base
from pulse_stage.db.time import utcnow

NOTIFICATION_UPVOTE = "upvote"
NOTIFICATION_DOWNVOTE = "downvote"
NOTIFICATION_COMMENT = "comment"


class NotificationGroup(Base):
    """Running count of same-type events on a post, addressed to its author."""

    __tablename__ = "notification_group"
    __table_args__ = (UniqueConstraint("post", "type", name="uq_notification_group_post_type"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        "post",
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        "user",
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="unread")
    created_at: Mapped[datetime] = mapped_column(
        "createdAt",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

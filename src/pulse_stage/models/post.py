"""SQLAlchemy models for posts and related attributes."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pulse_stage.db.session import Base
from pulse_stage.db.time import utcnow

if TYPE_CHECKING:
    from .engagement import PostBookmark, PostTip, PostVote
    from .preview import Preview
    from .user import User

VOTE_UP = 1
VOTE_DOWN = -1


class Post(Base):
    """Primary content entity produced by users.

    Replies are posts whose ``repliedTo`` points at their parent. Column names
    follow the persisted document field names so existing data maps 1:1.
    """

    __tablename__ = "post"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        "userId",
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )
    # Parent chain for replies; top-level posts have repliedTo = NULL.
    replied_to_id: Mapped[int | None] = mapped_column(
        "repliedTo",
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    preview_id: Mapped[int | None] = mapped_column(
        "preview",
        Integer,
        ForeignKey("preview.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # +1 per upvote, -1 per downvote, +/-2 when a vote flips direction.
    total_votes: Mapped[int] = mapped_column("totalVotes", Integer, nullable=False, default=0)
    reputation: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    # Voter reputation mass gathered since the last decay cycle.
    last_upvotes_weight: Mapped[float] = mapped_column(
        "lastUpvotesWeight", Float, nullable=False, default=0.0
    )
    last_downvotes_weight: Mapped[float] = mapped_column(
        "lastDownvotesWeight", Float, nullable=False, default=0.0
    )

    created_at: Mapped[datetime] = mapped_column(
        "createdAt",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        "updatedAt",
        DateTime(timezone=True),
        nullable=True,
    )

    author: Mapped[User] = relationship("User", viewonly=True)
    parent: Mapped[Post | None] = relationship(
        "Post",
        remote_side=[id],
        viewonly=True,
    )
    replies: Mapped[list[Post]] = relationship(
        "Post",
        viewonly=True,
        order_by="Post.created_at",
    )
    preview: Mapped[Preview | None] = relationship(
        "Preview",
        foreign_keys=[preview_id],
        viewonly=True,
    )
    votes: Mapped[list[PostVote]] = relationship("PostVote", viewonly=True)
    tips: Mapped[list[PostTip]] = relationship("PostTip", viewonly=True)
    bookmarks: Mapped[list[PostBookmark]] = relationship("PostBookmark", viewonly=True)

    @property
    def upvotes(self) -> list[int]:
        """Return the ids of users currently upvoting this post."""
        return [vote.user_id for vote in self.votes if vote.direction == VOTE_UP]

    @property
    def downvotes(self) -> list[int]:
        """Return the ids of users currently downvoting this post."""
        return [vote.user_id for vote in self.votes if vote.direction == VOTE_DOWN]

    @property
    def book_marks(self) -> list[int]:
        return [bookmark.user_id for bookmark in self.bookmarks]

    @property
    def reply_ids(self) -> list[int]:
        return [reply.id for reply in self.replies]

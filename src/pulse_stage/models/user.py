"""SQLAlchemy models for user accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pulse_stage.db.session import Base
from pulse_stage.db.time import utcnow


class User(Base):
    """Account holding a spendable balance and a vote weight.

    ``balance`` is a plain integer counter: it is spent by voting and tipping
    and earned by receiving upvotes and tips. ``reputation`` is the weight
    this user's votes contribute to a post's vote-weight accumulators.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column("displayName", Text, nullable=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reputation: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    created_at: Mapped[datetime] = mapped_column(
        "createdAt",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

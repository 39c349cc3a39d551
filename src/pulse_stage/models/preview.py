"""SQLAlchemy models for deduplicated link previews."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pulse_stage.db.session import Base
from pulse_stage.db.time import utcnow

if TYPE_CHECKING:
    from .post import Post

URL_MAX_LENGTH = 2048


class Preview(Base):
    """Link preview keyed by its canonical URL.

    Alternate URLs that resolve to the same canonical URL are kept in
    ``canonicals`` so repeat submissions hit the cache instead of the
    metadata-extraction service.
    """

    __tablename__ = "preview"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(String(URL_MAX_LENGTH), unique=True, nullable=False)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    site_name: Mapped[str | None] = mapped_column("siteName", Text, nullable=True)
    favicon: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    youtube_id: Mapped[str | None] = mapped_column("youtubeId", String(11), nullable=True)

    # Oldest post currently using this preview. A lookup hint, recomputed on
    # every preview association change; never owns the post.
    source_post_id: Mapped[int | None] = mapped_column(
        "sourcePost",
        Integer,
        ForeignKey(
            "post.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_preview_source_post",
        ),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        "createdAt",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    aliases: Mapped[list[PreviewCanonical]] = relationship(
        "PreviewCanonical",
        back_populates="preview",
        cascade="all, delete-orphan",
        order_by="PreviewCanonical.id",
    )
    source_post: Mapped[Post | None] = relationship(
        "Post",
        foreign_keys=[source_post_id],
        viewonly=True,
    )

    @property
    def canonicals(self) -> list[str]:
        """Return the alternate URLs known to resolve to ``url``."""
        return [alias.url for alias in self.aliases]


class PreviewCanonical(Base):
    """Alternate URL recorded for a preview's canonical URL."""

    __tablename__ = "preview_canonical"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    preview_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("preview.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(String(URL_MAX_LENGTH), unique=True, nullable=False)

    preview: Mapped[Preview] = relationship("Preview", back_populates="aliases")

"""Periodic reputation decay for posts.

Every cycle rewrites all posts in a single ``UPDATE``::

    reputation = CASE WHEN reputation >= floor
                      THEN decay * reputation + weight * (lastUpvotesWeight - lastDownvotesWeight)
                      ELSE 0 END
    lastUpvotesWeight = 0
    lastDownvotesWeight = 0

A post already below the floor is zeroed and that cycle's vote weight is
discarded, even when it is positive.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from sqlalchemy import Update, case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pulse_stage.core.settings import settings
from pulse_stage.db.session import SessionLocal
from pulse_stage.models import Post

logger = logging.getLogger(__name__)


def build_decay_statement(
    decay_factor: float | None = None,
    weight_factor: float | None = None,
    floor: float | None = None,
) -> Update:
    """Return the bulk ``UPDATE`` applying one decay cycle to every post."""
    decay_factor = settings.reputation_decay_factor if decay_factor is None else decay_factor
    weight_factor = settings.reputation_vote_weight_factor if weight_factor is None else weight_factor
    floor = settings.reputation_floor if floor is None else floor

    weight_delta = Post.last_upvotes_weight - Post.last_downvotes_weight
    return (
        update(Post)
        .values(
            {
                Post.reputation: case(
                    (
                        Post.reputation >= floor,
                        Post.reputation * decay_factor + weight_delta * weight_factor,
                    ),
                    else_=0.0,
                ),
                Post.last_upvotes_weight: 0.0,
                Post.last_downvotes_weight: 0.0,
            }
        )
        .execution_options(synchronize_session=False)
    )


def apply_reputation_decay(db: Session) -> int:
    """Run one decay cycle and commit it.

    Returns:
        Number of posts updated.
    """
    result = db.execute(build_decay_statement())
    db.commit()
    # Rows were rewritten server-side; drop any stale in-session state.
    db.expire_all()
    return result.rowcount


class ReputationDecayWorker:
    """Runs the decay cycle on a fixed interval in the background."""

    def __init__(
        self,
        interval_seconds: float | None = None,
        session_factory: Callable[[], Session] | None = None,
    ) -> None:
        """Initialize the decay worker.

        Args:
            interval_seconds: Seconds between cycles; defaults to settings.
            session_factory: Session factory; defaults to ``SessionLocal``.
        """
        self.interval_seconds = (
            settings.reputation_decay_interval_seconds
            if interval_seconds is None
            else interval_seconds
        )
        self._session_factory = session_factory
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    async def start(self) -> None:
        """Start the background decay loop."""

        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background decay loop."""

        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        interval = max(0.1, float(self.interval_seconds))

        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
            if self._stopping.is_set():
                break

            try:
                await asyncio.to_thread(self.run_once)
            except SQLAlchemyError as e:
                logger.error("Reputation decay cycle failed: %s", e, exc_info=True)

    def run_once(self) -> int:
        """Run a single decay cycle in a fresh session."""
        factory = self._session_factory or SessionLocal
        db = factory()
        try:
            updated = apply_reputation_decay(db)
        finally:
            db.close()
        logger.info("Decayed reputation of %d posts", updated)
        return updated

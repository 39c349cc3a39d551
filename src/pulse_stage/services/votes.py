"""Vote ledger: toggles up/down votes and moves the balance they cost.

An upvote costs the voter one unit of balance, credited to the post author,
adds the voter's reputation to the post's ``lastUpvotesWeight`` and counts as
a one-unit tip. A downvote costs the same unit but credits the system account,
and adds to ``lastDownvotesWeight``. Voting in the opposite direction flips
the existing vote, moving ``totalVotes`` by two and withdrawing the voter's
weight from the opposite accumulator.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from pulse_stage.core.errors import ForbiddenError, NotFoundError
from pulse_stage.core.settings import settings
from pulse_stage.models import Post, PostVote, User
from pulse_stage.models.notification import NOTIFICATION_DOWNVOTE, NOTIFICATION_UPVOTE
from pulse_stage.models.post import VOTE_DOWN, VOTE_UP
from pulse_stage.services.ledger import increment_tip, transfer_balance
from pulse_stage.services.notifications import bump_notification_group

logger = logging.getLogger(__name__)


class VoteLedger:
    """Apply upvotes and downvotes to posts."""

    def __init__(self, db: Session, admin_account_id: int | None = None) -> None:
        self.db = db
        self.admin_account_id = (
            admin_account_id if admin_account_id is not None else settings.admin_account_id
        )

    def upvote(self, post_id: int, voter_id: int) -> Post:
        """Upvote a post on behalf of ``voter_id``."""
        return self._cast(post_id, voter_id, VOTE_UP)

    def downvote(self, post_id: int, voter_id: int) -> Post:
        """Downvote a post on behalf of ``voter_id``."""
        return self._cast(post_id, voter_id, VOTE_DOWN)

    def current_direction(self, post_id: int, voter_id: int) -> int:
        """Return 1, -1, or 0 when the user has not voted on the post."""
        vote = self.db.get(PostVote, (post_id, voter_id))
        return vote.direction if vote is not None else 0

    def _get_admin_account(self) -> User:
        admin = self.db.get(User, self.admin_account_id) if self.admin_account_id is not None else None
        if admin is None:
            raise NotFoundError("Systems account not found")
        return admin

    def _cast(self, post_id: int, voter_id: int, direction: int) -> Post:
        action = "upvote" if direction == VOTE_UP else "downvote"

        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        author = self.db.get(User, post.user_id)
        if author is None:
            raise NotFoundError("Post author not found")
        voter = self.db.get(User, voter_id)
        if voter is None:
            raise NotFoundError("User not found")
        if author.id == voter.id:
            raise ForbiddenError(f"Cannot {action} your own post")
        recipient = author if direction == VOTE_UP else self._get_admin_account()

        existing = self.db.get(PostVote, (post.id, voter.id))
        if existing is not None and existing.direction == direction:
            # Repeating a vote is a no-op; nothing is charged twice.
            logger.debug("User %s already cast %s on post %s", voter.id, action, post.id)
            return post

        flipped = existing is not None
        if existing is not None:
            existing.direction = direction
        else:
            self.db.add(PostVote(post_id=post.id, user_id=voter.id, direction=direction))

        step = 2 if flipped else 1
        weight = voter.reputation
        if direction == VOTE_UP:
            post.total_votes = Post.total_votes + step
            post.last_upvotes_weight = Post.last_upvotes_weight + weight
            if flipped:
                post.last_downvotes_weight = Post.last_downvotes_weight - weight
        else:
            post.total_votes = Post.total_votes - step
            post.last_downvotes_weight = Post.last_downvotes_weight + weight
            if flipped:
                post.last_upvotes_weight = Post.last_upvotes_weight - weight
        self.db.flush()

        transfer_balance(self.db, payer=voter, payee=recipient)
        if direction == VOTE_UP:
            increment_tip(self.db, post.id, voter.id)

        bump_notification_group(
            self.db,
            post_id=post.id,
            recipient_id=author.id,
            kind=NOTIFICATION_UPVOTE if direction == VOTE_UP else NOTIFICATION_DOWNVOTE,
        )

        self.db.commit()
        logger.info("User %s cast %s on post %s (flipped=%s)", voter.id, action, post.id, flipped)
        return post

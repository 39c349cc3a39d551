"""Tip ledger: pays a post's author one unit from the tipper."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from pulse_stage.core.errors import ForbiddenError, NotFoundError
from pulse_stage.models import Post, PostTip, User
from pulse_stage.services.ledger import increment_tip, transfer_balance

logger = logging.getLogger(__name__)


class TipLedger:
    """Transfer balance from tippers to post authors."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def tip(self, post_id: int, tipper_id: int) -> PostTip:
        """Tip the author of ``post_id`` and bump the tipper's counter.

        Unlike upvotes, tips do not create notifications.
        """
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        tipper = self.db.get(User, tipper_id)
        if tipper is None:
            raise NotFoundError("User not found")
        author = self.db.get(User, post.user_id)
        if author is None:
            raise NotFoundError("Post author not found")
        if author.id == tipper.id:
            raise ForbiddenError("Cannot tip yourself")

        transfer_balance(self.db, payer=tipper, payee=author)
        tip = increment_tip(self.db, post.id, tipper.id)
        self.db.commit()
        logger.info("User %s tipped the author of post %s", tipper.id, post.id)
        return tip

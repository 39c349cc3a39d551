"""Balance and tip-counter bookkeeping shared by the vote and tip ledgers.

Counters are written as SQL increments (``col = col + n``) rather than
read-modify-write in Python, so concurrent votes and tips on the same rows do
not lose updates.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from pulse_stage.models import PostTip, User


def transfer_balance(db: Session, payer: User, payee: User, amount: int = 1) -> None:
    """Move ``amount`` from ``payer`` to ``payee``.

    Balances are plain counters and may go negative.
    """
    if payer.id == payee.id:
        return
    payer.balance = User.balance - amount
    payee.balance = User.balance + amount
    db.flush()


def increment_tip(db: Session, post_id: int, user_id: int) -> PostTip:
    """Add one to the user's tip counter on a post, creating it at 1."""
    tip = db.get(PostTip, (post_id, user_id))
    if tip is None:
        tip = PostTip(post_id=post_id, user_id=user_id, count=1)
        db.add(tip)
    else:
        tip.count = PostTip.count + 1
    db.flush()
    return tip

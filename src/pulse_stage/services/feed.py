"""Read-side queries: feeds, user post lists and engagement summaries."""

from __future__ import annotations

from typing import Literal

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, selectinload

from pulse_stage.models import Post, PostBookmark, PostTip, PostVote, User
from pulse_stage.models.post import VOTE_DOWN, VOTE_UP
from pulse_stage.schemas.user import UserEarnings, UserPublicProfile, UserStats

VotedKind = Literal["upvoted", "downvoted", "bookmarked"]

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100


def _with_listing_options(stmt: Select) -> Select:
    return stmt.options(
        selectinload(Post.author),
        selectinload(Post.preview),
        selectinload(Post.votes),
        selectinload(Post.tips),
        selectinload(Post.bookmarks),
        selectinload(Post.replies),
    )


def _paginate(db: Session, stmt: Select, page: int, per_page: int) -> list[Post]:
    page = max(1, page)
    per_page = max(1, min(per_page, MAX_PER_PAGE))
    stmt = _with_listing_options(stmt).offset((page - 1) * per_page).limit(per_page)
    return list(db.execute(stmt).scalars().unique())


def explore(db: Session, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> list[Post]:
    """Top-level posts, newest first."""
    stmt = (
        select(Post)
        .where(Post.replied_to_id.is_(None))
        .order_by(Post.created_at.desc(), Post.id.desc())
    )
    return _paginate(db, stmt, page, per_page)


def trending(db: Session, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> list[Post]:
    """Top-level posts with non-negative reputation, highest first."""
    stmt = (
        select(Post)
        .where(Post.replied_to_id.is_(None), Post.reputation >= 0)
        .order_by(Post.reputation.desc(), Post.total_votes.desc(), Post.id.desc())
    )
    return _paginate(db, stmt, page, per_page)


def replies_of(db: Session, post_id: int, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> list[Post]:
    """Direct replies of a post, oldest first."""
    stmt = (
        select(Post)
        .where(Post.replied_to_id == post_id)
        .order_by(Post.created_at.asc(), Post.id.asc())
    )
    return _paginate(db, stmt, page, per_page)


def user_posts(db: Session, user_id: int, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> list[Post]:
    """Top-level posts written by ``user_id``, newest first."""
    stmt = (
        select(Post)
        .where(Post.user_id == user_id, Post.replied_to_id.is_(None))
        .order_by(Post.created_at.desc(), Post.id.desc())
    )
    return _paginate(db, stmt, page, per_page)


def voted_posts(
    db: Session,
    user_id: int,
    kind: VotedKind,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
) -> list[Post]:
    """Posts the user upvoted, downvoted or bookmarked, newest first."""
    if kind == "bookmarked":
        ids = select(PostBookmark.post_id).where(PostBookmark.user_id == user_id)
    else:
        direction = VOTE_UP if kind == "upvoted" else VOTE_DOWN
        ids = select(PostVote.post_id).where(
            PostVote.user_id == user_id,
            PostVote.direction == direction,
        )
    stmt = select(Post).where(Post.id.in_(ids)).order_by(Post.created_at.desc(), Post.id.desc())
    return _paginate(db, stmt, page, per_page)


def _count(db: Session, stmt: Select) -> int:
    return db.execute(stmt).scalar() or 0


def user_stats(db: Session, user_id: int) -> UserStats:
    """Count the engagement ``user_id`` has given and the posts they wrote."""
    bookmarks_count = _count(
        db, select(func.count()).select_from(PostBookmark).where(PostBookmark.user_id == user_id)
    )
    upvotes_count = _count(
        db,
        select(func.count())
        .select_from(PostVote)
        .where(PostVote.user_id == user_id, PostVote.direction == VOTE_UP),
    )
    downvotes_count = _count(
        db,
        select(func.count())
        .select_from(PostVote)
        .where(PostVote.user_id == user_id, PostVote.direction == VOTE_DOWN),
    )
    total_posts = _count(db, select(func.count()).select_from(Post).where(Post.user_id == user_id))
    tips_count = _count(
        db, select(func.coalesce(func.sum(PostTip.count), 0)).where(PostTip.user_id == user_id)
    )
    return UserStats(
        bookmarks_count=bookmarks_count,
        upvotes_count=upvotes_count,
        downvotes_count=downvotes_count,
        total_posts=total_posts,
        tips_count=tips_count,
    )


def user_earnings(db: Session, user_id: int) -> UserEarnings:
    """Summarise balance flow.

    Income is every tip unit received on the user's posts (upvotes included,
    since each upvote counts as a tip). Spendings are the tip units given plus
    downvotes given.
    """
    income = _count(
        db,
        select(func.coalesce(func.sum(PostTip.count), 0))
        .join(Post, Post.id == PostTip.post_id)
        .where(Post.user_id == user_id),
    )
    tips_given = _count(
        db, select(func.coalesce(func.sum(PostTip.count), 0)).where(PostTip.user_id == user_id)
    )
    downvotes_given = _count(
        db,
        select(func.count())
        .select_from(PostVote)
        .where(PostVote.user_id == user_id, PostVote.direction == VOTE_DOWN),
    )
    return UserEarnings(total_income=income, total_spendings=tips_given + downvotes_given)


def public_profile(db: Session, user: User) -> UserPublicProfile:
    """Build the public profile of ``user``, counting votes received on every post they wrote."""
    authored = select(Post.id).where(Post.user_id == user.id)
    posts_count = _count(db, select(func.count()).select_from(Post).where(Post.user_id == user.id))
    upvotes = _count(
        db,
        select(func.count())
        .select_from(PostVote)
        .where(PostVote.post_id.in_(authored), PostVote.direction == VOTE_UP),
    )
    downvotes = _count(
        db,
        select(func.count())
        .select_from(PostVote)
        .where(PostVote.post_id.in_(authored), PostVote.direction == VOTE_DOWN),
    )
    return UserPublicProfile(
        id=user.id,
        username=user.username,
        display_name=user.display_name,
        avatar=user.avatar,
        reputation=user.reputation,
        posts_count=posts_count,
        upvotes=upvotes,
        downvotes=downvotes,
    )

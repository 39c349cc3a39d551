"""Version 1 API endpoints."""

from .endpoints import (
    feed_router,
    posts_router,
    previews_router,
    tips_router,
    users_router,
    votes_router,
)

__all__ = [
    "feed_router",
    "posts_router",
    "previews_router",
    "tips_router",
    "users_router",
    "votes_router",
]

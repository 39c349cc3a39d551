# src/pulse_stage/models/__init__.py
"""SQLAlchemy models for the Pulse Stage application."""

from .engagement import PostBookmark, PostTip, PostVote
from .notification import NotificationGroup
from .post import Post
from .preview import Preview, PreviewCanonical
from .user import User

__all__ = [
    "NotificationGroup",
    "Post",
    "PostBookmark", "PostTip", "PostVote",
    "Preview", "PreviewCanonical",
    "User",
]

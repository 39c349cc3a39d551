"""Service-level helpers for creating, editing and deleting posts."""
from __future__ import annotations

import html
import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from pulse_stage.core.errors import ForbiddenError, NotFoundError
from pulse_stage.core.settings import settings
from pulse_stage.db.time import utcnow
from pulse_stage.models import (
    NotificationGroup,
    Post,
    PostBookmark,
    PostTip,
    PostVote,
    Preview,
    User,
)
from pulse_stage.models.notification import NOTIFICATION_COMMENT
from pulse_stage.schemas.post import PostAuthor, PostCreate, PostResponse, PostUpdate, TipEntry
from pulse_stage.services.attribution import reattribute
from pulse_stage.services.broadcast import EVENT_NEW_POST, Broadcaster
from pulse_stage.services.media import MediaStore, cleanup_media, extract_inline_images
from pulse_stage.services.notifications import bump_notification_group
from pulse_stage.services.previews import to_preview_summary

logger = logging.getLogger(__name__)


class PostService:
    """Create, edit, delete and bookmark posts."""

    def __init__(self, db: Session, broadcaster: Broadcaster, media_store: MediaStore) -> None:
        self.db = db
        self.broadcaster = broadcaster
        self.media_store = media_store

    def get_post(self, post_id: int) -> Post:
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def _get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _ensure_preview(self, preview_id: int | None) -> None:
        if preview_id is not None and self.db.get(Preview, preview_id) is None:
            raise NotFoundError("Preview not found")

    def create_post(self, author_id: int, data: PostCreate) -> Post:
        """Create a top-level post."""
        return self._create(author_id, data, parent=None)

    def create_reply(self, parent_id: int, author_id: int, data: PostCreate) -> Post:
        """Create a reply and notify the parent's author."""
        parent = self.get_post(parent_id)
        return self._create(author_id, data, parent=parent)

    def _create(self, author_id: int, data: PostCreate, parent: Post | None) -> Post:
        author = self._get_user(author_id)
        self._ensure_preview(data.preview_id)

        post = Post(
            user_id=author.id,
            replied_to_id=parent.id if parent is not None else None,
            preview_id=data.preview_id,
            title=html.unescape(data.title) if data.title is not None else None,
            text=data.text,
            images=list(data.images),
            total_votes=0,
            reputation=settings.initial_post_reputation,
            last_upvotes_weight=0.0,
            last_downvotes_weight=0.0,
            created_at=utcnow(),
        )
        self.db.add(post)
        self.db.flush()

        if post.preview_id is not None:
            reattribute(self.db, post.preview_id, post.id, set_only=True)

        if parent is not None and parent.user_id != author.id:
            bump_notification_group(
                self.db,
                post_id=parent.id,
                recipient_id=parent.user_id,
                kind=NOTIFICATION_COMMENT,
            )

        self.db.commit()
        self._publish(
            EVENT_NEW_POST,
            {
                "user": {
                    "id": author.id,
                    "username": author.username,
                    "displayName": author.display_name,
                    "avatar": author.avatar,
                    "reputation": author.reputation,
                },
                "postId": post.id,
                "title": post.title,
            },
        )
        return post

    def edit_post(self, post_id: int, editor_id: int, data: PostUpdate) -> Post:
        """Apply an edit; re-attribute previews when the association changes."""
        post = self.get_post(post_id)
        if post.user_id != editor_id:
            raise ForbiddenError("Cannot edit another user's post")

        changes = data.model_dump(exclude_unset=True)
        new_preview_id = changes.get("preview_id", post.preview_id)
        self._ensure_preview(new_preview_id)

        discarded: list[str] = []
        if "title" in changes:
            post.title = html.unescape(changes["title"]) if changes["title"] is not None else None
        if "text" in changes:
            kept_inline = set(extract_inline_images(changes["text"]))
            discarded.extend(src for src in extract_inline_images(post.text) if src not in kept_inline)
            post.text = changes["text"]
        if "images" in changes:
            new_images = list(changes["images"] or [])
            discarded.extend(image for image in post.images or [] if image not in new_images)
            post.images = new_images

        previous_preview_id = post.preview_id
        if new_preview_id != previous_preview_id:
            post.preview_id = new_preview_id
            self.db.flush()
            if previous_preview_id is not None:
                reattribute(self.db, previous_preview_id, post.id)
            if new_preview_id is not None:
                reattribute(self.db, new_preview_id, post.id, set_only=True)

        post.updated_at = utcnow()
        self.db.commit()
        cleanup_media(self.media_store, discarded)
        return post

    def collect_thread_ids(self, root_id: int) -> list[int]:
        """Return ``root_id`` and the ids of all its transitive replies."""
        thread = select(Post.id).where(Post.id == root_id).cte(name="thread", recursive=True)
        thread = thread.union_all(select(Post.id).where(Post.replied_to_id == thread.c.id))
        return list(self.db.execute(select(thread.c.id)).scalars())

    def delete_post(self, post_id: int, requester_id: int) -> list[int]:
        """Delete a post together with every reply beneath it.

        Returns:
            Identifiers of all deleted posts.
        """
        post = self.get_post(post_id)
        if post.user_id != requester_id:
            raise ForbiddenError("Cannot delete another user's post")

        thread_ids = self.collect_thread_ids(post.id)
        rows = self.db.execute(
            select(Post.preview_id, Post.images, Post.text).where(Post.id.in_(thread_ids))
        ).all()
        preview_ids = {row.preview_id for row in rows if row.preview_id is not None}
        media: list[str] = []
        for row in rows:
            media.extend(row.images or [])
            media.extend(extract_inline_images(row.text))

        # Dependents first; Post last.
        for model, column in (
            (PostVote, PostVote.post_id),
            (PostTip, PostTip.post_id),
            (PostBookmark, PostBookmark.post_id),
            (NotificationGroup, NotificationGroup.post_id),
            (Post, Post.id),
        ):
            self.db.execute(
                delete(model)
                .where(column.in_(thread_ids))
                .execution_options(synchronize_session="fetch")
            )

        for preview_id in sorted(preview_ids):
            reattribute(self.db, preview_id, post_id)

        self.db.commit()
        logger.info("Deleted post %s with %d replies", post_id, len(thread_ids) - 1)
        cleanup_media(self.media_store, media)
        return thread_ids

    def toggle_bookmark(self, post_id: int, user_id: int) -> bool:
        """Add or remove the user's bookmark; returns True when now bookmarked."""
        post = self.get_post(post_id)
        user = self._get_user(user_id)

        bookmark = self.db.get(PostBookmark, (post.id, user.id))
        if bookmark is None:
            self.db.add(PostBookmark(post_id=post.id, user_id=user.id))
            bookmarked = True
        else:
            self.db.delete(bookmark)
            bookmarked = False
        self.db.commit()
        return bookmarked

    def _publish(self, event: str, payload: Mapping[str, Any]) -> None:
        try:
            self.broadcaster.emit(event, payload)
        except Exception as exc:  # noqa: BLE001 - broadcast delivery is best effort
            logger.warning("Failed to broadcast %s: %s", event, exc)


def to_post_response(post: Post) -> PostResponse:
    """Convert a Post ORM instance to an API schema."""
    author = post.author
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        author=(
            PostAuthor(
                id=author.id,
                username=author.username,
                display_name=author.display_name,
                avatar=author.avatar,
                reputation=author.reputation,
            )
            if author is not None
            else None
        ),
        replied_to=post.replied_to_id,
        replies=post.reply_ids,
        preview=to_preview_summary(post.preview),
        title=post.title,
        text=post.text,
        images=list(post.images or []),
        upvotes=post.upvotes,
        downvotes=post.downvotes,
        total_votes=post.total_votes,
        reputation=post.reputation,
        last_upvotes_weight=post.last_upvotes_weight,
        last_downvotes_weight=post.last_downvotes_weight,
        tips=[TipEntry(user_id=tip.user_id, count=tip.count) for tip in post.tips],
        book_marks=post.book_marks,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )

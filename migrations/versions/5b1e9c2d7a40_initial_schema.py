"""initial schema

Revision ID: 5b1e9c2d7a40
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b1e9c2d7a40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, posts, previews, engagement and notification tables."""
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("displayName", sa.Text(), nullable=True),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("balance", sa.Integer(), nullable=False),
        sa.Column("reputation", sa.Float(), nullable=False),
        sa.Column("createdAt", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "preview",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("siteName", sa.Text(), nullable=True),
        sa.Column("favicon", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("youtubeId", sa.String(length=11), nullable=True),
        sa.Column("sourcePost", sa.Integer(), nullable=True),
        sa.Column("createdAt", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("url"),
    )
    op.create_table(
        "preview_canonical",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("preview_id", sa.Integer(), nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.ForeignKeyConstraint(["preview_id"], ["preview.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("url"),
    )
    op.create_index("ix_preview_canonical_preview_id", "preview_canonical", ["preview_id"])

    op.create_table(
        "post",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("userId", sa.Integer(), nullable=False),
        sa.Column("repliedTo", sa.Integer(), nullable=True),
        sa.Column("preview", sa.Integer(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("text", sa.Text(), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("totalVotes", sa.Integer(), nullable=False),
        sa.Column("reputation", sa.Float(), nullable=False),
        sa.Column("lastUpvotesWeight", sa.Float(), nullable=False),
        sa.Column("lastDownvotesWeight", sa.Float(), nullable=False),
        sa.Column("createdAt", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updatedAt", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["userId"], ["user_account.id"]),
        sa.ForeignKeyConstraint(["repliedTo"], ["post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["preview"], ["preview.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_userId", "post", ["userId"])
    op.create_index("ix_post_repliedTo", "post", ["repliedTo"])
    op.create_index("ix_post_preview", "post", ["preview"])
    op.create_index("ix_post_createdAt", "post", ["createdAt"])

    # preview.sourcePost and post.preview reference each other.
    with op.batch_alter_table("preview") as batch_op:
        batch_op.create_foreign_key(
            "fk_preview_source_post",
            "post",
            ["sourcePost"],
            ["id"],
            ondelete="SET NULL",
        )

    op.create_table(
        "post_vote",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("direction", sa.SmallInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("direction IN (1, -1)", name="ck_post_vote_direction"),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id", "user_id"),
    )
    op.create_index("ix_post_vote_user_id", "post_vote", ["user_id"])

    op.create_table(
        "post_tip",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.CheckConstraint("count >= 1", name="ck_post_tip_count_positive"),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id", "user_id"),
    )
    op.create_index("ix_post_tip_user_id", "post_tip", ["user_id"])

    op.create_table(
        "post_bookmark",
        sa.Column("post_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id", "user_id"),
    )
    op.create_index("ix_post_bookmark_user_id", "post_bookmark", ["user_id"])

    op.create_table(
        "notification_group",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("post", sa.Integer(), nullable=False),
        sa.Column("user", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("createdAt", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["post"], ["post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user"], ["user_account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post", "type", name="uq_notification_group_post_type"),
    )
    op.create_index("ix_notification_group_user", "notification_group", ["user"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_notification_group_user", table_name="notification_group")
    op.drop_table("notification_group")
    op.drop_index("ix_post_bookmark_user_id", table_name="post_bookmark")
    op.drop_table("post_bookmark")
    op.drop_index("ix_post_tip_user_id", table_name="post_tip")
    op.drop_table("post_tip")
    op.drop_index("ix_post_vote_user_id", table_name="post_vote")
    op.drop_table("post_vote")
    with op.batch_alter_table("preview") as batch_op:
        batch_op.drop_constraint("fk_preview_source_post", type_="foreignkey")
    op.drop_index("ix_post_createdAt", table_name="post")
    op.drop_index("ix_post_preview", table_name="post")
    op.drop_index("ix_post_repliedTo", table_name="post")
    op.drop_index("ix_post_userId", table_name="post")
    op.drop_table("post")
    op.drop_index("ix_preview_canonical_preview_id", table_name="preview_canonical")
    op.drop_table("preview_canonical")
    op.drop_table("preview")
    op.drop_table("user_account")

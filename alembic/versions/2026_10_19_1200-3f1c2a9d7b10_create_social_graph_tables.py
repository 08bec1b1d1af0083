"""create_social_graph_tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f1c2a9d7b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "userfollow",
        sa.Column("follower_id", sa.String(), sa.ForeignKey("user.id"), primary_key=True),
        sa.Column("following_id", sa.String(), sa.ForeignKey("user.id"), primary_key=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("follower_id != following_id", name="ck_userfollow_not_self"),
    )
    op.create_index("ix_userfollow_follower_id", "userfollow", ["follower_id"])
    op.create_index("ix_userfollow_following_id", "userfollow", ["following_id"])

    op.create_table(
        "friendship",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("friend_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "friend_id", name="uq_friendship_pair"),
    )
    op.create_index("ix_friendship_user_id", "friendship", ["user_id"])
    op.create_index("ix_friendship_friend_id", "friendship", ["friend_id"])

    op.create_table(
        "post",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("video_url", sa.String(), nullable=True),
        sa.Column("privacy", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_post_user_id", "post", ["user_id"])

    op.create_table(
        "comment",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("content", sa.String(length=2000), nullable=False),
        sa.Column("post_id", sa.String(), sa.ForeignKey("post.id"), nullable=False),
        sa.Column("user_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("parent_comment_id", sa.String(), sa.ForeignKey("comment.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_comment_post_id", "comment", ["post_id"])
    op.create_index("ix_comment_parent_comment_id", "comment", ["parent_comment_id"])

    op.create_table(
        "postlike",
        sa.Column("post_id", sa.String(), sa.ForeignKey("post.id"), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("user.id"), primary_key=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "message",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("sender_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("receiver_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("content", sa.String(length=2000), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_message_sender_id", "message", ["sender_id"])
    op.create_index("ix_message_receiver_id", "message", ["receiver_id"])

    op.create_table(
        "notification",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("actor_id", sa.String(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("reference_id", sa.String(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_notification_user_id", "notification", ["user_id"])
    op.create_index("ix_notification_type", "notification", ["type"])
    op.create_index("ix_notification_reference_id", "notification", ["reference_id"])


def downgrade() -> None:
    op.drop_table("notification")
    op.drop_table("message")
    op.drop_table("postlike")
    op.drop_table("comment")
    op.drop_table("post")
    op.drop_table("friendship")
    op.drop_table("userfollow")
    op.drop_table("user")

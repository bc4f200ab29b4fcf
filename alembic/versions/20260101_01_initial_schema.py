"""
Initial schema: users, videos, comments, tweets, likes, subscriptions, playlists.

- UUID primary keys with `gen_random_uuid()` fallback (pgcrypto / PG13+).
- Dependent rows (comments, likes, playlist memberships) cascade with their parent.
- Partial unique indexes keep one like per (user, target kind, target).
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# Revision identifiers, used by Alembic.
revision = "20260101_01_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _id() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        nullable=False,
        server_default=sa.text("gen_random_uuid()"),
    )


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _user_fk(name: str, **kw) -> sa.Column:
    return sa.Column(name, postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, **kw)


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    # --- users ---
    op.create_table(
        "users",
        _id(),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=128), nullable=False),
        sa.Column("avatar", sa.String(length=1024), nullable=True),
        sa.Column("cover_image", sa.String(length=1024), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("length(btrim(username)) > 0", name=op.f("ck_users_username_not_blank")),
        sa.CheckConstraint("username = lower(username)", name=op.f("ck_users_username_lower")),
    )
    op.create_index("ix_users_email_lower", "users", [sa.text("lower(email)")], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    # --- videos ---
    op.create_table(
        "videos",
        _id(),
        _user_fk("owner_id"),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("video_file", sa.String(length=1024), nullable=False),
        sa.Column("thumbnail", sa.String(length=1024), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("views", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("views >= 0", name=op.f("ck_videos_views_nonneg")),
        sa.CheckConstraint("duration >= 0", name=op.f("ck_videos_duration_nonneg")),
        sa.CheckConstraint("length(btrim(title)) > 0", name=op.f("ck_videos_title_not_blank")),
    )
    op.create_index("ix_videos_owner_id", "videos", ["owner_id"])
    op.create_index("ix_videos_created_at", "videos", ["created_at"])
    op.create_index("ix_videos_owner_created", "videos", ["owner_id", "created_at"])
    op.create_index(
        "ix_videos_published_created", "videos", ["created_at"], postgresql_where=sa.text("is_published")
    )

    # --- comments ---
    op.create_table(
        "comments",
        _id(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("video_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("videos.id", ondelete="CASCADE"), nullable=False),
        _user_fk("owner_id"),
        *_timestamps(),
        sa.CheckConstraint("length(btrim(content)) > 0", name=op.f("ck_comments_content_not_blank")),
    )
    op.create_index("ix_comments_owner_id", "comments", ["owner_id"])
    op.create_index("ix_comments_created_at", "comments", ["created_at"])
    op.create_index("ix_comments_video_created", "comments", ["video_id", "created_at"])

    # --- tweets ---
    op.create_table(
        "tweets",
        _id(),
        sa.Column("content", sa.Text(), nullable=False),
        _user_fk("owner_id"),
        *_timestamps(),
        sa.CheckConstraint("length(btrim(content)) > 0", name=op.f("ck_tweets_content_not_blank")),
    )
    op.create_index("ix_tweets_created_at", "tweets", ["created_at"])
    op.create_index("ix_tweets_owner_created", "tweets", ["owner_id", "created_at"])

    # --- likes ---
    op.create_table(
        "likes",
        _id(),
        _user_fk("liked_by"),
        sa.Column("video_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("videos.id", ondelete="CASCADE"), nullable=True),
        sa.Column("comment_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("comments.id", ondelete="CASCADE"), nullable=True),
        sa.Column("tweet_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("tweets.id", ondelete="CASCADE"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("num_nonnulls(video_id, comment_id, tweet_id) = 1", name=op.f("ck_likes_single_target")),
    )
    for target in ("video", "comment", "tweet"):
        col = f"{target}_id"
        where = sa.text(f"{col} IS NOT NULL")
        op.create_index(f"uq_likes_user_{target}", "likes", ["liked_by", col], unique=True, postgresql_where=where)
        op.create_index(f"ix_likes_{target}", "likes", [col], postgresql_where=where)

    # --- subscriptions ---
    op.create_table(
        "subscriptions",
        _id(),
        _user_fk("subscriber_id"),
        _user_fk("channel_id"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"),
        sa.CheckConstraint("subscriber_id <> channel_id", name=op.f("ck_subscriptions_not_self")),
    )
    op.create_index("ix_subscriptions_channel_id", "subscriptions", ["channel_id"])

    # --- playlists ---
    op.create_table(
        "playlists",
        _id(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        _user_fk("owner_id"),
        *_timestamps(),
        sa.CheckConstraint("length(btrim(name)) > 0", name=op.f("ck_playlists_name_not_blank")),
    )
    op.create_index("ix_playlists_owner_id", "playlists", ["owner_id"])
    op.create_index("ix_playlists_created_at", "playlists", ["created_at"])

    op.create_table(
        "playlist_videos",
        sa.Column("playlist_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False),
        sa.Column("video_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("videos.id", ondelete="CASCADE"), nullable=False),
        sa.Column("added_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("playlist_id", "video_id", name="pk_playlist_videos"),
    )
    op.create_index("ix_playlist_videos_video", "playlist_videos", ["video_id"])


def downgrade() -> None:
    op.drop_table("playlist_videos")
    op.drop_table("playlists")
    op.drop_table("subscriptions")
    op.drop_table("likes")
    op.drop_table("tweets")
    op.drop_table("comments")
    op.drop_table("videos")
    op.drop_table("users")

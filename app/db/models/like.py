from __future__ import annotations

"""
❤️ VidShare · Like (user → video | comment | tweet)
==================================================

Edge row with no attributes of its own. Exactly one target column is set.

Highlights
----------
• **One like per (user, target)** via partial unique indexes, one per target
  kind. Toggle inserts use `ON CONFLICT DO NOTHING` against these indexes.
• Every target FK cascades, so deleting a video/comment/tweet drops its likes.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, func, text
from sqlalchemy.dialects.postgresql import UUID

from app.db.base_class import Base, UUIDPKMixin


class Like(UUIDPKMixin, Base):
    __tablename__ = "likes"

    liked_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # ── Target (exactly one) ────────────────────────────────────────────────
    video_id = Column(UUID(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=True)
    comment_id = Column(UUID(as_uuid=True), ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    tweet_id = Column(UUID(as_uuid=True), ForeignKey("tweets.id", ondelete="CASCADE"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("num_nonnulls(video_id, comment_id, tweet_id) = 1", name="single_target"),
        Index("uq_likes_user_video", "liked_by", "video_id", unique=True,
              postgresql_where=text("video_id IS NOT NULL")),
        Index("uq_likes_user_comment", "liked_by", "comment_id", unique=True,
              postgresql_where=text("comment_id IS NOT NULL")),
        Index("uq_likes_user_tweet", "liked_by", "tweet_id", unique=True,
              postgresql_where=text("tweet_id IS NOT NULL")),
        # Count lookups per target
        Index("ix_likes_video", "video_id", postgresql_where=text("video_id IS NOT NULL")),
        Index("ix_likes_comment", "comment_id", postgresql_where=text("comment_id IS NOT NULL")),
        Index("ix_likes_tweet", "tweet_id", postgresql_where=text("tweet_id IS NOT NULL")),
    )

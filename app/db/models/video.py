from __future__ import annotations

"""
🎬 VidShare · Video
==================

A published (or draft) upload owned by one channel.

Highlights
----------
• **Gated visibility**: `is_published = false` rows are visible to the owner only.
• `views` is a monotonic, non-negative counter bumped after authorized reads.
• Media lives in the object store; rows keep the public URLs only.
• Deleting a video cascades to its comments, likes and playlist memberships.
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import UUID

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin


class Video(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "videos"

    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
                      nullable=False, index=True, doc="Channel that published the video.")

    # ── Content ─────────────────────────────────────────────────────────────
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    video_file = Column(String(1024), nullable=False, doc="Public URL of the media object.")
    thumbnail = Column(String(1024), nullable=False, doc="Public URL of the thumbnail object.")
    duration = Column(Float, nullable=False, server_default=text("0"), doc="Seconds.")

    # ── State ───────────────────────────────────────────────────────────────
    views = Column(BigInteger, nullable=False, server_default=text("0"))
    is_published = Column(Boolean, nullable=False, server_default=text("true"))

    __table_args__ = (
        CheckConstraint("views >= 0", name="views_nonneg"),
        CheckConstraint("duration >= 0", name="duration_nonneg"),
        CheckConstraint("length(btrim(title)) > 0", name="title_not_blank"),
        Index("ix_videos_owner_created", "owner_id", "created_at"),
        Index("ix_videos_published_created", "created_at", postgresql_where=text("is_published")),
    )

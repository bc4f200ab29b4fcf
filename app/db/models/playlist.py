from __future__ import annotations

"""
📚 VidShare · Playlist & PlaylistVideo
=====================================

A named, owner-curated set of videos.

Why this design?
----------------
• `PlaylistVideo` uses a **composite PK** (playlist_id, video_id): membership
  is a deduplicated set, so adding twice is rejected by the key itself.
• Membership rows vanish with either their playlist or their video.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin


class Playlist(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "playlists"

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("length(btrim(name)) > 0", name="name_not_blank"),
    )


class PlaylistVideo(Base):
    __tablename__ = "playlist_videos"

    playlist_id = Column(UUID(as_uuid=True), ForeignKey("playlists.id", ondelete="CASCADE"), primary_key=True)
    video_id = Column(UUID(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True)
    added_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_playlist_videos_video", "video_id"),
    )

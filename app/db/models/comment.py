from __future__ import annotations

"""
💬 VidShare · Comment
====================

Text left by any signed-in user on a video; editable and deletable by its
author only. Removed with its video (FK cascade).
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Text
from sqlalchemy.dialects.postgresql import UUID

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin


class Comment(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "comments"

    content = Column(Text, nullable=False)
    video_id = Column(UUID(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("length(btrim(content)) > 0", name="content_not_blank"),
        Index("ix_comments_video_created", "video_id", "created_at"),
    )

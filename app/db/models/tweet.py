from __future__ import annotations

"""
🐦 VidShare · Tweet (short channel post)
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Text
from sqlalchemy.dialects.postgresql import UUID

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin


class Tweet(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "tweets"

    content = Column(Text, nullable=False)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        CheckConstraint("length(btrim(content)) > 0", name="content_not_blank"),
        Index("ix_tweets_owner_created", "owner_id", "created_at"),
    )

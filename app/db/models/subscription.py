from __future__ import annotations

"""
🔔 VidShare · Subscription (subscriber → channel)
================================================

Both ends are users. One row per pair; a user never subscribes to themself.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID

from app.db.base_class import Base, UUIDPKMixin


class Subscription(UUIDPKMixin, Base):
    __tablename__ = "subscriptions"

    subscriber_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    channel_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
                        nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"),
        CheckConstraint("subscriber_id <> channel_id", name="not_self"),
    )

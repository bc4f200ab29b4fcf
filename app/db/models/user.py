from __future__ import annotations

"""
👤 VidShare · User (channel owner / viewer)
==========================================

Public profile of an account. Credentials and sign-up are owned by the
upstream identity service; this service reads users to render owner
profiles, resolve channels, and compute channel stats.

Design highlights
-----------------
• **Case-insensitive uniqueness** for username and email (functional indexes).
• A user *is* a channel: subscriptions point at `users.id`.
• `email` is only ever exposed on the caller's own stats endpoint.
"""

from sqlalchemy import CheckConstraint, Column, Index, String, func

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin


class User(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "users"

    # ── Identity / public profile ─────────────────────────────────────────────
    username = Column(String(64), nullable=False, unique=True, doc="Lower-cased handle; also the channel name.")
    email = Column(String(320), nullable=False, unique=True)
    full_name = Column(String(128), nullable=False)
    avatar = Column(String(1024), nullable=True, doc="Avatar URL.")
    cover_image = Column(String(1024), nullable=True, doc="Channel cover URL.")

    __table_args__ = (
        CheckConstraint("length(btrim(username)) > 0", name="username_not_blank"),
        CheckConstraint("username = lower(username)", name="username_lower"),
        Index("ix_users_email_lower", func.lower(email), unique=True),
    )

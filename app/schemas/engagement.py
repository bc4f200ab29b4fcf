from __future__ import annotations

"""Likes, subscriptions and channel dashboard payloads."""

from typing import Optional

from app.schemas.common import CamelModel


class LikeToggleOut(CamelModel):
    is_liked: bool


class SubscriptionToggleOut(CamelModel):
    is_subscribed: bool


class EngagementStatus(CamelModel):
    is_liked: bool
    is_subscribed: bool


class ChannelStats(CamelModel):
    username: str
    email: Optional[str] = None
    subscribers_count: int = 0
    likes_count: int = 0
    videos_count: int = 0
    views_count: int = 0

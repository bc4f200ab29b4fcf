from __future__ import annotations

"""Subscriptions repository: toggle plus both directions of the channel graph."""

from typing import Any, Dict
from uuid import UUID

from fastapi import Depends
from sqlalchemy import exists
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidInputError, NotFoundError
from app.db.models import Subscription, User
from app.db.session import get_async_db
from app.services.pagination import PageResult, paginate
from app.services.query_composer import ListOptions, QueryComposer
from app.services.toggle import SUBSCRIPTION, ToggleResult, toggle_edge

CHANNEL_COLUMNS = (User.id, User.username, User.full_name, User.avatar, User.created_at)
CHANNEL_SORTS = {
    "createdAt": User.created_at,
    "username": User.username,
}


class SubscriptionRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _require_channel(self, channel_id: UUID) -> User:
        channel = await self.db.get(User, channel_id)
        if channel is None:
            raise NotFoundError("Channel not found")
        return channel

    async def toggle(self, actor_id: UUID, channel_id: UUID) -> ToggleResult:
        if actor_id == channel_id:
            raise InvalidInputError("You cannot subscribe to your own channel")
        await self._require_channel(channel_id)
        return await toggle_edge(self.db, SUBSCRIPTION, actor_id, channel_id)

    def _channels(self, actor_id: UUID, options: ListOptions) -> QueryComposer:
        return QueryComposer(User, actor_id=actor_id, options=options, columns=CHANNEL_COLUMNS)

    async def subscribers_of(self, channel_id: UUID, actor_id: UUID, options: ListOptions) -> PageResult[Dict[str, Any]]:
        """Users subscribed to `channel_id`, with their own subscriber counts."""
        await self._require_channel(channel_id)
        stmt = (
            self._channels(actor_id, options)
            .match(exists().where(Subscription.channel_id == channel_id, Subscription.subscriber_id == User.id))
            .search(User.username, User.full_name)
            .with_subscribers(User.id)
            .sort(CHANNEL_SORTS)
            .build()
        )
        return await paginate(self.db, stmt, page=options.page, limit=options.limit)

    async def subscribed_channels(self, actor_id: UUID, options: ListOptions) -> PageResult[Dict[str, Any]]:
        """Channels `actor_id` subscribes to."""
        stmt = (
            self._channels(actor_id, options)
            .match(exists().where(Subscription.subscriber_id == actor_id, Subscription.channel_id == User.id))
            .search(User.username, User.full_name)
            .with_subscribers(User.id)
            .sort(CHANNEL_SORTS)
            .build()
        )
        return await paginate(self.db, stmt, page=options.page, limit=options.limit)


def get_subscription_repository(db: AsyncSession = Depends(get_async_db)) -> SubscriptionRepository:
    return SubscriptionRepository(db)

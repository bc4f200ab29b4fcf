from __future__ import annotations

"""Tweets repository (short channel posts)."""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Like, Tweet
from app.db.session import get_async_db
from app.repositories.base import OwnedRepository
from app.services.pagination import PageResult, paginate
from app.services.query_composer import ListOptions, QueryComposer, unflatten

TWEET_SORTS = {
    "createdAt": Tweet.created_at,
    "updatedAt": Tweet.updated_at,
}


class TweetRepository(OwnedRepository):
    model = Tweet
    noun = "Tweet"

    async def create(self, actor_id: UUID, content: str) -> Dict[str, Any]:
        return await self._insert(owner_id=actor_id, content=content)

    async def list_for_user(
        self, user_id: UUID, *, actor_id: Optional[UUID], options: ListOptions
    ) -> PageResult[Dict[str, Any]]:
        stmt = (
            QueryComposer(Tweet, actor_id=actor_id, options=options)
            .match(Tweet.owner_id == user_id)
            .search(Tweet.content)
            .with_owner()
            .with_likes(Like.tweet_id)
            .sort(TWEET_SORTS)
            .build()
        )
        return await paginate(self.db, stmt, page=options.page, limit=options.limit, transform=unflatten)

    async def update(self, tweet_id: UUID, actor_id: UUID, content: str) -> Dict[str, Any]:
        return await self._update_owned(tweet_id, actor_id, {"content": content})

    async def delete(self, tweet_id: UUID, actor_id: UUID) -> Dict[str, Any]:
        return await self._delete_owned(tweet_id, actor_id)


def get_tweet_repository(db: AsyncSession = Depends(get_async_db)) -> TweetRepository:
    return TweetRepository(db)

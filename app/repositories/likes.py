from __future__ import annotations

"""Likes repository: toggles on videos/comments/tweets and the liked-videos feed."""

from typing import Any, Dict
from uuid import UUID

from fastapi import Depends
from sqlalchemy import exists
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.db.models import Comment, Like, Tweet, Video
from app.db.session import get_async_db
from app.repositories.videos import VIDEO_SORTS
from app.services.access_guard import load_visible
from app.services.pagination import PageResult, paginate
from app.services.query_composer import ListOptions, QueryComposer, unflatten
from app.services.toggle import LIKE_COMMENT, LIKE_TWEET, LIKE_VIDEO, ToggleResult, toggle_edge


class LikeRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def toggle_video_like(self, actor_id: UUID, video_id: UUID) -> ToggleResult:
        await load_visible(self.db, Video, video_id, actor_id, "Video")
        return await toggle_edge(self.db, LIKE_VIDEO, actor_id, video_id)

    async def toggle_comment_like(self, actor_id: UUID, comment_id: UUID) -> ToggleResult:
        if await self.db.get(Comment, comment_id) is None:
            raise NotFoundError("Comment not found")
        return await toggle_edge(self.db, LIKE_COMMENT, actor_id, comment_id)

    async def toggle_tweet_like(self, actor_id: UUID, tweet_id: UUID) -> ToggleResult:
        if await self.db.get(Tweet, tweet_id) is None:
            raise NotFoundError("Tweet not found")
        return await toggle_edge(self.db, LIKE_TWEET, actor_id, tweet_id)

    async def liked_videos(self, actor_id: UUID, options: ListOptions) -> PageResult[Dict[str, Any]]:
        stmt = (
            QueryComposer(Video, actor_id=actor_id, options=options)
            .match(exists().where(Like.video_id == Video.id, Like.liked_by == actor_id))
            .visible()
            .search(Video.title, Video.description)
            .with_owner()
            .with_likes(Like.video_id)
            .sort(VIDEO_SORTS)
            .build()
        )
        return await paginate(self.db, stmt, page=options.page, limit=options.limit, transform=unflatten)


def get_like_repository(db: AsyncSession = Depends(get_async_db)) -> LikeRepository:
    return LikeRepository(db)

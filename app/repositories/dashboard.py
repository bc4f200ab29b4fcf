from __future__ import annotations

"""Channel dashboard: aggregate stats, own uploads, per-video engagement flags."""

from typing import Any, Dict
from uuid import UUID

from fastapi import Depends
from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.db.models import Like, Subscription, User, Video
from app.db.session import get_async_db
from app.repositories.videos import VIDEO_SORTS
from app.services.access_guard import load_visible
from app.services.pagination import PageResult, paginate
from app.services.query_composer import ListOptions, QueryComposer


class DashboardRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def channel_stats(self, actor_id: UUID) -> Dict[str, Any]:
        """Subscriber, upload, view and like totals for the caller's channel in one query."""
        subscribers = (
            select(func.count()).select_from(Subscription)
            .where(Subscription.channel_id == actor_id)
            .scalar_subquery()
        )
        videos = select(func.count()).select_from(Video).where(Video.owner_id == actor_id).scalar_subquery()
        views = (
            select(func.coalesce(func.sum(Video.views), 0))
            .where(Video.owner_id == actor_id)
            .scalar_subquery()
        )
        likes = (
            select(func.count()).select_from(Like)
            .join(Video, Video.id == Like.video_id)
            .where(Video.owner_id == actor_id)
            .scalar_subquery()
        )
        stmt = select(
            User.username,
            User.email,
            subscribers.label("subscribers_count"),
            videos.label("videos_count"),
            views.label("views_count"),
            likes.label("likes_count"),
        ).where(User.id == actor_id)

        row = (await self.db.execute(stmt)).mappings().first()
        if row is None:
            raise NotFoundError("User not found")
        return dict(row)

    async def channel_videos(self, actor_id: UUID, options: ListOptions) -> PageResult[Dict[str, Any]]:
        # Owner view: drafts included, so no visibility stage
        stmt = (
            QueryComposer(Video, actor_id=actor_id, options=options)
            .match(Video.owner_id == actor_id)
            .search(Video.title, Video.description)
            .with_likes(Like.video_id)
            .sort(VIDEO_SORTS)
            .build()
        )
        return await paginate(self.db, stmt, page=options.page, limit=options.limit)

    async def engagement(self, actor_id: UUID, video_id: UUID, channel_id: UUID) -> Dict[str, bool]:
        await load_visible(self.db, Video, video_id, actor_id, "Video")
        if await self.db.get(User, channel_id) is None:
            raise NotFoundError("Channel not found")
        stmt = select(
            exists().where(Like.video_id == video_id, Like.liked_by == actor_id).label("is_liked"),
            exists().where(Subscription.channel_id == channel_id, Subscription.subscriber_id == actor_id).label(
                "is_subscribed"
            ),
        )
        row = (await self.db.execute(stmt)).mappings().one()
        return {"is_liked": bool(row["is_liked"]), "is_subscribed": bool(row["is_subscribed"])}


def get_dashboard_repository(db: AsyncSession = Depends(get_async_db)) -> DashboardRepository:
    return DashboardRepository(db)

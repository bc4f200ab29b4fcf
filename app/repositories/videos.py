from __future__ import annotations

"""Videos repository: public feed, detail, owner writes, view counter."""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Depends
from loguru import logger
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.db.models import Like, Video
from app.db.session import background_session, get_async_db
from app.repositories.base import OwnedRepository, row_dict
from app.services.access_guard import Action
from app.services.pagination import PageResult, paginate
from app.services.query_composer import ListOptions, QueryComposer, unflatten

VIDEO_SORTS = {
    "createdAt": Video.created_at,
    "updatedAt": Video.updated_at,
    "title": Video.title,
    "views": Video.views,
    "duration": Video.duration,
}


class VideoRepository(OwnedRepository):
    model = Video
    noun = "Video"

    async def list_videos(
        self,
        *,
        actor_id: Optional[UUID],
        options: ListOptions,
        owner_id: Optional[UUID] = None,
    ) -> PageResult[Dict[str, Any]]:
        composer = QueryComposer(Video, actor_id=actor_id, options=options)
        if owner_id is not None:
            composer.match(Video.owner_id == owner_id)
        stmt = (
            composer.visible()
            .search(Video.title, Video.description)
            .with_owner()
            .with_likes(Like.video_id)
            .sort(VIDEO_SORTS)
            .build()
        )
        return await paginate(self.db, stmt, page=options.page, limit=options.limit, transform=unflatten)

    async def get_detail(self, video_id: UUID, actor_id: Optional[UUID]) -> Dict[str, Any]:
        stmt = (
            QueryComposer(Video, actor_id=actor_id)
            .match(Video.id == video_id)
            .visible()
            .with_owner()
            .with_subscribers(Video.owner_id, prefix="owner__")
            .with_likes(Like.video_id)
            .build()
        )
        row = (await self.db.execute(stmt)).mappings().first()
        if row is None:
            raise NotFoundError("Video not found")
        return unflatten(row)

    async def create(
        self,
        *,
        owner_id: UUID,
        title: str,
        description: str,
        video_file: str,
        thumbnail: str,
        duration: float,
    ) -> Dict[str, Any]:
        return await self._insert(
            owner_id=owner_id,
            title=title,
            description=description,
            video_file=video_file,
            thumbnail=thumbnail,
            duration=duration,
        )

    async def get_owned(self, video_id: UUID, actor_id: UUID, action: Action = Action.UPDATE) -> Dict[str, Any]:
        return row_dict(await self._get_owned(video_id, actor_id, action))

    async def update(self, video_id: UUID, actor_id: UUID, **fields: Any) -> Dict[str, Any]:
        return await self._update_owned(video_id, actor_id, fields)

    async def toggle_publish(self, video_id: UUID, actor_id: UUID) -> Dict[str, Any]:
        # Flipped in SQL so concurrent toggles never write a stale value
        return await self._update_owned(video_id, actor_id, {"is_published": ~Video.is_published})

    async def delete(self, video_id: UUID, actor_id: UUID) -> Dict[str, Any]:
        return await self._delete_owned(video_id, actor_id)


async def increment_views(video_id: UUID) -> None:
    """Post-response view bump in its own session; failures are logged only."""
    try:
        async with background_session() as session:
            await session.execute(
                update(Video)
                .where(Video.id == video_id)
                .values(views=Video.views + 1, updated_at=Video.updated_at)
            )
    except Exception:
        logger.exception("View count increment failed for video {}", video_id)


def get_video_repository(db: AsyncSession = Depends(get_async_db)) -> VideoRepository:
    return VideoRepository(db)

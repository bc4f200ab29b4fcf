from __future__ import annotations

"""Comments repository (per-video threads)."""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Comment, Like, Video
from app.db.session import get_async_db
from app.repositories.base import OwnedRepository
from app.services.access_guard import load_visible
from app.services.pagination import PageResult, paginate
from app.services.query_composer import ListOptions, QueryComposer, unflatten

COMMENT_SORTS = {
    "createdAt": Comment.created_at,
    "updatedAt": Comment.updated_at,
}


class CommentRepository(OwnedRepository):
    model = Comment
    noun = "Comment"

    async def list_for_video(
        self, video_id: UUID, *, actor_id: Optional[UUID], options: ListOptions
    ) -> PageResult[Dict[str, Any]]:
        await load_visible(self.db, Video, video_id, actor_id, "Video")
        stmt = (
            QueryComposer(Comment, actor_id=actor_id, options=options)
            .match(Comment.video_id == video_id)
            .search(Comment.content)
            .with_owner()
            .with_likes(Like.comment_id)
            .sort(COMMENT_SORTS)
            .build()
        )
        return await paginate(self.db, stmt, page=options.page, limit=options.limit, transform=unflatten)

    async def add(self, video_id: UUID, actor_id: UUID, content: str) -> Dict[str, Any]:
        await load_visible(self.db, Video, video_id, actor_id, "Video")
        return await self._insert(video_id=video_id, owner_id=actor_id, content=content)

    async def update(self, comment_id: UUID, actor_id: UUID, content: str) -> Dict[str, Any]:
        return await self._update_owned(comment_id, actor_id, {"content": content})

    async def delete(self, comment_id: UUID, actor_id: UUID) -> Dict[str, Any]:
        return await self._delete_owned(comment_id, actor_id)


def get_comment_repository(db: AsyncSession = Depends(get_async_db)) -> CommentRepository:
    return CommentRepository(db)

from __future__ import annotations

"""
Playlists repository
====================

Owner-curated, deduplicated sets of videos.

• Membership changes require playlist ownership (NotFound before Forbidden).
• Adding needs a video the caller can see; an existing membership is a
  `ConflictError` decided by the composite primary key, never by a pre-read.
• Playlist detail lists only the videos visible to the caller.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.db.models import Like, Playlist, PlaylistVideo, Video
from app.db.session import get_async_db
from app.repositories.base import OwnedRepository, row_dict
from app.repositories.videos import VIDEO_SORTS
from app.services.access_guard import load_visible
from app.services.pagination import PageResult, paginate
from app.services.query_composer import ListOptions, QueryComposer, unflatten, unflatten_all
from app.services.toggle import delete_edge, insert_edge

PLAYLIST_SORTS = {
    "createdAt": Playlist.created_at,
    "updatedAt": Playlist.updated_at,
    "name": Playlist.name,
}


def _videos_count():
    return select(func.count()).select_from(PlaylistVideo).where(PlaylistVideo.playlist_id == Playlist.id)


class PlaylistRepository(OwnedRepository):
    model = Playlist
    noun = "Playlist"

    async def create(self, actor_id: UUID, name: str, description: str) -> Dict[str, Any]:
        return await self._insert(owner_id=actor_id, name=name, description=description)

    async def list_for_user(
        self, user_id: UUID, *, actor_id: Optional[UUID], options: ListOptions
    ) -> PageResult[Dict[str, Any]]:
        stmt = (
            QueryComposer(Playlist, actor_id=actor_id, options=options)
            .match(Playlist.owner_id == user_id)
            .search(Playlist.name, Playlist.description)
            .with_owner()
            .with_count("videos_count", _videos_count())
            .sort(PLAYLIST_SORTS)
            .build()
        )
        return await paginate(self.db, stmt, page=options.page, limit=options.limit, transform=unflatten)

    async def get_detail(self, playlist_id: UUID, actor_id: Optional[UUID]) -> Dict[str, Any]:
        stmt = (
            QueryComposer(Playlist, actor_id=actor_id)
            .match(Playlist.id == playlist_id)
            .with_owner()
            .with_count("videos_count", _videos_count())
            .build()
        )
        row = (await self.db.execute(stmt)).mappings().first()
        if row is None:
            raise NotFoundError("Playlist not found")

        videos = (
            QueryComposer(Video, actor_id=actor_id, options=ListOptions(sort_type="asc"))
            .match(exists().where(PlaylistVideo.playlist_id == playlist_id, PlaylistVideo.video_id == Video.id))
            .visible()
            .with_owner()
            .with_likes(Like.video_id)
            .sort(VIDEO_SORTS)
            .build()
        )
        detail = unflatten(row)
        detail["videos"] = unflatten_all((await self.db.execute(videos)).mappings().all())
        return detail

    async def get_owned(self, playlist_id: UUID, actor_id: UUID) -> Dict[str, Any]:
        return row_dict(await self._get_owned(playlist_id, actor_id))

    async def update(self, playlist_id: UUID, actor_id: UUID, **fields: Any) -> Dict[str, Any]:
        return await self._update_owned(playlist_id, actor_id, fields)

    async def delete(self, playlist_id: UUID, actor_id: UUID) -> Dict[str, Any]:
        return await self._delete_owned(playlist_id, actor_id)

    # ── Membership ──────────────────────────────────────────────────────────
    async def add_video(self, playlist_id: UUID, video_id: UUID, actor_id: UUID) -> Dict[str, Any]:
        await self._get_owned(playlist_id, actor_id)
        await load_visible(self.db, Video, video_id, actor_id, "Video")
        created = await insert_edge(
            self.db,
            PlaylistVideo,
            {"playlist_id": playlist_id, "video_id": video_id},
            conflict_columns=(PlaylistVideo.playlist_id, PlaylistVideo.video_id),
        )
        if created is None:
            await self.db.rollback()
            raise ConflictError("Video already exists in playlist")
        await self.db.commit()
        return {"playlist_id": playlist_id, "video_id": video_id}

    async def remove_video(self, playlist_id: UUID, video_id: UUID, actor_id: UUID) -> Dict[str, Any]:
        await self._get_owned(playlist_id, actor_id)
        removed = await delete_edge(
            self.db,
            PlaylistVideo,
            PlaylistVideo.playlist_id == playlist_id,
            PlaylistVideo.video_id == video_id,
        )
        if not removed:
            await self.db.rollback()
            raise NotFoundError("Video not found in playlist")
        await self.db.commit()
        return {"playlist_id": playlist_id, "video_id": video_id}


def get_playlist_repository(db: AsyncSession = Depends(get_async_db)) -> PlaylistRepository:
    return PlaylistRepository(db)

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from app.schemas.common import CamelModel, ChannelProfile


class VideoOut(CamelModel):
    id: UUID
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float = 0
    views: int = 0
    is_published: bool
    owner_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    owner: Optional[ChannelProfile] = None
    likes_count: Optional[int] = None
    is_liked: Optional[bool] = None


class VideoDeleted(CamelModel):
    deleted_video_id: UUID

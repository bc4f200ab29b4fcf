from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import constr

from app.schemas.common import CamelModel, OwnerProfile
from app.schemas.video import VideoOut


class PlaylistIn(CamelModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=200)
    description: constr(strip_whitespace=True, min_length=1, max_length=5000)


class PlaylistUpdate(CamelModel):
    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=200)] = None
    description: Optional[constr(strip_whitespace=True, min_length=1, max_length=5000)] = None


class PlaylistOut(CamelModel):
    id: UUID
    name: str
    description: str
    owner_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    owner: Optional[OwnerProfile] = None
    videos_count: Optional[int] = None


class PlaylistDetail(PlaylistOut):
    videos: List[VideoOut] = []

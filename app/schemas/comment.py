from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import constr

from app.schemas.common import CamelModel, OwnerProfile


class CommentIn(CamelModel):
    content: constr(strip_whitespace=True, min_length=1, max_length=5000)


class CommentOut(CamelModel):
    id: UUID
    content: str
    video_id: UUID
    owner_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    owner: Optional[OwnerProfile] = None
    likes_count: Optional[int] = None
    is_liked: Optional[bool] = None

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import constr

from app.schemas.common import CamelModel, OwnerProfile


class TweetIn(CamelModel):
    content: constr(strip_whitespace=True, min_length=1, max_length=1000)


class TweetOut(CamelModel):
    id: UUID
    content: str
    owner_id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    owner: Optional[OwnerProfile] = None
    likes_count: Optional[int] = None
    is_liked: Optional[bool] = None

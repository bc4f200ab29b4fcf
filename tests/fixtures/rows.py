# tests/fixtures/rows.py
"""Row builders shaped like repository output (snake_case, nested `owner`)."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _now() -> datetime:
    return datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def owner_row(owner_id: Optional[uuid.UUID] = None, **extra: Any) -> Dict[str, Any]:
    return {
        "id": owner_id or uuid.uuid4(),
        "username": "alice",
        "full_name": "Alice Example",
        "avatar": "http://media/avatars/a.png",
        **extra,
    }


def video_row(owner_id: Optional[uuid.UUID] = None, **overrides: Any) -> Dict[str, Any]:
    owner_id = owner_id or uuid.uuid4()
    row = {
        "id": uuid.uuid4(),
        "title": "Cats at play",
        "description": "Two cats and a ball",
        "video_file": "http://media/videos/v.mp4",
        "thumbnail": "http://media/thumbnails/t.png",
        "duration": 12.5,
        "views": 3,
        "is_published": True,
        "owner_id": owner_id,
        "created_at": _now(),
        "updated_at": _now(),
    }
    row.update(overrides)
    return row


def comment_row(video_id: uuid.UUID, owner_id: uuid.UUID, **overrides: Any) -> Dict[str, Any]:
    row = {
        "id": uuid.uuid4(),
        "content": "Nice video",
        "video_id": video_id,
        "owner_id": owner_id,
        "created_at": _now(),
        "updated_at": _now(),
    }
    row.update(overrides)
    return row


def tweet_row(owner_id: uuid.UUID, **overrides: Any) -> Dict[str, Any]:
    row = {"id": uuid.uuid4(), "content": "hello", "owner_id": owner_id, "created_at": _now(), "updated_at": _now()}
    row.update(overrides)
    return row


def playlist_row(owner_id: uuid.UUID, **overrides: Any) -> Dict[str, Any]:
    row = {
        "id": uuid.uuid4(),
        "name": "Favourites",
        "description": "Best of",
        "owner_id": owner_id,
        "created_at": _now(),
        "updated_at": _now(),
    }
    row.update(overrides)
    return row

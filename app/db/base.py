# app/db/base.py
"""
VidShare · SQLAlchemy Base registry
===================================

Import all ORM models so their tables are registered on `Base.metadata`.
Alembic's `env.py` imports `Base` from here.

Tip: Keep this file import-only; no runtime logic.
"""

from app.db.base_class import Base

# ───────────────────────────────────────────────────────────────
# Accounts & content
# ───────────────────────────────────────────────────────────────
from app.db.models.user import User
from app.db.models.video import Video
from app.db.models.comment import Comment
from app.db.models.tweet import Tweet

# ───────────────────────────────────────────────────────────────
# Edges & curation
# ───────────────────────────────────────────────────────────────
from app.db.models.like import Like
from app.db.models.subscription import Subscription
from app.db.models.playlist import Playlist, PlaylistVideo

__all__ = [
    "Base",
    "User",
    "Video",
    "Comment",
    "Tweet",
    "Like",
    "Subscription",
    "Playlist",
    "PlaylistVideo",
]

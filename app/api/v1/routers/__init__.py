"""
🧭 VidShare • API v1 Router Aggregator
=====================================

Exports the **combined `router`** and a `build_v1_router()` factory so the
app (and tests) can mount the v1 surface under any prefix.

Quick usage
-----------
    from app.api.v1.routers import build_v1_router
    app.include_router(build_v1_router(), prefix="/api/v1")

Each resource router carries its own prefix (`/videos`, `/comments`, ...);
identity and ownership checks live in the child routers.
"""

from fastapi import APIRouter

from app.api.http_utils import ERROR_RESPONSES

from .comments import router as comments_router
from .dashboard import router as dashboard_router
from .likes import router as likes_router
from .playlists import router as playlists_router
from .subscriptions import router as subscriptions_router
from .tweets import router as tweets_router
from .videos import router as videos_router


# ─────────────────────────────────────────────────────────────────────────────
# 🧩 Factory: build a combined v1 router with stable path layout
# ─────────────────────────────────────────────────────────────────────────────
def build_v1_router() -> APIRouter:
    r = APIRouter()
    for child in (
        videos_router,
        comments_router,
        tweets_router,
        likes_router,
        subscriptions_router,
        playlists_router,
        dashboard_router,
    ):
        r.include_router(child, responses=ERROR_RESPONSES)
    return r


router = build_v1_router()

__all__ = [
    "router",
    "build_v1_router",
    "videos_router",
    "comments_router",
    "tweets_router",
    "likes_router",
    "subscriptions_router",
    "playlists_router",
    "dashboard_router",
]

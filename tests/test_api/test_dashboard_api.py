# tests/test_api/test_dashboard_api.py
import importlib
import uuid

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.exception_handlers import install_exception_handlers
from app.core.exceptions import NotFoundError
from app.services.pagination import PageResult
from tests.fixtures.rows import video_row


class FakeDashboardRepo:
    def __init__(self):
        self.calls = []

    async def channel_stats(self, actor_id):
        self.calls.append(("stats", actor_id))
        return {
            "username": "alice",
            "email": "alice@example.com",
            "subscribers_count": 4,
            "videos_count": 2,
            "views_count": 130,
            "likes_count": 9,
        }

    async def channel_videos(self, actor_id, options):
        self.calls.append(("videos", actor_id, options))
        items = [dict(video_row(actor_id, is_published=False), likes_count=0, is_liked=False)]
        return PageResult(items=items, total_items=1, total_pages=1)

    async def engagement(self, actor_id, video_id, channel_id):
        self.calls.append(("engagement", actor_id, video_id, channel_id))
        if channel_id == video_id:
            raise NotFoundError("Channel not found")
        return {"is_liked": True, "is_subscribed": False}


def _mk_app():
    mod = importlib.import_module("app.api.v1.routers.dashboard")
    repo = FakeDashboardRepo()
    app = FastAPI()
    install_exception_handlers(app)
    app.include_router(mod.router, prefix="/api/v1")
    app.dependency_overrides[mod.get_dashboard_repository] = lambda: repo
    return TestClient(app), repo


def test_stats_are_camel_case(alice_id, bearer):
    client, repo = _mk_app()
    data = client.get("/api/v1/dashboard/stats", headers=bearer(alice_id)).json()["data"]
    assert data == {
        "username": "alice",
        "email": "alice@example.com",
        "subscribersCount": 4,
        "likesCount": 9,
        "videosCount": 2,
        "viewsCount": 130,
    }
    assert repo.calls == [("stats", alice_id)]


def test_stats_need_identity():
    client, repo = _mk_app()
    assert client.get("/api/v1/dashboard/stats").status_code == 401


def test_channel_videos_include_drafts(alice_id, bearer):
    client, repo = _mk_app()
    items = client.get("/api/v1/dashboard/videos", headers=bearer(alice_id)).json()["data"]["items"]
    assert items[0]["isPublished"] is False


def test_engagement_flags(alice_id, bearer):
    client, repo = _mk_app()
    vid, cid = uuid.uuid4(), uuid.uuid4()
    resp = client.get(f"/api/v1/dashboard/engagement/{vid}/{cid}", headers=bearer(alice_id))
    assert resp.json()["data"] == {"isLiked": True, "isSubscribed": False}


def test_engagement_bad_ids(alice_id, bearer):
    client, repo = _mk_app()
    vid = uuid.uuid4()

    resp = client.get(f"/api/v1/dashboard/engagement/{vid}/not-a-channel", headers=bearer(alice_id))
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "channelId"

    missing = client.get(f"/api/v1/dashboard/engagement/{vid}/{vid}", headers=bearer(alice_id))
    assert missing.status_code == 404

# tests/test_api/test_comments_api.py
import importlib
import uuid

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.exception_handlers import install_exception_handlers
from app.core.exceptions import ForbiddenError, NotFoundError
from app.services.pagination import PageResult
from tests.fixtures.rows import comment_row, owner_row


class FakeCommentRepo:
    def __init__(self):
        self.calls = []
        self.error = None

    def _hit(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.error is not None:
            raise self.error

    async def list_for_video(self, video_id, *, actor_id, options):
        self._hit("list_for_video", video_id, actor_id=actor_id, options=options)
        owner = uuid.uuid4()
        item = dict(comment_row(video_id, owner), owner=owner_row(owner), likes_count=1, is_liked=False)
        return PageResult(items=[item], page=1, limit=10, total_items=1, total_pages=1)

    async def add(self, video_id, actor_id, content):
        self._hit("add", video_id, actor_id, content)
        return comment_row(video_id, actor_id, content=content)

    async def update(self, comment_id, actor_id, content):
        self._hit("update", comment_id, actor_id, content)
        return comment_row(uuid.uuid4(), actor_id, id=comment_id, content=content)

    async def delete(self, comment_id, actor_id):
        self._hit("delete", comment_id, actor_id)
        return comment_row(uuid.uuid4(), actor_id, id=comment_id)


def _mk_app():
    mod = importlib.import_module("app.api.v1.routers.comments")
    repo = FakeCommentRepo()
    app = FastAPI()
    install_exception_handlers(app)
    app.include_router(mod.router, prefix="/api/v1")
    app.dependency_overrides[mod.get_comment_repository] = lambda: repo
    return TestClient(app), repo


def test_list_comments_anonymous():
    client, repo = _mk_app()
    vid = uuid.uuid4()

    resp = client.get(f"/api/v1/comments/{vid}", params={"sortBy": "updatedAt"})

    assert resp.status_code == 200
    item = resp.json()["data"]["items"][0]
    assert item["videoId"] == str(vid)
    assert item["likesCount"] == 1
    assert repo.calls[0][2]["actor_id"] is None


def test_list_comments_of_hidden_video_is_404():
    client, repo = _mk_app()
    repo.error = NotFoundError("Video not found")
    assert client.get(f"/api/v1/comments/{uuid.uuid4()}").status_code == 404


def test_add_comment_strips_and_returns_201(alice_id, bearer):
    client, repo = _mk_app()
    vid = uuid.uuid4()

    resp = client.post(f"/api/v1/comments/{vid}", json={"content": "  great  "}, headers=bearer(alice_id))

    assert resp.status_code == 201
    assert resp.json()["data"]["content"] == "great"
    assert repo.calls[0][1] == (vid, alice_id, "great")


def test_blank_comment_rejected(alice_id, bearer):
    client, repo = _mk_app()
    resp = client.post(f"/api/v1/comments/{uuid.uuid4()}", json={"content": "   "}, headers=bearer(alice_id))
    assert resp.status_code == 400
    assert repo.calls == []


def test_add_requires_identity():
    client, repo = _mk_app()
    assert client.post(f"/api/v1/comments/{uuid.uuid4()}", json={"content": "hi"}).status_code == 401


def test_update_and_delete_are_owner_scoped(alice_id, bob_id, bearer):
    client, repo = _mk_app()
    cid = uuid.uuid4()

    resp = client.patch(f"/api/v1/comments/c/{cid}", json={"content": "edited"}, headers=bearer(alice_id))
    assert resp.status_code == 200
    assert resp.json()["data"]["content"] == "edited"

    repo.error = ForbiddenError("You do not have permission to modify this comment")
    assert client.delete(f"/api/v1/comments/c/{cid}", headers=bearer(bob_id)).status_code == 403


def test_malformed_comment_id(alice_id, bearer):
    client, repo = _mk_app()
    resp = client.delete("/api/v1/comments/c/zzz", headers=bearer(alice_id))
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "commentId"
    assert repo.calls == []

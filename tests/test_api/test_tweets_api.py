# tests/test_api/test_tweets_api.py
import importlib
import uuid

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.exception_handlers import install_exception_handlers
from app.core.exceptions import NotFoundError
from app.services.pagination import PageResult
from tests.fixtures.rows import owner_row, tweet_row


class FakeTweetRepo:
    def __init__(self):
        self.calls = []
        self.error = None

    def _hit(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.error is not None:
            raise self.error

    async def create(self, actor_id, content):
        self._hit("create", actor_id, content)
        return tweet_row(actor_id, content=content)

    async def list_for_user(self, user_id, *, actor_id, options):
        self._hit("list_for_user", user_id, actor_id=actor_id, options=options)
        items = [dict(tweet_row(user_id), owner=owner_row(user_id), likes_count=0, is_liked=False) for _ in range(2)]
        return PageResult(items=items, page=options.page, limit=options.limit, total_items=12, total_pages=6)

    async def update(self, tweet_id, actor_id, content):
        self._hit("update", tweet_id, actor_id, content)
        return tweet_row(actor_id, id=tweet_id, content=content)

    async def delete(self, tweet_id, actor_id):
        self._hit("delete", tweet_id, actor_id)
        return tweet_row(actor_id, id=tweet_id)


def _mk_app():
    mod = importlib.import_module("app.api.v1.routers.tweets")
    repo = FakeTweetRepo()
    app = FastAPI()
    install_exception_handlers(app)
    app.include_router(mod.router, prefix="/api/v1")
    app.dependency_overrides[mod.get_tweet_repository] = lambda: repo
    return TestClient(app), repo


def test_create_tweet(alice_id, bearer):
    client, repo = _mk_app()
    resp = client.post("/api/v1/tweets", json={"content": "first!"}, headers=bearer(alice_id))
    assert resp.status_code == 201
    assert resp.json()["data"]["ownerId"] == str(alice_id)


def test_create_tweet_requires_content(alice_id, bearer):
    client, repo = _mk_app()
    assert client.post("/api/v1/tweets", json={}, headers=bearer(alice_id)).status_code == 400
    assert repo.calls == []


def test_list_user_tweets_paginates(alice_id):
    client, repo = _mk_app()
    resp = client.get(f"/api/v1/tweets/user/{alice_id}", params={"page": "2", "limit": "2", "query": "hel"})
    data = resp.json()["data"]
    assert (data["page"], data["limit"], data["totalItems"], data["totalPages"]) == (2, 2, 12, 6)
    assert len(data["items"]) == 2
    assert repo.calls[0][2]["options"].query == "hel"


def test_update_missing_tweet_is_404(alice_id, bearer):
    client, repo = _mk_app()
    repo.error = NotFoundError("Tweet not found")
    resp = client.patch(f"/api/v1/tweets/{uuid.uuid4()}", json={"content": "x"}, headers=bearer(alice_id))
    assert resp.status_code == 404
    assert resp.json()["message"] == "Tweet not found"


def test_delete_tweet(alice_id, bearer):
    client, repo = _mk_app()
    tid = uuid.uuid4()
    resp = client.delete(f"/api/v1/tweets/{tid}", headers=bearer(alice_id))
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == str(tid)


def test_malformed_ids_rejected_before_repository(alice_id, bearer):
    client, repo = _mk_app()
    auth = bearer(alice_id)

    cases = [
        (client.get, "/api/v1/tweets/user/nope", {}, "userId"),
        (client.patch, "/api/v1/tweets/123", {"json": {"content": "x"}, "headers": auth}, "tweetId"),
        (client.delete, "/api/v1/tweets/123", {"headers": auth}, "tweetId"),
    ]
    for call, url, kwargs, field in cases:
        resp = call(url, **kwargs)
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == field

    assert repo.calls == []

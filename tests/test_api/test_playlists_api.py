# tests/test_api/test_playlists_api.py
import importlib
import uuid

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.exception_handlers import install_exception_handlers
from app.core.exceptions import ConflictError, NotFoundError
from app.services.pagination import PageResult
from tests.fixtures.rows import owner_row, playlist_row, video_row


class FakePlaylistRepo:
    def __init__(self, owner_id):
        self.owner_id = owner_id
        self.playlist = playlist_row(owner_id)
        self.videos = []
        self.calls = []
        self.errors = {}

    def _hit(self, name, *args):
        self.calls.append((name, args))
        if name in self.errors:
            raise self.errors[name]

    async def create(self, actor_id, name, description):
        self._hit("create", actor_id, name, description)
        return playlist_row(actor_id, name=name, description=description)

    async def list_for_user(self, user_id, *, actor_id, options):
        self._hit("list_for_user", user_id, actor_id)
        return PageResult(items=[dict(self.playlist, videos_count=len(self.videos))], total_items=1, total_pages=1)

    async def get_owned(self, playlist_id, actor_id):
        self._hit("get_owned", playlist_id, actor_id)
        return self.playlist

    async def update(self, playlist_id, actor_id, **fields):
        self._hit("update", playlist_id, actor_id, fields)
        return dict(self.playlist, **fields)

    async def delete(self, playlist_id, actor_id):
        self._hit("delete", playlist_id, actor_id)
        return self.playlist

    async def get_detail(self, playlist_id, actor_id):
        self._hit("get_detail", playlist_id, actor_id)
        return dict(self.playlist, owner=owner_row(self.owner_id), videos=list(self.videos))

    async def add_video(self, playlist_id, video_id, actor_id):
        self._hit("add_video", playlist_id, video_id, actor_id)
        self.videos.append(video_row(id=video_id))

    async def remove_video(self, playlist_id, video_id, actor_id):
        self._hit("remove_video", playlist_id, video_id, actor_id)
        self.videos = [v for v in self.videos if v["id"] != video_id]


def _mk_app(owner_id):
    mod = importlib.import_module("app.api.v1.routers.playlists")
    repo = FakePlaylistRepo(owner_id)
    app = FastAPI()
    install_exception_handlers(app)
    app.include_router(mod.router, prefix="/api/v1")
    app.dependency_overrides[mod.get_playlist_repository] = lambda: repo
    return TestClient(app), repo


def test_create_playlist(alice_id, bearer):
    client, repo = _mk_app(alice_id)
    resp = client.post("/api/v1/playlists", json={"name": " Mix ", "description": "songs"}, headers=bearer(alice_id))
    assert resp.status_code == 201
    assert resp.json()["data"]["name"] == "Mix"


@pytest.mark.parametrize("body", [{"name": "Mix"}, {"description": "songs"}, {"name": " ", "description": "songs"}])
def test_create_playlist_requires_both_fields(alice_id, bearer, body):
    client, repo = _mk_app(alice_id)
    assert client.post("/api/v1/playlists", json=body, headers=bearer(alice_id)).status_code == 400
    assert repo.calls == []


def test_list_user_playlists_counts_videos(alice_id):
    client, repo = _mk_app(alice_id)
    item = client.get(f"/api/v1/playlists/user/{alice_id}").json()["data"]["items"][0]
    assert item["videosCount"] == 0
    assert item["ownerId"] == str(alice_id)


def test_add_and_remove_return_playlist_detail(alice_id, bearer):
    client, repo = _mk_app(alice_id)
    pid, vid = repo.playlist["id"], uuid.uuid4()

    added = client.patch(f"/api/v1/playlists/add/{vid}/{pid}", headers=bearer(alice_id)).json()
    assert added["message"] == "Video added to playlist"
    assert [v["id"] for v in added["data"]["videos"]] == [str(vid)]
    assert repo.calls[0] == ("add_video", (pid, vid, alice_id))

    removed = client.patch(f"/api/v1/playlists/remove/{vid}/{pid}", headers=bearer(alice_id)).json()
    assert removed["data"]["videos"] == []


def test_duplicate_add_is_409(alice_id, bearer):
    client, repo = _mk_app(alice_id)
    repo.errors["add_video"] = ConflictError("Video already exists in playlist")
    resp = client.patch(f"/api/v1/playlists/add/{uuid.uuid4()}/{uuid.uuid4()}", headers=bearer(alice_id))
    assert resp.status_code == 409
    assert resp.json()["message"] == "Video already exists in playlist"


def test_remove_absent_video_is_404(alice_id, bearer):
    client, repo = _mk_app(alice_id)
    repo.errors["remove_video"] = NotFoundError("Video not found in playlist")
    resp = client.patch(f"/api/v1/playlists/remove/{uuid.uuid4()}/{uuid.uuid4()}", headers=bearer(alice_id))
    assert resp.status_code == 404
    assert not any(name == "get_detail" for name, _ in repo.calls)


def test_membership_ids_validated_in_order(alice_id, bearer):
    client, repo = _mk_app(alice_id)
    resp = client.patch(f"/api/v1/playlists/add/bad/{uuid.uuid4()}", headers=bearer(alice_id))
    assert resp.json()["errors"][0]["field"] == "videoId"
    resp = client.patch(f"/api/v1/playlists/add/{uuid.uuid4()}/bad", headers=bearer(alice_id))
    assert resp.json()["errors"][0]["field"] == "playlistId"
    assert repo.calls == []


def test_get_playlist_anonymous(alice_id):
    client, repo = _mk_app(alice_id)
    data = client.get(f"/api/v1/playlists/{repo.playlist['id']}").json()["data"]
    assert data["owner"]["username"] == "alice"
    assert data["videos"] == []
    assert repo.calls[0][1][1] is None


def test_update_playlist(alice_id, bearer):
    client, repo = _mk_app(alice_id)
    pid = repo.playlist["id"]

    resp = client.patch(f"/api/v1/playlists/{pid}", json={"description": "new"}, headers=bearer(alice_id))
    assert resp.json()["data"]["description"] == "new"
    assert repo.calls[-1] == ("update", (pid, alice_id, {"description": "new"}))

    untouched = client.patch(f"/api/v1/playlists/{pid}", json={}, headers=bearer(alice_id)).json()
    assert untouched["message"] == "No valid fields provided"
    assert repo.calls[-1][0] == "get_owned"


def test_delete_playlist_requires_identity(alice_id, bearer):
    client, repo = _mk_app(alice_id)
    pid = repo.playlist["id"]
    assert client.delete(f"/api/v1/playlists/{pid}").status_code == 401
    assert client.delete(f"/api/v1/playlists/{pid}", headers=bearer(alice_id)).status_code == 200


def test_malformed_playlist_and_user_ids(alice_id, bearer):
    client, repo = _mk_app(alice_id)
    auth = bearer(alice_id)

    cases = [
        (client.get, "/api/v1/playlists/user/nope", {}, "userId"),
        (client.get, "/api/v1/playlists/nope", {}, "playlistId"),
        (client.patch, "/api/v1/playlists/nope", {"json": {"name": "x"}, "headers": auth}, "playlistId"),
        (client.delete, "/api/v1/playlists/nope", {"headers": auth}, "playlistId"),
    ]
    for call, url, kwargs, field in cases:
        resp = call(url, **kwargs)
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == field

    assert repo.calls == []

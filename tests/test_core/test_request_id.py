# tests/test_core/test_request_id.py
import uuid

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from app.middleware.request_id import RequestIDMiddleware, get_request_id


def _mk_app():
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/ping")
    async def ping(request: Request):
        return {"rid": get_request_id(request)}

    return TestClient(app)


def test_client_id_is_reused():
    resp = _mk_app().get("/ping", headers={"X-Request-ID": "req-abc-12345"})
    assert resp.headers["x-request-id"] == "req-abc-12345"
    assert resp.json()["rid"] == "req-abc-12345"


def test_unsafe_client_id_is_replaced():
    resp = _mk_app().get("/ping", headers={"X-Request-ID": "bad id!"})
    rid = resp.headers["x-request-id"]
    assert uuid.UUID(rid).version == 4
    assert resp.json()["rid"] == rid


def test_generated_when_absent():
    resp = _mk_app().get("/ping")
    assert uuid.UUID(resp.headers["x-request-id"])

# tests/test_core/test_exception_handlers.py
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.exc import OperationalError

from app.core.exception_handlers import install_exception_handlers
from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
    UpstreamFailureError,
)


class Body(BaseModel):
    name: str


def _mk_app():
    app = FastAPI()
    install_exception_handlers(app)

    errors = {
        "invalid": InvalidInputError("Bad thing", errors=[{"field": "x", "message": "nope"}]),
        "unauthorized": UnauthorizedError(),
        "forbidden": ForbiddenError(),
        "missing": NotFoundError("Video not found"),
        "conflict": ConflictError(),
        "upstream": UpstreamFailureError(),
    }

    @app.get("/raise/{kind}")
    async def _raise(kind: str):
        raise errors[kind]

    @app.post("/body")
    async def _body(body: Body):
        return body

    @app.get("/db")
    async def _db():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    @app.get("/crash")
    async def _crash():
        raise RuntimeError("secret internals")

    # ServerErrorMiddleware re-raises after rendering; keep the response instead
    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.parametrize(
    "kind, status",
    [("invalid", 400), ("unauthorized", 401), ("forbidden", 403), ("missing", 404), ("conflict", 409), ("upstream", 500)],
)
def test_kind_to_status(kind, status):
    resp = _mk_app().get(f"/raise/{kind}")
    assert resp.status_code == status
    body = resp.json()
    assert body["statusCode"] == status
    assert body["success"] is False
    assert isinstance(body["message"], str) and body["message"]
    assert isinstance(body["errors"], list)


def test_error_details_are_carried():
    body = _mk_app().get("/raise/invalid").json()
    assert body["message"] == "Bad thing"
    assert body["errors"] == [{"field": "x", "message": "nope"}]


def test_validation_error_is_400_with_fields():
    resp = _mk_app().post("/body", json={})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation error"
    assert body["errors"][0]["field"] == "name"


def test_unknown_route_uses_envelope():
    resp = _mk_app().get("/nowhere")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_database_failure_hides_details():
    resp = _mk_app().get("/db")
    assert resp.status_code == 500
    assert resp.json()["message"] == "Database operation failed"
    assert "connection refused" not in resp.text


def test_unexpected_exception_hides_details():
    resp = _mk_app().get("/crash")
    assert resp.status_code == 500
    assert resp.json()["message"] == "An unexpected error occurred."
    assert "secret internals" not in resp.text

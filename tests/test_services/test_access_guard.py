# tests/test_services/test_access_guard.py
import uuid
from types import SimpleNamespace

import pytest
from sqlalchemy.dialects import postgresql

from app.core.exceptions import ForbiddenError, NotFoundError, UpstreamFailureError
from app.db.models import Comment, Video
from app.services.access_guard import (
    Action,
    DenyReason,
    authorize,
    denial_error,
    explain_missing_write,
    load_for_write,
    load_visible,
    visibility_clause,
)
from tests.fixtures.fake_db import EdgeSession

OWNER = uuid.uuid4()
STRANGER = uuid.uuid4()


def _video(published=True):
    return SimpleNamespace(id=uuid.uuid4(), owner_id=OWNER, is_published=published)


@pytest.mark.parametrize(
    "actor, published, allowed",
    [
        (None, True, True),
        (STRANGER, True, True),
        (OWNER, False, True),
        (STRANGER, False, False),
        (None, False, False),
    ],
)
def test_read_gating(actor, published, allowed):
    decision = authorize(actor, _video(published), Action.READ)
    assert bool(decision) is allowed
    if not allowed:
        # Drafts are hidden, never "forbidden"
        assert decision.reason is DenyReason.NOT_FOUND


def test_writes_require_ownership():
    assert authorize(OWNER, _video(), Action.UPDATE)
    assert authorize(STRANGER, _video(), Action.DELETE).reason is DenyReason.FORBIDDEN
    assert authorize(None, _video(), Action.UPDATE).reason is DenyReason.FORBIDDEN


def test_missing_resource_is_not_found_for_every_action():
    for action in Action:
        assert authorize(OWNER, None, action).reason is DenyReason.NOT_FOUND


def test_ungated_resources_are_readable():
    comment = SimpleNamespace(id=uuid.uuid4(), owner_id=OWNER)
    assert authorize(None, comment, Action.READ)


def test_denial_error_types():
    assert isinstance(denial_error(authorize(STRANGER, _video(), Action.UPDATE), "Video"), ForbiddenError)
    err = denial_error(authorize(STRANGER, None, Action.UPDATE), "Video")
    assert isinstance(err, NotFoundError)
    assert err.message == "Video not found"
    assert denial_error(authorize(OWNER, _video(), Action.UPDATE), "Video") is None


def test_visibility_clause_sql():
    dialect = postgresql.dialect()
    assert "is_published IS true" in str(visibility_clause(Video, None).compile(dialect=dialect))
    assert " OR videos.owner_id = " in str(visibility_clause(Video, OWNER).compile(dialect=dialect))
    assert str(visibility_clause(Comment, OWNER).compile(dialect=dialect)) == "true"


@pytest.mark.anyio
async def test_load_helpers_check_existence_before_ownership():
    db = EdgeSession()
    draft = db.add_object(Video, id=uuid.uuid4(), owner_id=OWNER, is_published=False)

    assert await load_visible(db, Video, draft.id, OWNER, "Video") is draft
    with pytest.raises(NotFoundError):
        await load_visible(db, Video, draft.id, STRANGER, "Video")

    with pytest.raises(NotFoundError):
        await load_for_write(db, Video, uuid.uuid4(), STRANGER, "Video")
    with pytest.raises(ForbiddenError):
        await load_for_write(db, Video, draft.id, STRANGER, "Video")


@pytest.mark.anyio
async def test_explain_missing_write_classification():
    db = EdgeSession()
    mine = db.add_object(Video, id=uuid.uuid4(), owner_id=OWNER, is_published=True)

    assert isinstance(await explain_missing_write(db, Video, uuid.uuid4(), OWNER, "Video"), NotFoundError)
    assert isinstance(await explain_missing_write(db, Video, mine.id, STRANGER, "Video"), ForbiddenError)
    assert isinstance(await explain_missing_write(db, Video, mine.id, OWNER, "Video"), UpstreamFailureError)

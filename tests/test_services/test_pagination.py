# tests/test_services/test_pagination.py
import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from app.db.models import Video
from app.services.pagination import clamp_positive, paginate, total_pages
from tests.fixtures.fake_db import CountResult, MappingsResult, ScriptedSession


@pytest.mark.parametrize("total, limit, pages", [(0, 10, 0), (12, 5, 3), (10, 5, 2), (1, 100, 1)])
def test_total_pages(total, limit, pages):
    assert total_pages(total, limit) == pages


def test_clamp_positive():
    assert clamp_positive(0) == 1
    assert clamp_positive(-3) == 1
    assert clamp_positive(7) == 7


@pytest.mark.anyio
async def test_paginate_second_page():
    rows = [{"id": i} for i in range(5)]
    db = ScriptedSession(CountResult(12), MappingsResult(rows))
    stmt = select(Video.id).order_by(Video.created_at.desc())

    result = await paginate(db, stmt, page=2, limit=5, transform=lambda r: r["id"])

    assert result.items == [0, 1, 2, 3, 4]
    assert (result.page, result.limit, result.total_items, result.total_pages) == (2, 5, 12, 3)

    count_sql = str(db.executed[0].compile(dialect=postgresql.dialect()))
    assert "count(*)" in count_sql
    assert "ORDER BY" not in count_sql

    page_sql = str(db.executed[1].compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))
    assert "LIMIT 5 OFFSET 5" in page_sql


@pytest.mark.anyio
async def test_paginate_past_the_end_is_empty_not_error():
    db = ScriptedSession(CountResult(3), MappingsResult([]))
    result = await paginate(db, select(Video.id), page=9, limit=10)
    assert result.items == []
    assert result.total_items == 3
    assert result.total_pages == 1

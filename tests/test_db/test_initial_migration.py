# tests/test_db/test_initial_migration.py
"""
The initial revision, rendered as offline PostgreSQL DDL, must produce the
same check constraint names as the ORM metadata (naming convention applied
exactly once).
"""

import importlib.util
import io
import re
from pathlib import Path

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

from app.db.base import Base

REVISION = Path(__file__).resolve().parents[2] / "alembic" / "versions" / "20260101_01_initial_schema.py"
CHECK_NAME = re.compile(r"CONSTRAINT (ck_\w+) CHECK")


def _migration_sql() -> str:
    spec = importlib.util.spec_from_file_location("initial_schema_revision", REVISION)
    revision = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(revision)

    buf = io.StringIO()
    ctx = MigrationContext.configure(
        dialect_name="postgresql",
        opts={"as_sql": True, "output_buffer": buf, "target_metadata": Base.metadata},
    )
    with Operations.context(ctx):
        revision.upgrade()
    return buf.getvalue()


def _model_check_names() -> set:
    dialect = postgresql.dialect()
    ddl = "\n".join(str(CreateTable(t).compile(dialect=dialect)) for t in Base.metadata.sorted_tables)
    return set(CHECK_NAME.findall(ddl))


def test_check_constraint_names_match_models():
    sql = _migration_sql()
    migrated = set(CHECK_NAME.findall(sql))

    assert "ck_likes_single_target" in migrated
    assert "ck_subscriptions_not_self" in migrated
    assert not any(name.count("ck_") > 1 for name in migrated)
    assert migrated == _model_check_names()

# tests/conftest.py
"""
Global test bootstrap
- Sets required settings BEFORE any `app.*` import (secrets, local media, no file logs)
- anyio backend for async tests
- Identity helpers (user ids + bearer headers)
"""

from __future__ import annotations

import os
import tempfile
import uuid

import pytest

# ──────────────────────────────────────────────────────────────────────────────
# 🌱 Test env (must precede app imports; Settings() is built at import time)
# ──────────────────────────────────────────────────────────────────────────────
_MEDIA_ROOT = tempfile.mkdtemp(prefix="vidshare-media-")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-please-change")
os.environ.setdefault("POSTGRES_PASSWORD", "postgres")
os.environ.setdefault("LOG_TO_FILE", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("MEDIA_BACKEND", "local")
os.environ.setdefault("MEDIA_LOCAL_DIR", os.path.join(_MEDIA_ROOT, "store"))
os.environ.setdefault("UPLOAD_TMP_DIR", os.path.join(_MEDIA_ROOT, "tmp"))

from app.core.security import create_access_token  # noqa: E402

# ──────────────────────────────────────────────────────────────────────────────
# 📦 Shared fakes
# ──────────────────────────────────────────────────────────────────────────────
from tests.fixtures.fake_db import *  # noqa: F401,F403,E402


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def alice_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture()
def bob_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture()
def bearer():
    """`bearer(user_id)` → Authorization header carrying a fresh access token."""

    def _make(user_id) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _make

# app/services/media_storage.py
from __future__ import annotations

"""
VidShare · Media storage
========================

Two operations, one contract:

    store(local_path, folder=...) -> StoredMedia(url, duration)
    remove(url) -> bool

• `store` failures raise `UpstreamFailureError`; callers abort the publish /
  update. The temporary upload file is deleted either way.
• `remove` never raises: failures are logged and reported as ``False``;
  callers treat it as best-effort cleanup.

Backends
--------
• `LocalMediaStore`: files under `MEDIA_LOCAL_DIR`, served at `/static`
  (development and tests).
• `S3MediaStore`: `app.utils.aws.S3Client`, CDN-aware URLs.

Blocking filesystem / boto3 work runs in a worker thread.
"""

import asyncio
import mimetypes
import shutil
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Protocol

from fastapi import UploadFile
from loguru import logger

from app.core.config import settings
from app.core.exceptions import InvalidInputError, UpstreamFailureError
from app.utils.aws import S3Client, S3StorageError

VIDEO_FOLDER = "videos"
THUMBNAIL_FOLDER = "thumbnails"

_CHUNK = 1024 * 1024


@dataclass(frozen=True)
class StoredMedia:
    url: str
    duration: Optional[float] = None


class MediaStore(Protocol):
    async def store(self, local_path: Path, *, folder: str) -> StoredMedia: ...

    async def remove(self, url: str) -> bool: ...


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not delete temp upload {}: {}", path, e)


def _object_name(local_path: Path) -> str:
    return f"{uuid.uuid4().hex}{local_path.suffix.lower()}"


# ─────────────────────────────────────────────────────────────────────────────
# 💾 Local disk
# ─────────────────────────────────────────────────────────────────────────────

class LocalMediaStore:
    def __init__(self, root: Path, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _copy(self, src: Path, folder: str) -> str:
        dest_dir = self.root / folder
        dest_dir.mkdir(parents=True, exist_ok=True)
        name = _object_name(src)
        shutil.copyfile(src, dest_dir / name)
        return f"{folder}/{name}"

    async def store(self, local_path: Path, *, folder: str) -> StoredMedia:
        try:
            rel = await asyncio.to_thread(self._copy, Path(local_path), folder)
        except OSError as e:
            logger.error("Local media store failed for {}: {}", local_path, e)
            raise UpstreamFailureError("Failed to store media file")
        finally:
            _discard(Path(local_path))
        return StoredMedia(url=f"{self.base_url}/{rel}")

    def _path_for(self, url: str) -> Optional[Path]:
        if not url.startswith(self.base_url + "/"):
            return None
        root = self.root.resolve()
        path = (root / url[len(self.base_url) + 1:]).resolve()
        return path if root in path.parents else None

    async def remove(self, url: str) -> bool:
        path = self._path_for(url)
        if path is None:
            logger.warning("Refusing to remove media outside the store: {}", url)
            return False
        try:
            await asyncio.to_thread(path.unlink, True)
            return True
        except OSError as e:
            logger.warning("Media removal failed (non-fatal) for {}: {}", url, e)
            return False


# ─────────────────────────────────────────────────────────────────────────────
# ☁️ S3
# ─────────────────────────────────────────────────────────────────────────────

class S3MediaStore:
    def __init__(self, client: S3Client) -> None:
        self.client = client

    async def store(self, local_path: Path, *, folder: str) -> StoredMedia:
        local_path = Path(local_path)
        key = f"{folder}/{_object_name(local_path)}"
        content_type = mimetypes.guess_type(local_path.name)[0]
        try:
            key = await asyncio.to_thread(self.client.upload_file, str(local_path), key, content_type=content_type)
        except S3StorageError as e:
            logger.error("S3 upload failed for {}: {}", key, e)
            raise UpstreamFailureError("Failed to store media file")
        finally:
            _discard(local_path)
        return StoredMedia(url=self.client.public_url(key))

    async def remove(self, url: str) -> bool:
        try:
            key = self.client.key_from_url(url)
        except S3StorageError:
            key = None
        if key is None:
            logger.warning("Not an object URL of this bucket; skipping removal: {}", url)
            return False
        return await asyncio.to_thread(self.client.delete, key)


# ─────────────────────────────────────────────────────────────────────────────
# 📥 Upload staging & wiring
# ─────────────────────────────────────────────────────────────────────────────

async def save_upload(upload: Optional[UploadFile], field_name: str, tmp_dir: Optional[Path] = None) -> Path:
    """Stream an incoming multipart file to a temp path; the store deletes it."""
    if upload is None or not upload.filename:
        raise InvalidInputError(f"{field_name} is required", errors=[{"field": field_name, "message": "file is required"}])

    tmp_dir = Path(tmp_dir or settings.UPLOAD_TMP_DIR)
    tmp_dir.mkdir(parents=True, exist_ok=True)
    dest = tmp_dir / f"{uuid.uuid4().hex}{Path(upload.filename).suffix.lower()}"

    written = 0
    fh = await asyncio.to_thread(dest.open, "wb")
    try:
        while True:
            chunk = await upload.read(_CHUNK)
            if not chunk:
                break
            await asyncio.to_thread(fh.write, chunk)
            written += len(chunk)
    except Exception:
        await asyncio.to_thread(fh.close)
        _discard(dest)
        raise
    await asyncio.to_thread(fh.close)
    await upload.close()

    if written == 0:
        _discard(dest)
        raise InvalidInputError(f"{field_name} is empty", errors=[{"field": field_name, "message": "file is empty"}])
    return dest


async def remove_quietly(store: MediaStore, *urls: Optional[str]) -> None:
    """Best-effort removal of several objects; outcomes are only logged."""
    for url in urls:
        if url and not await store.remove(url):
            logger.warning("Media object left behind: {}", url)


@lru_cache(maxsize=1)
def get_media_store() -> MediaStore:
    """FastAPI dependency; one store per process, chosen by `MEDIA_BACKEND`."""
    if settings.MEDIA_BACKEND == "s3":
        return S3MediaStore(S3Client())
    return LocalMediaStore(settings.MEDIA_LOCAL_DIR, settings.MEDIA_PUBLIC_BASE_URL)


__all__ = [
    "VIDEO_FOLDER",
    "THUMBNAIL_FOLDER",
    "StoredMedia",
    "MediaStore",
    "LocalMediaStore",
    "S3MediaStore",
    "save_upload",
    "remove_quietly",
    "get_media_store",
]

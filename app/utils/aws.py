# app/utils/aws.py
from __future__ import annotations

"""
🧊 VidShare • S3 Utilities
==========================

Thin boto3 wrapper used by the S3 media store:
- Server-side upload of a local file (videos, thumbnails)
- Idempotent delete
- CDN-aware public URL building, and the reverse (URL → key)

Implementation notes
--------------------
- Kept close to boto3 so failure modes stay familiar. Input validation
  covers what we control (keys); S3 errors bubble as `S3StorageError`.
- Blocking calls; async callers run them in a worker thread.
"""

from typing import Any, Dict, Optional
from urllib.parse import unquote, urlparse
import logging
import re

import boto3
from botocore.config import Config as BotoConfig
from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# 🧱 Exceptions
# ─────────────────────────────────────────────────────────────────────────────

class S3StorageError(RuntimeError):
    """Raised when a storage operation fails (network, auth, policy, key)."""


# ─────────────────────────────────────────────────────────────────────────────
# 🧰 Key validation
# ─────────────────────────────────────────────────────────────────────────────

_KEY_ALLOWED_RE = re.compile(r"[A-Za-z0-9._\-/+=@() ]+")


def _normalize_key(key: str) -> str:
    """
    Normalize and validate S3 object keys.

    Steps
    -----
    1) Coerce to str, strip whitespace and leading '/'
    2) Collapse '//' runs
    3) Reject empty keys, path traversal ('..') and disallowed characters
    """
    k = str(key or "").strip().lstrip("/")
    k = re.sub(r"/{2,}", "/", k)
    if not k:
        raise S3StorageError("Invalid storage key: empty")
    if ".." in k:
        raise S3StorageError("Invalid storage key: path traversal detected")
    if not _KEY_ALLOWED_RE.fullmatch(k):
        raise S3StorageError("Invalid storage key: contains forbidden characters")
    return k


def _secret_value(v: Any) -> Optional[str]:
    if v is None:
        return None
    return v.get_secret_value() if hasattr(v, "get_secret_value") else str(v)


# ─────────────────────────────────────────────────────────────────────────────
# 📦 S3 Client
# ─────────────────────────────────────────────────────────────────────────────

class S3Client:
    """
    High-level S3 wrapper with safe defaults.

    Parameters
    ----------
    bucket : str | None
        Destination bucket. Defaults to `settings.AWS_BUCKET_NAME`.
    region_name, endpoint_url : str | None
        Default to `settings.AWS_REGION` / `settings.AWS_S3_ENDPOINT_URL`.
    cdn_base_url : str | None
        When set, public URLs are built on it instead of the bucket host.
    client :
        Pre-built boto3 client (tests, custom sessions).
    """

    def __init__(
        self,
        bucket: Optional[str] = None,
        *,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        cdn_base_url: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self.bucket = bucket or settings.AWS_BUCKET_NAME
        if not self.bucket:
            raise S3StorageError("AWS_BUCKET_NAME not configured")

        self.region = region_name or settings.AWS_REGION
        self.endpoint_url = endpoint_url or settings.AWS_S3_ENDPOINT_URL
        self._cdn_base = (cdn_base_url or settings.CDN_BASE_URL or "").rstrip("/")

        if client is not None:
            self.client = client
            return

        cfg = BotoConfig(
            signature_version="s3v4",
            retries={"max_attempts": 5, "mode": "standard"},
            connect_timeout=3,
            read_timeout=60,
        )
        client_kwargs: Dict[str, Any] = {"config": cfg, "region_name": self.region}
        if self.endpoint_url:
            client_kwargs["endpoint_url"] = self.endpoint_url
        ak = settings.AWS_ACCESS_KEY_ID
        sk = _secret_value(settings.AWS_SECRET_ACCESS_KEY)
        if ak and sk:
            client_kwargs["aws_access_key_id"] = ak
            client_kwargs["aws_secret_access_key"] = sk

        try:
            self.client = boto3.client("s3", **client_kwargs)
        except (BotoCoreError, ValueError) as e:  # pragma: no cover
            raise S3StorageError(f"Failed to create S3 client: {e}") from e

    # ────────────────────────────────────────────────────────────────────────
    # 🚀 Object ops
    # ────────────────────────────────────────────────────────────────────────

    def upload_file(self, path: str, key: str, *, content_type: Optional[str] = None) -> str:
        """Upload a local file and return its normalized key."""
        k = _normalize_key(key)
        extra: Dict[str, Any] = {"ContentType": content_type} if content_type else {}
        try:
            self.client.upload_file(str(path), self.bucket, k, ExtraArgs=extra or None)
        except (Boto3Error, BotoCoreError, ClientError, OSError) as e:
            raise S3StorageError(f"Failed to upload object: {e}") from e
        return k

    def delete(self, key: str) -> bool:
        """
        Best-effort delete.

        - True on success, and for a key that is already gone.
        - False on other errors (logged at WARNING).
        """
        k = _normalize_key(key)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=k)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in {"NoSuchKey", "404"}:
                return True
            logger.warning("delete_object failed (non-fatal): %s", e)
            return False
        except BotoCoreError as e:
            logger.warning("delete_object failed (non-fatal): %s", e)
            return False

    # ────────────────────────────────────────────────────────────────────────
    # 🌐 Public URL helpers
    # ────────────────────────────────────────────────────────────────────────

    def _base_url(self) -> str:
        if self._cdn_base:
            return self._cdn_base
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com"

    def public_url(self, key: str) -> str:
        return f"{self._base_url()}/{_normalize_key(key)}"

    def key_from_url(self, url: str) -> Optional[str]:
        """Inverse of `public_url`; ``None`` when the URL is not ours."""
        base = self._base_url()
        if url.startswith(base + "/"):
            return _normalize_key(unquote(url[len(base) + 1:]))
        parsed = urlparse(url)
        if parsed.netloc.startswith(f"{self.bucket}.s3."):
            return _normalize_key(unquote(parsed.path))
        return None

    def __repr__(self) -> str:  # pragma: no cover
        return f"S3Client(bucket={self.bucket}, region={self.region}, endpoint={'yes' if self.endpoint_url else 'no'})"


__all__ = ["S3Client", "S3StorageError"]

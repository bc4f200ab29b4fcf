# app/core/exceptions.py
from __future__ import annotations

"""
VidShare · Application Exceptions
=================================
A small tagged-variant error layer. Services and repositories raise an
`AppException` subclass that names *what* went wrong (`ErrorKind`); they
never pick an HTTP status. The transport boundary
(`app.core.exception_handlers`) maps each kind to a status code and renders
the uniform failure envelope.

Kinds
-----
- INVALID_INPUT    malformed id, missing/blank required field, bad list option
- UNAUTHORIZED     no verifiable caller identity on an authenticated route
- NOT_FOUND        resource absent, or hidden from this caller
- FORBIDDEN        resource exists, caller is not its owner
- CONFLICT         duplicate edge / membership, or a lost toggle race
- UPSTREAM_FAILURE media store or database failed unexpectedly

Usage
-----
    raise NotFoundError("Video not found")
    raise InvalidInputError("Invalid videoId", errors=[{"field": "videoId"}])
"""

from enum import Enum
from typing import Any, Dict, List, Optional

__all__ = [
    "ErrorKind",
    "AppException",
    "InvalidInputError",
    "UnauthorizedError",
    "NotFoundError",
    "ForbiddenError",
    "ConflictError",
    "UpstreamFailureError",
]


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    UPSTREAM_FAILURE = "upstream_failure"


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(Exception):
    """Base application error.

    Attributes
    ----------
    kind : ErrorKind
        The failure category; decides the HTTP status at the boundary.
    message : str
        Human-readable, client-safe message.
    errors : list
        Machine-readable details (field errors, ids). Never raw store payloads.
    """

    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE
    default_message: str = "Something went wrong"

    def __init__(self, message: Optional[str] = None, *, errors: Optional[List[Any]] = None) -> None:
        self.message: str = message or self.default_message
        self.errors: List[Any] = list(errors or [])
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value!r}, message={self.message!r})"

    # ── [Helper] Canonical body fragment used by handlers ──────────────────
    def to_body(self, status_code: int) -> Dict[str, Any]:
        return {
            "statusCode": status_code,
            "success": False,
            "message": self.message,
            "errors": self.errors,
        }


# ──────────────────────────────────────────────────────────────
# 🧩 Kinds
# ──────────────────────────────────────────────────────────────
class InvalidInputError(AppException):
    kind = ErrorKind.INVALID_INPUT
    default_message = "Invalid input"


class UnauthorizedError(AppException):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized request"


class NotFoundError(AppException):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class ForbiddenError(AppException):
    kind = ErrorKind.FORBIDDEN
    default_message = "You are not allowed to perform this action"


class ConflictError(AppException):
    kind = ErrorKind.CONFLICT
    default_message = "Conflicting request"


class UpstreamFailureError(AppException):
    kind = ErrorKind.UPSTREAM_FAILURE
    default_message = "Upstream operation failed"

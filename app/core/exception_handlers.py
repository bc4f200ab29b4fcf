from __future__ import annotations

"""
Envelope exception handlers.

Every failure leaves the API as
`{"statusCode": int, "success": false, "message": str, "errors": [...]}`.
`ErrorKind` → status mapping lives here and nowhere else.
"""

from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException, ErrorKind

KIND_TO_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UPSTREAM_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _envelope(status_code: int, message: str, errors: List[Any], headers: Dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {"statusCode": status_code, "success": False, "message": message, "errors": errors}
        ),
        headers=headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:  # type: ignore
    status_code = KIND_TO_STATUS.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if exc.kind is ErrorKind.UPSTREAM_FAILURE:
        logger.error("{} {} failed upstream: {}", request.method, request.url.path, exc.message)
    else:
        logger.warning("{} {} -> {} ({})", request.method, request.url.path, status_code, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=jsonable_encoder(exc.to_body(status_code)), headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # type: ignore
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _envelope(exc.status_code, detail, [], getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # type: ignore
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "form")),
         "message": err.get("msg", "invalid value")}
        for err in exc.errors()
    ]
    logger.warning("{} {} -> 400 (validation: {} error(s))", request.method, request.url.path, len(errors))
    return _envelope(status.HTTP_400_BAD_REQUEST, "Validation error", errors)


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:  # type: ignore
    logger.opt(exception=exc).error("Database failure on {} {}", request.method, request.url.path)
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database operation failed", [])


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # type: ignore
    # Hide internals; the traceback goes to the log only
    logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred.", [])


def install_exception_handlers(app: FastAPI) -> None:
    """Register every envelope handler on `app`."""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)  # type: ignore[arg-type]


__all__ = [
    "KIND_TO_STATUS",
    "app_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "database_exception_handler",
    "global_exception_handler",
    "install_exception_handlers",
]

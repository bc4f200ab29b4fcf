from __future__ import annotations

"""
VidShare · HTTP Utilities
=========================

Shared helpers for API routers:

- `envelope()`: the success envelope `{statusCode, success, message, data}`
- `page_payload()`: a `PageResult` rendered through a response schema
- `json_no_store()`: JSON with `Cache-Control: no-store` (caller-specific data)

Notes
-----
• Pydantic payloads are dumped **by alias** (camelCase) with `None` fields
  dropped, so optional derived fields only appear when computed.
• Failure envelopes are rendered by `app.core.exception_handlers`.
"""

from dataclasses import asdict
from typing import Any, Dict, Mapping, Optional, Type

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.schemas.common import ApiErrorResponse, ApiResponse, Page
from app.services.pagination import PageResult

__all__ = ["ERROR_RESPONSES", "envelope", "page_payload", "json_no_store"]

# Failure envelope per status, attached to every v1 route in OpenAPI
ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ApiErrorResponse, "description": "Invalid input"},
    status.HTTP_401_UNAUTHORIZED: {"model": ApiErrorResponse, "description": "Missing or invalid access token"},
    status.HTTP_403_FORBIDDEN: {"model": ApiErrorResponse, "description": "Not the owner"},
    status.HTTP_404_NOT_FOUND: {"model": ApiErrorResponse, "description": "Not found"},
    status.HTTP_409_CONFLICT: {"model": ApiErrorResponse, "description": "Conflicting concurrent change"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ApiErrorResponse, "description": "Upstream failure"},
}


def _plain(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(data, (list, tuple)):
        return [_plain(d) for d in data]
    return jsonable_encoder(data)


def json_no_store(payload: Any, *, status_code: int = 200, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    """Return a JSONResponse with strict no-store headers."""
    resp = JSONResponse(content=payload, status_code=status_code)
    resp.headers["Cache-Control"] = "no-store"
    resp.headers["Pragma"] = "no-cache"
    if headers:
        for k, v in headers.items():
            resp.headers[k] = v
    return resp


def envelope(data: Any = None, message: str = "Success", *, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Wrap `data` in the success envelope."""
    body = ApiResponse(status_code=status_code, message=message, data=None).model_dump(by_alias=True)
    body["data"] = _plain(data)
    return json_no_store(body, status_code=status_code)


def page_payload(result: PageResult, item_schema: Type[BaseModel]) -> Dict[str, Any]:
    """Validate each row through `item_schema` and render the page structure."""
    page = Page[item_schema].model_validate(asdict(result))  # type: ignore[valid-type]
    return page.model_dump(mode="json", by_alias=True, exclude_none=True)

# app/core/dependencies.py
from __future__ import annotations

"""
VidShare · Request dependencies
===============================

Small, shared boundary helpers used by every router:

- `parse_uuid`: path/body id validation; malformed ids never reach the store.
- `list_options`: parses the common list query params
  (`page`, `limit`, `query`, `sortBy`, `sortType`) into `ListOptions`.
"""

from typing import Optional, Union
from uuid import UUID

from fastapi import Query

from app.core.exceptions import InvalidInputError
from app.services.query_composer import ListOptions

__all__ = ["parse_uuid", "list_options"]


# ──────────────────────────────────────────────────────────────
# 🔧 Utility: UUID parsing with clear error mapping
# ──────────────────────────────────────────────────────────────
def parse_uuid(value: Union[str, UUID, None], field_name: str) -> UUID:
    """Parse a UUID from string and raise **InvalidInput** if malformed.

    Parameters
    ----------
    value : str | UUID
        The candidate value.
    field_name : str
        Name echoed back in the error (e.g. ``"videoId"``).

    Raises
    ------
    InvalidInputError
        Value is empty or not a UUID.
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError):
        raise InvalidInputError(
            f"Invalid {field_name}",
            errors=[{"field": field_name, "message": "must be a valid id"}],
        )


# ──────────────────────────────────────────────────────────────
# 📄 Common list options
# ──────────────────────────────────────────────────────────────
def list_options(
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Page size"),
    query: Optional[str] = Query(None, description="Case-insensitive substring filter"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_type: Optional[str] = Query(None, alias="sortType", description="asc | desc"),
) -> ListOptions:
    # Raw strings so malformed numbers surface as InvalidInput, not a 422
    return ListOptions.parse(page=page, limit=limit, query=query, sort_by=sort_by, sort_type=sort_type)

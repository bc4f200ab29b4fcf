from __future__ import annotations

"""
Shared response shapes.

All API JSON is camelCase; models accept snake_case too (`populate_by_name`)
and read ORM objects / row mappings directly (`from_attributes`).
"""

from typing import Any, Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class OwnerProfile(CamelModel):
    """Public profile fields of a content owner (never email)."""

    id: UUID
    username: str
    full_name: Optional[str] = None
    avatar: Optional[str] = None


class ChannelProfile(OwnerProfile):
    subscribers_count: Optional[int] = None
    is_subscribed: Optional[bool] = None


class Page(CamelModel, Generic[T]):
    items: List[T]
    page: int
    limit: int
    total_items: int
    total_pages: int


class ApiResponse(CamelModel):
    """Success envelope."""

    status_code: int = 200
    success: bool = True
    message: str = "Success"
    data: Any = None


class ApiErrorResponse(CamelModel):
    """Failure envelope (OpenAPI error responses of every v1 route; rendered by the exception handlers)."""

    status_code: int
    success: bool = False
    message: str
    errors: List[Any] = Field(default_factory=list)

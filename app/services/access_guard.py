# app/services/access_guard.py
from __future__ import annotations

"""
Access Guard
============

Decides whether a caller may see or change a resource.

Rules
-----
• READ of a gated resource (anything with `is_published`): allowed when
  published or owned by the caller; otherwise denied as **not found**, so
  drafts never leak their existence.
• UPDATE / DELETE: the resource is looked up by id first. Absent → not found;
  present but owned by someone else → forbidden. Only then is the write
  issued, so the two outcomes are never confused.

`authorize()` is pure; `enforce()` turns a denial into the matching
`AppException`; `load_for_write()` / `load_visible()` combine the lookup with
the decision for repositories.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, or_, true
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppException, ForbiddenError, NotFoundError, UpstreamFailureError

M = TypeVar("M")


class Action(str, Enum):
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class DenyReason(str, Enum):
    NOT_FOUND = "not found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: DenyReason) -> Decision:
    return Decision(False, reason)


def _owner_of(resource: Any) -> Optional[UUID]:
    return getattr(resource, "owner_id", None)


# ─────────────────────────────────────────────────────────────────────────────
# ⚖️ Decision
# ─────────────────────────────────────────────────────────────────────────────

def authorize(actor_id: Optional[UUID], resource: Any, action: Action) -> Decision:
    if resource is None:
        return deny(DenyReason.NOT_FOUND)

    is_owner = actor_id is not None and _owner_of(resource) == actor_id

    if action is Action.READ:
        if getattr(resource, "is_published", True) or is_owner:
            return ALLOW
        return deny(DenyReason.NOT_FOUND)

    if not is_owner:
        return deny(DenyReason.FORBIDDEN)
    return ALLOW


def denial_error(decision: Decision, noun: str) -> Optional[AppException]:
    if decision.allowed:
        return None
    if decision.reason is DenyReason.FORBIDDEN:
        return ForbiddenError(f"You do not have permission to modify this {noun.lower()}")
    return NotFoundError(f"{noun} not found")


def enforce(decision: Decision, noun: str) -> None:
    """Raise the error matching a denial; no-op when allowed."""
    error = denial_error(decision, noun)
    if error is not None:
        raise error


def visibility_clause(model: Any, actor_id: Optional[UUID]) -> ColumnElement[bool]:
    """SQL form of the READ rule for list queries."""
    if not hasattr(model, "is_published"):
        return true()
    if actor_id is None:
        return model.is_published.is_(True)
    return or_(model.is_published.is_(True), model.owner_id == actor_id)


# ─────────────────────────────────────────────────────────────────────────────
# 🔎 Lookup + decide
# ─────────────────────────────────────────────────────────────────────────────

async def load_visible(db: AsyncSession, model: Type[M], resource_id: UUID, actor_id: Optional[UUID], noun: str) -> M:
    resource = await db.get(model, resource_id)
    enforce(authorize(actor_id, resource, Action.READ), noun)
    return resource  # type: ignore[return-value]


async def load_for_write(
    db: AsyncSession,
    model: Type[M],
    resource_id: UUID,
    actor_id: UUID,
    noun: str,
    action: Action = Action.UPDATE,
) -> M:
    """Lookup-then-compare; returns the resource only when the caller owns it."""
    resource = await db.get(model, resource_id)
    enforce(authorize(actor_id, resource, action), noun)
    return resource  # type: ignore[return-value]


async def explain_missing_write(
    db: AsyncSession, model: Type[Any], resource_id: UUID, actor_id: UUID, noun: str
) -> AppException:
    """Classify an owner-scoped write that touched no row (re-read once)."""
    resource = await db.get(model, resource_id, populate_existing=True)
    error = denial_error(authorize(actor_id, resource, Action.UPDATE), noun)
    if error is not None:
        return error
    return UpstreamFailureError(f"Failed to update {noun.lower()}")


__all__ = [
    "Action",
    "DenyReason",
    "Decision",
    "ALLOW",
    "deny",
    "authorize",
    "denial_error",
    "enforce",
    "visibility_clause",
    "load_visible",
    "load_for_write",
    "explain_missing_write",
]

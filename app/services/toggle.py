# app/services/toggle.py
from __future__ import annotations

"""
Edge toggles (likes, subscriptions) and set membership
======================================================

An *edge* is a row keyed by (actor, target) with a unique index on that pair.
`toggle_edge()` flips its presence with two single-statement operations
instead of a read-then-write:

1) ``DELETE … WHERE actor AND target RETURNING pk``
   - a row came back → the edge existed, result ``active=False``
   - nothing came back → the edge is absent (or a concurrent call just
     removed it); that is an ordinary outcome, go on to (2)
2) ``INSERT … ON CONFLICT DO NOTHING RETURNING pk``
   - a row came back → result ``active=True``
   - nothing came back → a concurrent call inserted the same edge first;
     surfaced as `ConflictError`

The unique index is the hard guarantee that at most one edge row exists.

`insert_edge()` / `delete_edge()` are the same primitives, used directly by
playlist membership (add must be new, remove must exist).
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence
from uuid import UUID

from loguru import logger
from sqlalchemy import ColumnElement, delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from app.core.exceptions import ConflictError
from app.db.models import Like, Subscription


@dataclass(frozen=True)
class EdgeSpec:
    """How one edge kind is keyed."""

    name: str
    model: Any
    actor: InstrumentedAttribute
    target: InstrumentedAttribute
    # Predicate of the partial unique index backing the pair, if partial
    index_where: Optional[ColumnElement[bool]] = None


@dataclass(frozen=True)
class ToggleResult:
    active: bool
    edge_id: Optional[Any] = None


LIKE_VIDEO = EdgeSpec("video like", Like, Like.liked_by, Like.video_id, Like.video_id.isnot(None))
LIKE_COMMENT = EdgeSpec("comment like", Like, Like.liked_by, Like.comment_id, Like.comment_id.isnot(None))
LIKE_TWEET = EdgeSpec("tweet like", Like, Like.liked_by, Like.tweet_id, Like.tweet_id.isnot(None))
SUBSCRIPTION = EdgeSpec("subscription", Subscription, Subscription.subscriber_id, Subscription.channel_id)


def _pk(model: Any) -> List[Any]:
    return list(model.__table__.primary_key.columns)


# ─────────────────────────────────────────────────────────────────────────────
# 🧱 Primitives
# ─────────────────────────────────────────────────────────────────────────────

async def delete_edge(db: AsyncSession, model: Any, *criteria: ColumnElement[bool]) -> List[Any]:
    """Delete matching rows; return the primary keys actually removed."""
    result = await db.execute(delete(model).where(*criteria).returning(*_pk(model)))
    return list(result.all())


async def insert_edge(
    db: AsyncSession,
    model: Any,
    values: dict,
    *,
    conflict_columns: Sequence[InstrumentedAttribute],
    index_where: Optional[ColumnElement[bool]] = None,
) -> Optional[Any]:
    """Insert unless the unique pair already exists; return the new key or ``None``."""
    stmt = (
        pg_insert(model)
        .values(**values)
        .on_conflict_do_nothing(index_elements=[c.key for c in conflict_columns], index_where=index_where)
        .returning(*_pk(model))
    )
    return (await db.execute(stmt)).first()


# ─────────────────────────────────────────────────────────────────────────────
# 🔁 Toggle
# ─────────────────────────────────────────────────────────────────────────────

async def toggle_edge(db: AsyncSession, spec: EdgeSpec, actor_id: UUID, target_id: UUID) -> ToggleResult:
    removed = await delete_edge(db, spec.model, spec.actor == actor_id, spec.target == target_id)
    if removed:
        await db.commit()
        return ToggleResult(active=False, edge_id=removed[0][0])

    created = await insert_edge(
        db,
        spec.model,
        {spec.actor.key: actor_id, spec.target.key: target_id},
        conflict_columns=(spec.actor, spec.target),
        index_where=spec.index_where,
    )
    if created is None:
        await db.rollback()
        logger.warning("Concurrent {} toggle lost the race (actor={}, target={})", spec.name, actor_id, target_id)
        raise ConflictError(f"The {spec.name} was changed concurrently; please retry")

    await db.commit()
    return ToggleResult(active=True, edge_id=created[0])


__all__ = [
    "EdgeSpec",
    "ToggleResult",
    "LIKE_VIDEO",
    "LIKE_COMMENT",
    "LIKE_TWEET",
    "SUBSCRIPTION",
    "delete_edge",
    "insert_edge",
    "toggle_edge",
]

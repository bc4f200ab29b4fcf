# app/services/pagination.py
from __future__ import annotations

"""
Pagination
==========

`paginate()` slices a composed `Select` into one page and reports totals:

    {items, page, limit, totalItems, totalPages}

The total is computed over the same statement (ordering stripped) wrapped in
a subquery, so joins and filters are counted exactly as listed.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Mapping, Optional, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


def clamp_positive(value: int) -> int:
    """Anything below 1 becomes 1."""
    return value if value >= 1 else 1


def total_pages(total_items: int, limit: int) -> int:
    return math.ceil(total_items / limit) if total_items > 0 else 0


@dataclass
class PageResult(Generic[T]):
    items: List[T] = field(default_factory=list)
    page: int = 1
    limit: int = 10
    total_items: int = 0
    total_pages: int = 0


async def paginate(
    db: AsyncSession,
    stmt: Select,
    *,
    page: int,
    limit: int,
    transform: Optional[Callable[[Mapping[str, Any]], T]] = None,
) -> PageResult[T]:
    """Run `stmt` for one page.

    Parameters
    ----------
    db : AsyncSession
    stmt : Select
        Fully composed statement, already ordered.
    page, limit : int
        Clamped to ≥1 here as well, so direct callers get the same guarantee.
    transform :
        Applied to each row mapping (e.g. `unflatten`).
    """
    page, limit = clamp_positive(page), clamp_positive(limit)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = int((await db.execute(count_stmt)).scalar_one())

    rows = (await db.execute(stmt.offset((page - 1) * limit).limit(limit))).mappings().all()
    items = [transform(r) if transform else dict(r) for r in rows]

    return PageResult(
        items=items,
        page=page,
        limit=limit,
        total_items=total,
        total_pages=total_pages(total, limit),
    )


__all__ = ["PageResult", "paginate", "clamp_positive", "total_pages"]

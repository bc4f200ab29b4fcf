from __future__ import annotations

"""Shared write paths for owner-scoped rows.

Every mutation of an owned row follows the same sequence:

1. `load_for_write`: lookup by id, then compare owner (NotFound before Forbidden).
2. ``UPDATE/DELETE … WHERE id AND owner_id RETURNING *``: the owner predicate
   keeps the write correct even if ownership or existence changed in between.
3. No row returned → re-read once and classify (NotFound / Forbidden / UpstreamFailure).
"""

from typing import Any, Dict, Type
from uuid import UUID

from sqlalchemy import delete, insert, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.access_guard import Action, explain_missing_write, load_for_write


def row_dict(obj: Any) -> Dict[str, Any]:
    """Column values of a mapped instance as a plain dict."""
    return {c.key: getattr(obj, c.key) for c in obj.__table__.columns}


class OwnedRepository:
    model: Type[Any]
    noun: str = "Resource"

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_owned(self, resource_id: UUID, actor_id: UUID, action: Action = Action.UPDATE) -> Any:
        return await load_for_write(self.db, self.model, resource_id, actor_id, self.noun, action)

    async def _insert(self, **values: Any) -> Dict[str, Any]:
        stmt = insert(self.model).values(**values).returning(*self.model.__table__.columns)
        row = (await self.db.execute(stmt)).mappings().one()
        await self.db.commit()
        return dict(row)

    async def _update_owned(self, resource_id: UUID, actor_id: UUID, values: Dict[str, Any]) -> Dict[str, Any]:
        await self._get_owned(resource_id, actor_id, Action.UPDATE)
        stmt = (
            update(self.model)
            .where(self.model.id == resource_id, self.model.owner_id == actor_id)
            .values(**values)
            .returning(*self.model.__table__.columns)
        )
        row = (await self.db.execute(stmt)).mappings().first()
        if row is None:
            await self.db.rollback()
            raise await explain_missing_write(self.db, self.model, resource_id, actor_id, self.noun)
        await self.db.commit()
        return dict(row)

    async def _delete_owned(self, resource_id: UUID, actor_id: UUID) -> Dict[str, Any]:
        await self._get_owned(resource_id, actor_id, Action.DELETE)
        stmt = (
            delete(self.model)
            .where(self.model.id == resource_id, self.model.owner_id == actor_id)
            .returning(*self.model.__table__.columns)
        )
        row = (await self.db.execute(stmt)).mappings().first()
        if row is None:
            await self.db.rollback()
            raise await explain_missing_write(self.db, self.model, resource_id, actor_id, self.noun)
        await self.db.commit()
        return dict(row)

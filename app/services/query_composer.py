# app/services/query_composer.py
from __future__ import annotations

"""
VidShare · Query Composer
=========================

Builds one SQLAlchemy `Select` per list/detail read from a fixed sequence of
stages. Every entity read in the API goes through here, so visibility,
search, owner projection, derived counters and ordering behave the same for
videos, comments, tweets, playlists and channels.

Stage order
-----------
    match → visibility → search → owner → derived → sort   (→ paginate)

Stages may be skipped but never reordered; adding one out of order raises
`ValueError` (a programming error, not a client error). Pagination is applied
afterwards by `app.services.pagination.paginate`.

Derived fields
--------------
Counts (`likes_count`, `subscribers_count`, ...) are correlated scalar
subqueries. Caller flags (`is_liked`, `is_subscribed`) are correlated
`EXISTS` checks on the caller's id, so the whole read is a single round-trip.
Anonymous callers get constant `false` flags.

Row shape
---------
Owner columns are labelled `owner__<field>`; `unflatten()` turns such rows
into nested dicts (`{"owner": {...}}`) ready for the response schemas.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, Select, exists, false, func, or_, select
from sqlalchemy.orm import InstrumentedAttribute

from app.core.config import settings
from app.core.exceptions import InvalidInputError
from app.db.models import Like, Subscription, User
from app.services.access_guard import visibility_clause
from app.services.pagination import clamp_positive

STAGES: tuple[str, ...] = ("match", "visibility", "search", "owner", "derived", "sort")

# Public owner profile; never email
OWNER_FIELDS: tuple[str, ...] = ("id", "username", "full_name", "avatar")

_ASC = {"asc", "1", "ascending"}
_DESC = {"desc", "-1", "descending"}


# ─────────────────────────────────────────────────────────────────────────────
# 📄 List options
# ─────────────────────────────────────────────────────────────────────────────

def _as_int(value: Any, name: str, default: int) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidInputError(f"Invalid {name}", errors=[{"field": name, "message": "must be an integer"}])


@dataclass(frozen=True)
class ListOptions:
    """Normalized list query options."""

    page: int = 1
    limit: int = 10
    query: Optional[str] = None
    sort_by: str = "createdAt"
    sort_type: str = "desc"

    @classmethod
    def parse(
        cls,
        *,
        page: Any = None,
        limit: Any = None,
        query: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_type: Optional[str] = None,
    ) -> "ListOptions":
        """Parse raw query values; page/limit are clamped to ≥1 and limit to the configured max."""
        page_n = clamp_positive(_as_int(page, "page", 1))
        limit_n = min(clamp_positive(_as_int(limit, "limit", settings.DEFAULT_PAGE_LIMIT)), settings.MAX_PAGE_LIMIT)

        st = (sort_type or "desc").strip().lower()
        if st in _ASC:
            st = "asc"
        elif st in _DESC:
            st = "desc"
        else:
            raise InvalidInputError(
                "Invalid sortType", errors=[{"field": "sortType", "message": "must be 'asc' or 'desc'"}]
            )

        q = (query or "").strip() or None
        return cls(page=page_n, limit=limit_n, query=q, sort_by=(sort_by or "").strip() or "createdAt", sort_type=st)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ─────────────────────────────────────────────────────────────────────────────
# 🧱 Composer
# ─────────────────────────────────────────────────────────────────────────────

class QueryComposer:
    """Stage-ordered `Select` builder for one entity.

    Parameters
    ----------
    model :
        Mapped class whose columns form the base projection.
    actor_id :
        Caller identity (``None`` for anonymous reads).
    options :
        Parsed list options; defaults apply when omitted.
    columns :
        Base projection; all table columns when omitted.
    """

    def __init__(
        self,
        model: Any,
        *,
        actor_id: Optional[UUID] = None,
        options: Optional[ListOptions] = None,
        columns: Optional[Sequence[Any]] = None,
    ) -> None:
        self.model = model
        self.actor_id = actor_id
        self.options = options or ListOptions()
        self.stages: List[str] = []
        self._stmt: Select = select(*(columns if columns is not None else model.__table__.columns))

    # ── Stage bookkeeping ───────────────────────────────────────────────────
    def _enter(self, stage: str) -> None:
        if self.stages and STAGES.index(stage) < STAGES.index(self.stages[-1]):
            raise ValueError(f"stage {stage!r} cannot follow {self.stages[-1]!r}")
        if not self.stages or self.stages[-1] != stage:
            self.stages.append(stage)

    # ── (1) Match ───────────────────────────────────────────────────────────
    def match(self, *criteria: ColumnElement[bool]) -> "QueryComposer":
        """Exact filters (ids, owner, membership)."""
        self._enter("match")
        self._stmt = self._stmt.where(*criteria)
        return self

    # ── (2) Visibility ──────────────────────────────────────────────────────
    def visible(self) -> "QueryComposer":
        """Published rows, plus the caller's own unpublished ones."""
        self._enter("visibility")
        self._stmt = self._stmt.where(visibility_clause(self.model, self.actor_id))
        return self

    # ── (3) Search ──────────────────────────────────────────────────────────
    def search(self, *columns: InstrumentedAttribute) -> "QueryComposer":
        """Case-insensitive substring match of `options.query` on any of `columns`."""
        self._enter("search")
        term = self.options.query
        if term:
            pattern = f"%{_escape_like(term)}%"
            self._stmt = self._stmt.where(or_(*(c.ilike(pattern, escape="\\") for c in columns)))
        return self

    # ── (4) Owner profile ───────────────────────────────────────────────────
    def with_owner(self, owner_fk: Optional[InstrumentedAttribute] = None) -> "QueryComposer":
        self._enter("owner")
        fk = owner_fk if owner_fk is not None else self.model.owner_id
        self._stmt = self._stmt.join(User, User.id == fk).add_columns(
            *(getattr(User, f).label(f"owner__{f}") for f in OWNER_FIELDS)
        )
        return self

    # ── (5) Derived fields ──────────────────────────────────────────────────
    def with_count(self, label: str, count_stmt: Select) -> "QueryComposer":
        """Attach any correlated ``SELECT count(*) ...`` under `label`."""
        self._enter("derived")
        self._stmt = self._stmt.add_columns(count_stmt.scalar_subquery().label(label))
        return self

    def _flag(self, label: str, *criteria: ColumnElement[bool]) -> ColumnElement:
        if self.actor_id is None:
            return false().label(label)
        return exists().where(*criteria).label(label)

    def with_likes(self, like_target: InstrumentedAttribute, *, target_id: Optional[ColumnElement] = None) -> "QueryComposer":
        """`likes_count` and `is_liked` for the row, where `like_target` is e.g. ``Like.video_id``."""
        self._enter("derived")
        target = target_id if target_id is not None else self.model.id
        count = select(func.count()).select_from(Like).where(like_target == target).scalar_subquery()
        self._stmt = self._stmt.add_columns(
            count.label("likes_count"),
            self._flag("is_liked", like_target == target, Like.liked_by == self.actor_id),
        )
        return self

    def with_subscribers(self, channel: ColumnElement, *, prefix: str = "") -> "QueryComposer":
        """`subscribers_count` / `is_subscribed` for the channel identified by `channel`."""
        self._enter("derived")
        count = (
            select(func.count()).select_from(Subscription)
            .where(Subscription.channel_id == channel)
            .scalar_subquery()
        )
        self._stmt = self._stmt.add_columns(
            count.label(f"{prefix}subscribers_count"),
            self._flag(
                f"{prefix}is_subscribed",
                Subscription.channel_id == channel,
                Subscription.subscriber_id == self.actor_id,
            ),
        )
        return self

    # ── (6) Sort ────────────────────────────────────────────────────────────
    def sort(self, allowed: Mapping[str, ColumnElement]) -> "QueryComposer":
        """Order by `options.sort_by` (must be a key of `allowed`); primary key breaks ties."""
        self._enter("sort")
        key = self.options.sort_by
        if key not in allowed:
            raise InvalidInputError(
                "Invalid sortBy",
                errors=[{"field": "sortBy", "message": f"must be one of: {', '.join(sorted(allowed))}"}],
            )
        column, tiebreak = allowed[key], self.model.__table__.primary_key.columns.values()[0]
        if self.options.sort_type == "asc":
            self._stmt = self._stmt.order_by(column.asc(), tiebreak.asc())
        else:
            self._stmt = self._stmt.order_by(column.desc(), tiebreak.desc())
        return self

    def build(self) -> Select:
        return self._stmt


# ─────────────────────────────────────────────────────────────────────────────
# 🔧 Row helpers
# ─────────────────────────────────────────────────────────────────────────────

def unflatten(row: Mapping[str, Any], *, sep: str = "__") -> Dict[str, Any]:
    """``{"owner__id": 1, "title": "x"}`` → ``{"owner": {"id": 1}, "title": "x"}``."""
    out: Dict[str, Any] = {}
    for key, value in row.items():
        head, found, tail = key.partition(sep)
        if found:
            out.setdefault(head, {})[tail] = value
        else:
            out[key] = value
    return out


def unflatten_all(rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [unflatten(r) for r in rows]


__all__ = ["STAGES", "OWNER_FIELDS", "ListOptions", "QueryComposer", "unflatten", "unflatten_all"]

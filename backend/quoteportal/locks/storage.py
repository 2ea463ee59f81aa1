# backend/quoteportal/locks/storage.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from sqlalchemy import Table, or_, select, update
from sqlalchemy.orm import Session
from ..shared.db import Base, utcnow
from .errors import ResourceNotFound
from .targets import LockTarget


@dataclass
class LockState:
    id: str
    blocked: datetime | None
    blocked_by: str | None
    blocked_by_name: str | None = None

    @property
    def is_locked(self) -> bool:
        return self.blocked is not None


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands timestamps back without an offset; they are written in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _table(name: str) -> Table:
    try:
        return Base.metadata.tables[name]
    except KeyError:
        raise LookupError(f"table {name!r} is not registered") from None


def _lock_columns(target: LockTarget):
    t = _table(target.table)
    return t, t.c[target.id_column], t.c[target.blocked_column], t.c[target.blocked_by_column]


def read_lock_state(db: Session, target: LockTarget, entity_id: str) -> LockState:
    """Read (id, blocked, blocked_by) plus the holder's display name."""
    t, id_col, blocked, blocked_by = _lock_columns(target)
    users = _table("users")
    row = db.execute(
        select(
            id_col.label("id"),
            blocked.label("blocked"),
            blocked_by.label("blocked_by"),
            users.c.name.label("blocked_by_name"),
        )
        .select_from(t)
        .outerjoin(users, blocked_by == users.c.id)
        .where(id_col == entity_id)
    ).first()
    if row is None:
        raise ResourceNotFound(target.kind, entity_id, target.not_found_message)
    return LockState(
        id=row.id,
        blocked=_as_utc(row.blocked),
        blocked_by=row.blocked_by,
        blocked_by_name=row.blocked_by_name,
    )


def write_lock_state(
    db: Session,
    target: LockTarget,
    entity_id: str,
    blocked: datetime | None,
    blocked_by: str | None,
    claimable_by: str | None = None,
) -> int:
    """Set or clear the lock pair. Returns the number of rows touched.

    With `claimable_by` the update only lands while the row is unlocked or
    already held by that user, so a lost claim shows up as 0 rows.
    """
    if (blocked is None) != (blocked_by is None):
        raise ValueError("blocked and blocked_by must be set or cleared together")
    t, id_col, blocked_col, blocked_by_col = _lock_columns(target)
    stmt = (
        update(t)
        .where(id_col == entity_id)
        .values({blocked_col: blocked, blocked_by_col: blocked_by})
    )
    if claimable_by is not None:
        stmt = stmt.where(or_(blocked_by_col.is_(None), blocked_by_col == claimable_by))
    return db.execute(stmt).rowcount


def write_entity_fields(
    db: Session, target: LockTarget, entity_id: str, fields: dict[str, Any]
) -> int:
    """Update ordinary columns of a lockable row. Lock columns are off limits."""
    t, id_col, _, _ = _lock_columns(target)
    forbidden = {target.id_column, target.blocked_column, target.blocked_by_column}
    values: dict[str, Any] = {}
    for key, value in fields.items():
        if key in forbidden:
            raise ValueError(f"{key} cannot be written through entity fields")
        if key not in t.c:
            raise ValueError(f"unknown column {key!r} on {target.table}")
        values[key] = value
    if "updated_at" in t.c and "updated_at" not in values:
        values["updated_at"] = utcnow()
    if not values:
        return 0
    return db.execute(update(t).where(id_col == entity_id).values(values)).rowcount


def clear_locks_held_by(db: Session, target: LockTarget, user_id: str) -> int:
    t, _, blocked_col, blocked_by_col = _lock_columns(target)
    stmt = (
        update(t)
        .where(blocked_by_col == user_id)
        .values({blocked_col: None, blocked_by_col: None})
    )
    return db.execute(stmt).rowcount

# backend/quoteportal/locks/models.py
from datetime import datetime
from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column


class LockableMixin:
    """Lock columns shared by every lockable table.

    `blocked` holds the acquisition time, `blocked_by` the holder. Both are
    set and cleared together.
    """

    blocked: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    blocked_by: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )


def lock_pair_check(table_name: str) -> CheckConstraint:
    return CheckConstraint(
        "(blocked IS NULL AND blocked_by IS NULL) OR (blocked IS NOT NULL AND blocked_by IS NOT NULL)",
        name=f"ck_{table_name}_lock_pair",
    )

# backend/quoteportal/locks/schemas.py
from datetime import datetime
from ..shared.schemas import CamelModel


class LockStatusOut(CamelModel):
    is_locked: bool
    locked_by: str | None = None
    locked_by_name: str | None = None
    locked_at: datetime | None = None


class LockActionOut(CamelModel):
    success: bool = True


class UnlockAllOut(CamelModel):
    success: bool = True
    operations: int  # resource types swept
    released: int  # rows cleared

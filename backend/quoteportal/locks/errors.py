# backend/quoteportal/locks/errors.py
from __future__ import annotations
from datetime import datetime
from typing import Any


class LockError(Exception):
    """Base for every structured error the lock core raises."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


class ResourceNotFound(LockError):
    status_code = 404

    def __init__(self, kind: str, resource_id: str, message: str | None = None):
        super().__init__(message or f"{kind} {resource_id} not found")
        self.kind = kind
        self.resource_id = resource_id


class EditLockError(LockError):
    """A guarded write hit a lock held by someone else."""

    status_code = 409

    def __init__(
        self,
        kind: str,
        resource_id: str,
        message: str,
        locked_by: str | None = None,
        locked_at: datetime | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.resource_id = resource_id
        self.locked_by = locked_by
        self.locked_at = locked_at

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "type": "EDIT_LOCK_ERROR",
            "resourceId": self.resource_id,
            "lockedBy": self.locked_by,
            "lockedAt": self.locked_at.isoformat() if self.locked_at else None,
        }


class LockConflict(LockError):
    """An unforced acquire hit a lock held by someone else."""

    status_code = 409

    def __init__(
        self,
        kind: str,
        resource_id: str,
        message: str,
        locked_by: str | None,
        locked_by_name: str | None,
    ):
        super().__init__(message)
        self.kind = kind
        self.resource_id = resource_id
        self.locked_by = locked_by
        self.locked_by_name = locked_by_name

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "lockedBy": self.locked_by,
            "lockedByName": self.locked_by_name,
        }


class UnlockForbidden(LockError):
    """Release attempted by someone other than the holder."""

    status_code = 403

    def __init__(self, kind: str, resource_id: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.resource_id = resource_id

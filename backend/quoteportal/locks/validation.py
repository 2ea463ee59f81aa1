# backend/quoteportal/locks/validation.py
"""Edit-lock rules shared by the lock routes and every guarded write.

A lock is the (blocked, blocked_by) pair on the resource row itself. Nothing
here commits; the calling route owns the transaction.
"""
from __future__ import annotations
import logging
from sqlalchemy.orm import Session
from ..auth.models import User
from ..shared.db import utcnow
from .errors import EditLockError, LockConflict, UnlockForbidden
from .storage import clear_locks_held_by, read_lock_state, write_lock_state
from .targets import LOCK_TARGETS, LockTarget

logger = logging.getLogger(__name__)


def check_resource_editable(db: Session, target: LockTarget, entity_id: str, user: User) -> None:
    """Pass if the resource is unlocked or held by `user`, else raise EditLockError.

    Does not take or refresh the lock.
    """
    state = read_lock_state(db, target, entity_id)
    if not state.is_locked or state.blocked_by == user.id:
        return
    logger.warning(
        "%s %s write by %s refused, locked by %s since %s",
        target.kind,
        entity_id,
        user.id,
        state.blocked_by,
        state.blocked,
    )
    raise EditLockError(
        target.kind,
        entity_id,
        target.locked_message,
        locked_by=state.blocked_by,
        locked_at=state.blocked,
    )


def _conflict(target: LockTarget, entity_id: str, holder_id, holder_name) -> LockConflict:
    logger.warning("%s %s lock refused, held by %s", target.kind, entity_id, holder_id)
    return LockConflict(target.kind, entity_id, target.lock_error_message, holder_id, holder_name)


def acquire_lock(
    db: Session, target: LockTarget, entity_id: str, user: User, force: bool = False
) -> None:
    state = read_lock_state(db, target, entity_id)
    if not force and state.is_locked and state.blocked_by != user.id:
        raise _conflict(target, entity_id, state.blocked_by, state.blocked_by_name)

    if force:
        write_lock_state(db, target, entity_id, utcnow(), user.id)
        if state.is_locked and state.blocked_by != user.id:
            logger.info(
                "%s %s taken over by %s from %s", target.kind, entity_id, user.id, state.blocked_by
            )
        return

    # conditional write: a concurrent claim that landed after our read wins
    if write_lock_state(db, target, entity_id, utcnow(), user.id, claimable_by=user.id) == 0:
        latest = read_lock_state(db, target, entity_id)
        raise _conflict(target, entity_id, latest.blocked_by, latest.blocked_by_name)
    logger.info("%s %s locked by %s", target.kind, entity_id, user.id)


def release_lock(db: Session, target: LockTarget, entity_id: str, user: User) -> None:
    """Clear the caller's lock. Releasing an unlocked resource is a no-op success."""
    state = read_lock_state(db, target, entity_id)
    if state.is_locked and state.blocked_by != user.id:
        raise UnlockForbidden(target.kind, entity_id, target.unlock_error_message)
    if not state.is_locked:
        return

    if write_lock_state(db, target, entity_id, None, None, claimable_by=user.id) == 0:
        # taken over between read and write
        raise UnlockForbidden(target.kind, entity_id, target.unlock_error_message)
    logger.info("%s %s released by %s", target.kind, entity_id, user.id)


def release_all_locks_for_user(db: Session, user: User) -> dict[str, int]:
    """Clear every lock `user` holds, across all lockable types."""
    released = {kind: clear_locks_held_by(db, target, user.id) for kind, target in LOCK_TARGETS.items()}
    logger.info("released %d locks held by %s", sum(released.values()), user.id)
    return released

# backend/quoteportal/locks/routes.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from ..deps import get_db
from ..auth.models import User
from ..auth.utils import current_user
from .schemas import LockActionOut, LockStatusOut
from .storage import read_lock_state
from .targets import LockTarget
from .validation import acquire_lock, release_lock


def create_lock_router(target: LockTarget) -> APIRouter:
    """Status / acquire / release routes for one lockable resource type."""
    router = APIRouter(prefix=f"/api/{target.segment}", tags=["locks"])

    @router.get("/{entity_id}/lock", response_model=LockStatusOut)
    def get_lock_status(
        entity_id: str, db: Session = Depends(get_db), user: User = Depends(current_user)
    ):
        state = read_lock_state(db, target, entity_id)
        return LockStatusOut(
            is_locked=state.is_locked,
            locked_by=state.blocked_by,
            locked_by_name=state.blocked_by_name,
            locked_at=state.blocked,
        )

    @router.post("/{entity_id}/lock", response_model=LockActionOut)
    def lock(
        entity_id: str,
        force: bool = Query(False),
        db: Session = Depends(get_db),
        user: User = Depends(current_user),
    ):
        acquire_lock(db, target, entity_id, user, force=force)
        db.commit()
        return LockActionOut()

    @router.delete("/{entity_id}/lock", response_model=LockActionOut)
    def unlock(entity_id: str, db: Session = Depends(get_db), user: User = Depends(current_user)):
        release_lock(db, target, entity_id, user)
        db.commit()
        return LockActionOut()

    return router

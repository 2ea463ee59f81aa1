# backend/quoteportal/locks/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ..deps import get_db
from ..auth.models import User
from ..auth.utils import current_user
from .routes import create_lock_router
from .schemas import UnlockAllOut
from .targets import LOCK_TARGETS
from .validation import release_all_locks_for_user

router = APIRouter(prefix="/api/users", tags=["locks"])

lock_routers = [create_lock_router(target) for target in LOCK_TARGETS.values()]


@router.post("/current/unlock-all", response_model=UnlockAllOut)
def unlock_all(db: Session = Depends(get_db), user: User = Depends(current_user)):
    released = release_all_locks_for_user(db, user)
    db.commit()
    return UnlockAllOut(operations=len(released), released=sum(released.values()))

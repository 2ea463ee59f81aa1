# backend/quoteportal/blocks/router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session
from ..deps import get_db
from ..auth.models import User
from ..auth.utils import current_user
from ..locks.errors import ResourceNotFound
from ..locks.schemas import LockActionOut
from ..locks.storage import write_entity_fields
from ..locks.targets import BLOCKS
from ..locks.validation import check_resource_editable
from ..quotes.models import QuotePosition
from . import models as m
from . import schemas as s

router = APIRouter(prefix="/api/blocks", tags=["blocks"])


@router.post("", response_model=s.BlockOut)
def create_block(
    payload: s.BlockCreate, db: Session = Depends(get_db), user: User = Depends(current_user)
):
    block = m.Block(**payload.model_dump())
    db.add(block)
    db.commit()
    db.refresh(block)
    return block


@router.get("/{block_id}", response_model=s.BlockOut)
def get_block(block_id: str, db: Session = Depends(get_db)):
    block = db.scalar(select(m.Block).where(m.Block.id == block_id, m.Block.deleted == False))
    if not block:
        raise ResourceNotFound(BLOCKS.kind, block_id, BLOCKS.not_found_message)
    return block


@router.put("/{block_id}", response_model=LockActionOut)
def save_block_properties(
    block_id: str,
    payload: s.BlockUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    check_resource_editable(db, BLOCKS, block_id, user)
    write_entity_fields(db, BLOCKS, block_id, payload.model_dump(exclude_unset=True))
    db.commit()
    return LockActionOut()


@router.put("/{block_id}/content", response_model=LockActionOut)
def save_block_content(
    block_id: str,
    payload: list[s.BlockContentIn],
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    """Replace all language variants of the block's content."""
    check_resource_editable(db, BLOCKS, block_id, user)
    languages = [c.language for c in payload]
    if len(set(languages)) != len(languages):
        raise HTTPException(400, "duplicate language in block content")
    db.execute(delete(m.BlockContent).where(m.BlockContent.block_id == block_id))
    for content in payload:
        db.add(m.BlockContent(block_id=block_id, **content.model_dump()))
    db.commit()
    return LockActionOut()


@router.delete("/{block_id}", response_model=LockActionOut)
def delete_block(block_id: str, db: Session = Depends(get_db), user: User = Depends(current_user)):
    check_resource_editable(db, BLOCKS, block_id, user)

    used = db.scalar(
        select(func.count(QuotePosition.id)).where(QuotePosition.block_id == block_id)
    )
    if used:
        raise HTTPException(409, "Block is used in quote positions and cannot be deleted")

    db.execute(delete(m.BlockContent).where(m.BlockContent.block_id == block_id))
    db.execute(delete(m.Block).where(m.Block.id == block_id))
    db.commit()
    return LockActionOut()

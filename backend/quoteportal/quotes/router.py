# backend/quoteportal/quotes/router.py
from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session
from ..deps import get_db
from ..auth.models import User
from ..auth.utils import current_user
from ..articles.models import Article
from ..blocks.models import Block
from ..locks.errors import ResourceNotFound
from ..locks.schemas import LockActionOut
from ..locks.storage import write_entity_fields
from ..locks.targets import ARTICLES, BLOCKS, QUOTE_VERSIONS
from ..locks.validation import check_resource_editable
from ..shared.db import utcnow
from . import models as m
from . import schemas as s

router = APIRouter(prefix="/api/quote-versions", tags=["quotes"])


@router.get("/{version_id}", response_model=s.QuoteVersionOut)
def get_quote_version(version_id: str, db: Session = Depends(get_db)):
    version = db.scalar(
        select(m.QuoteVersion).where(
            m.QuoteVersion.id == version_id, m.QuoteVersion.deleted == False
        )
    )
    if not version:
        raise ResourceNotFound(QUOTE_VERSIONS.kind, version_id, QUOTE_VERSIONS.not_found_message)
    return version


@router.put("/{version_id}", response_model=LockActionOut)
def save_quote_version(
    version_id: str,
    payload: s.QuoteVersionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    check_resource_editable(db, QUOTE_VERSIONS, version_id, user)
    fields = payload.model_dump(exclude_unset=True)
    fields["modified_by"] = user.id
    write_entity_fields(db, QUOTE_VERSIONS, version_id, fields)
    db.commit()
    return LockActionOut()


@router.delete("/{version_id}", response_model=LockActionOut)
def delete_quote_version(
    version_id: str, db: Session = Depends(get_db), user: User = Depends(current_user)
):
    check_resource_editable(db, QUOTE_VERSIONS, version_id, user)
    db.execute(delete(m.QuoteVersion).where(m.QuoteVersion.id == version_id))
    db.commit()
    return LockActionOut()


# ---- positions ----
# Positions have no lock of their own; every write is guarded by the lock on
# the version they belong to.
def _line_total(quantity: Decimal | None, unit_price: Decimal | None) -> Decimal | None:
    if quantity is None or unit_price is None:
        return None
    return quantity * unit_price


def _load_position(db: Session, version_id: str, position_id: str) -> m.QuotePosition:
    position = db.get(m.QuotePosition, position_id)
    if not position or position.deleted or position.version_id != version_id:
        raise ResourceNotFound("quote position", position_id, "Quote position not found")
    return position


def _apply(position: m.QuotePosition, fields: dict) -> None:
    for key, value in fields.items():
        setattr(position, key, value)
    position.total_price = _line_total(position.quantity, position.unit_price)
    position.updated_at = utcnow()


def _active_positions(db: Session, version_id: str) -> list[m.QuotePosition]:
    return list(
        db.scalars(
            select(m.QuotePosition)
            .where(m.QuotePosition.version_id == version_id, m.QuotePosition.deleted == False)
            .order_by(m.QuotePosition.position_number)
        )
    )


@router.get("/{version_id}/positions", response_model=list[s.PositionOut])
def list_positions(version_id: str, db: Session = Depends(get_db)):
    return _active_positions(db, version_id)


@router.post("/{version_id}/positions", response_model=s.PositionOut)
def add_position(
    version_id: str,
    payload: s.PositionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    check_resource_editable(db, QUOTE_VERSIONS, version_id, user)

    data = payload.model_dump()
    if payload.article_id:
        article = db.get(Article, payload.article_id)
        if not article or article.deleted:
            raise ResourceNotFound(ARTICLES.kind, payload.article_id, ARTICLES.not_found_message)
        data["title"] = data["title"] or article.number
        if data["unit_price"] is None:
            data["unit_price"] = article.price
    else:
        block = db.get(Block, payload.block_id)
        if not block or block.deleted:
            raise ResourceNotFound(BLOCKS.kind, payload.block_id, BLOCKS.not_found_message)
        data["title"] = data["title"] or block.name

    last = db.scalar(
        select(func.max(m.QuotePosition.position_number)).where(
            m.QuotePosition.version_id == version_id, m.QuotePosition.deleted == False
        )
    )
    position = m.QuotePosition(
        version_id=version_id,
        position_number=(last or 0) + 1,
        total_price=_line_total(data["quantity"], data["unit_price"]),
        **data,
    )
    db.add(position)
    db.commit()
    db.refresh(position)
    return position


@router.put("/{version_id}/positions/batch", response_model=list[s.PositionOut])
def save_positions_batch(
    version_id: str,
    payload: list[s.PositionBatchItem],
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    positions = [_load_position(db, version_id, item.id) for item in payload]
    for owner in {p.version_id for p in positions}:
        check_resource_editable(db, QUOTE_VERSIONS, owner, user)

    for position, item in zip(positions, payload):
        _apply(position, item.model_dump(exclude_unset=True, exclude={"id"}))
    db.commit()
    return _active_positions(db, version_id)


@router.put("/{version_id}/positions/reorder", response_model=list[s.PositionOut])
def reorder_positions(
    version_id: str,
    payload: s.PositionReorder,
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    check_resource_editable(db, QUOTE_VERSIONS, version_id, user)

    current = {p.id: p for p in _active_positions(db, version_id)}
    if sorted(payload.position_ids) != sorted(current):
        raise HTTPException(400, "Reorder must list every position of the version exactly once")
    for number, position_id in enumerate(payload.position_ids, start=1):
        current[position_id].position_number = number
    db.commit()
    return _active_positions(db, version_id)


@router.put("/{version_id}/positions/{position_id}", response_model=s.PositionOut)
def save_position(
    version_id: str,
    position_id: str,
    payload: s.PositionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    position = _load_position(db, version_id, position_id)
    check_resource_editable(db, QUOTE_VERSIONS, position.version_id, user)

    _apply(position, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(position)
    return position


@router.delete("/{version_id}/positions/{position_id}", response_model=LockActionOut)
def delete_position(
    version_id: str,
    position_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    position = _load_position(db, version_id, position_id)
    check_resource_editable(db, QUOTE_VERSIONS, position.version_id, user)

    db.delete(position)
    db.flush()
    for number, rest in enumerate(_active_positions(db, version_id), start=1):
        rest.position_number = number
    db.commit()
    return LockActionOut()

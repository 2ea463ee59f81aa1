# backend/quoteportal/articles/router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session
from ..deps import get_db
from ..auth.models import User
from ..auth.utils import current_user
from ..locks.errors import ResourceNotFound
from ..locks.schemas import LockActionOut
from ..locks.storage import write_entity_fields
from ..locks.targets import ARTICLES
from ..locks.validation import check_resource_editable
from ..quotes.models import QuotePosition
from . import models as m
from . import schemas as s

router = APIRouter(prefix="/api/articles", tags=["articles"])


def _get_article(db: Session, article_id: str) -> m.Article:
    article = db.scalar(
        select(m.Article).where(m.Article.id == article_id, m.Article.deleted == False)
    )
    if not article:
        raise ResourceNotFound(ARTICLES.kind, article_id, ARTICLES.not_found_message)
    return article


@router.post("", response_model=s.ArticleOut)
def create_article(
    payload: s.ArticleCreate, db: Session = Depends(get_db), user: User = Depends(current_user)
):
    article = m.Article(**payload.model_dump())
    db.add(article)
    db.commit()
    db.refresh(article)
    return article


@router.get("/{article_id}", response_model=s.ArticleOut)
def get_article(article_id: str, db: Session = Depends(get_db)):
    return _get_article(db, article_id)


@router.put("/{article_id}", response_model=LockActionOut)
def save_article(
    article_id: str,
    payload: s.ArticleUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    check_resource_editable(db, ARTICLES, article_id, user)
    write_entity_fields(db, ARTICLES, article_id, payload.model_dump(exclude_unset=True))
    db.commit()
    return LockActionOut()


@router.put("/{article_id}/calculations", response_model=LockActionOut)
def save_article_calculations(
    article_id: str,
    payload: list[s.ArticleCalculationIn],
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    """Replace the article's calculation rows with `payload`."""
    check_resource_editable(db, ARTICLES, article_id, user)

    db.execute(delete(m.ArticleCalculation).where(m.ArticleCalculation.article_id == article_id))
    for calc in payload:
        db.add(m.ArticleCalculation(article_id=article_id, **calc.model_dump()))
    db.commit()
    return LockActionOut()


@router.delete("/{article_id}", response_model=LockActionOut)
def delete_article(
    article_id: str, db: Session = Depends(get_db), user: User = Depends(current_user)
):
    check_resource_editable(db, ARTICLES, article_id, user)

    used = db.scalar(
        select(func.count(QuotePosition.id)).where(QuotePosition.article_id == article_id)
    )
    if used:
        raise HTTPException(409, "Article is used in quote positions and cannot be deleted")

    db.execute(delete(m.ArticleCalculation).where(m.ArticleCalculation.article_id == article_id))
    db.execute(delete(m.Article).where(m.Article.id == article_id))
    db.commit()
    return LockActionOut()

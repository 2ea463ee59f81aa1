# backend/quoteportal/sales_opportunities/router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session
from ..deps import get_db
from ..auth.models import User
from ..auth.utils import current_user
from ..locks.errors import ResourceNotFound
from ..locks.schemas import LockActionOut
from ..locks.storage import write_entity_fields
from ..locks.targets import SALES_OPPORTUNITIES
from ..locks.validation import check_resource_editable
from ..quotes.models import Quote
from . import models as m
from . import schemas as s

router = APIRouter(prefix="/api/sales-opportunities", tags=["sales-opportunities"])


@router.post("", response_model=s.SalesOpportunityOut)
def create_sales_opportunity(
    payload: s.SalesOpportunityCreate,
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    opp = m.SalesOpportunity(**payload.model_dump(), created_by=user.id)
    db.add(opp)
    db.commit()
    db.refresh(opp)
    return opp


@router.get("/{opportunity_id}", response_model=s.SalesOpportunityOut)
def get_sales_opportunity(opportunity_id: str, db: Session = Depends(get_db)):
    opp = db.scalar(
        select(m.SalesOpportunity).where(
            m.SalesOpportunity.id == opportunity_id, m.SalesOpportunity.deleted == False
        )
    )
    if not opp:
        raise ResourceNotFound(
            SALES_OPPORTUNITIES.kind, opportunity_id, SALES_OPPORTUNITIES.not_found_message
        )
    return opp


@router.put("/{opportunity_id}", response_model=LockActionOut)
def save_sales_opportunity(
    opportunity_id: str,
    payload: s.SalesOpportunityUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(current_user),
):
    check_resource_editable(db, SALES_OPPORTUNITIES, opportunity_id, user)
    fields = payload.model_dump(exclude_unset=True)
    status = fields.pop("status", None)
    if status is not None:
        fields["status"] = m.OpportunityStatus(status.value)
    fields["modified_by"] = user.id
    write_entity_fields(db, SALES_OPPORTUNITIES, opportunity_id, fields)
    db.commit()
    return LockActionOut()


@router.delete("/{opportunity_id}", response_model=LockActionOut)
def delete_sales_opportunity(
    opportunity_id: str, db: Session = Depends(get_db), user: User = Depends(current_user)
):
    check_resource_editable(db, SALES_OPPORTUNITIES, opportunity_id, user)

    # soft-deleted quotes still hold the foreign key
    quotes = db.scalar(
        select(func.count(Quote.id)).where(Quote.sales_opportunity_id == opportunity_id)
    )
    if quotes:
        raise HTTPException(409, "Sales opportunity still has quotes and cannot be deleted")

    db.execute(delete(m.SalesOpportunity).where(m.SalesOpportunity.id == opportunity_id))
    db.commit()
    return LockActionOut()

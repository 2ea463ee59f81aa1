from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import Field, field_validator
from ..shared.schemas import CamelModel


# mirrors models.OpportunityStatus for response serialization
class OpportunityStatus(str, Enum):
    open = "open"
    in_progress = "in_progress"
    won = "won"
    lost = "lost"
    cancelled = "cancelled"


class SalesOpportunityCreate(CamelModel):
    client_name: str = Field(min_length=1, max_length=255)
    crm_id: Optional[str] = None
    business_area: Optional[str] = None
    keyword: Optional[str] = None
    quote_volume: Optional[Decimal] = None


class SalesOpportunityUpdate(CamelModel):
    client_name: Optional[str] = Field(None, min_length=1, max_length=255)
    crm_id: Optional[str] = None
    order_inventory_specification: Optional[str] = None
    status: Optional[OpportunityStatus] = None
    business_area: Optional[str] = None
    keyword: Optional[str] = None
    quote_volume: Optional[Decimal] = None

    @field_validator("client_name", "status")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class SalesOpportunityOut(CamelModel):
    id: str
    crm_id: Optional[str] = None
    client_name: str
    order_inventory_specification: Optional[str] = None
    status: OpportunityStatus
    business_area: Optional[str] = None
    keyword: Optional[str] = None
    quote_volume: Optional[Decimal] = None
    created_by: str
    modified_by: Optional[str] = None
    blocked: Optional[datetime] = None
    blocked_by: Optional[str] = None

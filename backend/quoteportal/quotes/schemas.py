from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import Field, field_validator, model_validator
from ..shared.schemas import CamelModel


class QuoteVersionUpdate(CamelModel):
    accepted: Optional[bool] = None
    calculation_data_live: Optional[bool] = None
    total_price: Optional[Decimal] = None

    @field_validator("accepted", "calculation_data_live")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class QuoteVersionOut(CamelModel):
    id: str
    quote_id: str
    version_number: int
    accepted: bool
    calculation_data_live: bool
    total_price: Optional[Decimal] = None
    is_latest: bool
    modified_by: Optional[str] = None
    blocked: Optional[datetime] = None
    blocked_by: Optional[str] = None


# ---- positions ----
class PositionCreate(CamelModel):
    article_id: Optional[str] = None
    block_id: Optional[str] = None
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    quantity: Decimal = Decimal("1")
    unit_price: Optional[Decimal] = None

    @model_validator(mode="after")
    def _article_or_block(self):
        if (self.article_id is None) == (self.block_id is None):
            raise ValueError("exactly one of articleId or blockId is required")
        return self


class PositionUpdate(CamelModel):
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None

    @field_validator("quantity")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class PositionBatchItem(PositionUpdate):
    id: str


class PositionReorder(CamelModel):
    position_ids: list[str] = Field(min_length=1)


class PositionOut(CamelModel):
    id: str
    version_id: str
    article_id: Optional[str] = None
    block_id: Optional[str] = None
    position_number: int
    title: Optional[str] = None
    description: Optional[str] = None
    quantity: Decimal
    unit_price: Optional[Decimal] = None
    total_price: Optional[Decimal] = None

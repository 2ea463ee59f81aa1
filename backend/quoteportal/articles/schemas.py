from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import Field, field_validator
from ..shared.schemas import CamelModel


class ArticleCreate(CamelModel):
    number: str = Field(min_length=1, max_length=64)
    price: Decimal = Decimal("0")
    hide_title: bool = False


class ArticleUpdate(CamelModel):
    number: Optional[str] = Field(None, min_length=1, max_length=64)
    price: Optional[Decimal] = None
    hide_title: Optional[bool] = None

    @field_validator("number", "price", "hide_title")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ArticleCalculationIn(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    type: str = "time"
    value: Decimal = Decimal("0")
    description: Optional[str] = None
    order: int = 0


class ArticleCalculationOut(ArticleCalculationIn):
    id: str


class ArticleOut(CamelModel):
    id: str
    number: str
    price: Decimal
    hide_title: bool
    blocked: Optional[datetime] = None
    blocked_by: Optional[str] = None
    calculations: list[ArticleCalculationOut] = []

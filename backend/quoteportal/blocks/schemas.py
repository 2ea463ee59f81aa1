from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator
from ..shared.schemas import CamelModel


class BlockCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    standard: bool = False
    mandatory: bool = False
    position: Optional[int] = None
    hide_title: bool = False
    page_break_above: bool = False


class BlockUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    standard: Optional[bool] = None
    mandatory: Optional[bool] = None
    position: Optional[int] = None
    hide_title: Optional[bool] = None
    page_break_above: Optional[bool] = None

    @field_validator("name", "standard", "mandatory", "hide_title", "page_break_above")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class BlockContentIn(CamelModel):
    language: str = Field(min_length=2, max_length=16)
    title: str = Field(min_length=1, max_length=255)
    content: str = ""


class BlockContentOut(BlockContentIn):
    id: str


class BlockOut(CamelModel):
    id: str
    name: str
    standard: bool
    mandatory: bool
    position: Optional[int] = None
    hide_title: bool
    page_break_above: bool
    blocked: Optional[datetime] = None
    blocked_by: Optional[str] = None
    contents: list[BlockContentOut] = []

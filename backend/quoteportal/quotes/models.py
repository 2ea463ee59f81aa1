from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    CheckConstraint, String, Integer, Numeric, DateTime, ForeignKey, Text, UniqueConstraint, func,
)
from ..shared.db import Base, new_id
from ..locks.models import LockableMixin, lock_pair_check


class Quote(Base):
    __tablename__ = "quotes"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    sales_opportunity_id: Mapped[str] = mapped_column(
        ForeignKey("sales_opportunities.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    deleted: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    versions: Mapped[list["QuoteVersion"]] = relationship(
        back_populates="quote", cascade="all, delete-orphan"
    )


class QuoteVersion(LockableMixin, Base):
    __tablename__ = "quote_versions"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    quote_id: Mapped[str] = mapped_column(
        ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    accepted: Mapped[bool] = mapped_column(default=False)
    calculation_data_live: Mapped[bool] = mapped_column(default=False)
    total_price: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    is_latest: Mapped[bool] = mapped_column(default=False)
    deleted: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    created_by: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    modified_by: Mapped[str | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    quote: Mapped["Quote"] = relationship(back_populates="versions")
    positions: Mapped[list["QuotePosition"]] = relationship(
        back_populates="version",
        cascade="all, delete-orphan",
        order_by="QuotePosition.position_number",
    )

    __table_args__ = (
        UniqueConstraint("quote_id", "version_number", name="uq_quote_version_number"),
        lock_pair_check("quote_versions"),
    )


class QuotePosition(Base):
    """A line of a quote version, referencing either an article or a text block."""

    __tablename__ = "quote_positions"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    version_id: Mapped[str] = mapped_column(
        ForeignKey("quote_versions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    article_id: Mapped[str | None] = mapped_column(ForeignKey("articles.id"), nullable=True)
    block_id: Mapped[str | None] = mapped_column(ForeignKey("blocks.id"), nullable=True)
    position_number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("1"))
    unit_price: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    total_price: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    deleted: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    version: Mapped["QuoteVersion"] = relationship(back_populates="positions")

    __table_args__ = (
        CheckConstraint(
            "(article_id IS NULL) <> (block_id IS NULL)", name="ck_quote_positions_source"
        ),
    )

from __future__ import annotations
import enum
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Numeric, DateTime, ForeignKey, Text, Enum as SAEnum, func
from ..shared.db import Base, new_id
from ..locks.models import LockableMixin, lock_pair_check


class OpportunityStatus(str, enum.Enum):
    open = "open"
    in_progress = "in_progress"
    won = "won"
    lost = "lost"
    cancelled = "cancelled"


class SalesOpportunity(LockableMixin, Base):
    __tablename__ = "sales_opportunities"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    crm_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    order_inventory_specification: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[OpportunityStatus] = mapped_column(
        SAEnum(OpportunityStatus, name="sales_opportunity_status_enum"),
        nullable=False,
        default=OpportunityStatus.open,
    )
    business_area: Mapped[str | None] = mapped_column(String(255), nullable=True)
    keyword: Mapped[str | None] = mapped_column(String(255), nullable=True)
    quote_volume: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    deleted: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    created_by: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    modified_by: Mapped[str | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    __table_args__ = (lock_pair_check("sales_opportunities"),)

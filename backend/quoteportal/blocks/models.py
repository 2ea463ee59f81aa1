from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, DateTime, ForeignKey, Text, UniqueConstraint, func
from ..shared.db import Base, new_id
from ..locks.models import LockableMixin, lock_pair_check


class Block(LockableMixin, Base):
    __tablename__ = "blocks"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    standard: Mapped[bool] = mapped_column(default=False)
    mandatory: Mapped[bool] = mapped_column(default=False)
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hide_title: Mapped[bool] = mapped_column(default=False)
    page_break_above: Mapped[bool] = mapped_column(default=False)
    deleted: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    contents: Mapped[list["BlockContent"]] = relationship(
        back_populates="block", cascade="all, delete-orphan"
    )

    __table_args__ = (lock_pair_check("blocks"),)


class BlockContent(Base):
    __tablename__ = "block_content"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    block_id: Mapped[str] = mapped_column(
        ForeignKey("blocks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    language: Mapped[str] = mapped_column(String(16), nullable=False)  # "de", "en"
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    block: Mapped["Block"] = relationship(back_populates="contents")

    __table_args__ = (UniqueConstraint("block_id", "language", name="uq_block_content_language"),)

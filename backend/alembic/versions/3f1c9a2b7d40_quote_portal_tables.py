"""quote portal tables with edit-lock columns

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-10-19 10:12:44.218305

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LOCK_PAIR = (
    "(blocked IS NULL AND blocked_by IS NULL) OR (blocked IS NOT NULL AND blocked_by IS NOT NULL)"
)


def _lock_columns(table: str):
    return [
        sa.Column("blocked", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "blocked_by",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.CheckConstraint(LOCK_PAIR, name=f"ck_{table}_lock_pair"),
    ]


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "articles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("number", sa.String(length=64), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("hide_title", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        *_lock_columns("articles"),
    )
    op.create_table(
        "article_calculations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "article_id",
            sa.String(length=36),
            sa.ForeignKey("articles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False, server_default="time"),
        sa.Column("value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
    )

    op.create_table(
        "blocks",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("standard", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("mandatory", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("position", sa.Integer(), nullable=True),
        sa.Column("hide_title", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("page_break_above", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        *_lock_columns("blocks"),
    )
    op.create_table(
        "block_content",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "block_id",
            sa.String(length=36),
            sa.ForeignKey("blocks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("language", sa.String(length=16), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.UniqueConstraint("block_id", "language", name="uq_block_content_language"),
    )

    op.create_table(
        "sales_opportunities",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("crm_id", sa.String(length=64), nullable=True),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("order_inventory_specification", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "open",
                "in_progress",
                "won",
                "lost",
                "cancelled",
                name="sales_opportunity_status_enum",
            ),
            nullable=False,
            server_default="open",
        ),
        sa.Column("business_area", sa.String(length=255), nullable=True),
        sa.Column("keyword", sa.String(length=255), nullable=True),
        sa.Column("quote_volume", sa.Numeric(14, 2), nullable=True),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("modified_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
        *_lock_columns("sales_opportunities"),
    )

    op.create_table(
        "quotes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "sales_opportunity_id",
            sa.String(length=36),
            sa.ForeignKey("sales_opportunities.id"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_table(
        "quote_versions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "quote_id",
            sa.String(length=36),
            sa.ForeignKey("quotes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("accepted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "calculation_data_live", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("total_price", sa.Numeric(14, 2), nullable=True),
        sa.Column("is_latest", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("modified_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=True),
        sa.UniqueConstraint("quote_id", "version_number", name="uq_quote_version_number"),
        *_lock_columns("quote_versions"),
    )
    op.create_table(
        "quote_positions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "version_id",
            sa.String(length=36),
            sa.ForeignKey("quote_versions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("article_id", sa.String(length=36), sa.ForeignKey("articles.id"), nullable=True),
        sa.Column("block_id", sa.String(length=36), sa.ForeignKey("blocks.id"), nullable=True),
        sa.Column("position_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False, server_default="1"),
        sa.Column("unit_price", sa.Numeric(14, 2), nullable=True),
        sa.Column("total_price", sa.Numeric(14, 2), nullable=True),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint(
            "(article_id IS NULL) <> (block_id IS NULL)", name="ck_quote_positions_source"
        ),
    )

    for table, fk in (
        ("article_calculations", "article_id"),
        ("block_content", "block_id"),
        ("quotes", "sales_opportunity_id"),
        ("quote_versions", "quote_id"),
        ("quote_positions", "version_id"),
    ):
        op.create_index(f"ix_{table}_{fk}", table, [fk])
    for table in ("articles", "blocks", "quote_versions", "sales_opportunities"):
        op.create_index(f"ix_{table}_blocked_by", table, ["blocked_by"])


def downgrade() -> None:
    for table in ("articles", "blocks", "quote_versions", "sales_opportunities"):
        op.drop_index(f"ix_{table}_blocked_by", table_name=table)
    op.drop_index("ix_quote_positions_version_id", table_name="quote_positions")
    op.drop_table("quote_positions")
    op.drop_table("quote_versions")
    op.drop_table("quotes")
    op.drop_table("sales_opportunities")
    op.drop_table("block_content")
    op.drop_table("blocks")
    op.drop_table("article_calculations")
    op.drop_table("articles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

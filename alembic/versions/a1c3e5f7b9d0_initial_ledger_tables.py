"""initial ledger tables

Revision ID: a1c3e5f7b9d0
Revises:
Create Date: 2026-10-17 10:12:08.517203

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1c3e5f7b9d0"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("gstin", sa.String(15), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_clients_owner_id", "clients", ["owner_id"])

    # client_id has no FK: deleting a client leaves its invoices in place
    op.create_table(
        "sales_invoices",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("client_id", sa.String(36), nullable=False),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("customer_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("customer_gstin", sa.String(20)),
        sa.Column("place_of_supply", sa.String(2), nullable=False),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("invoice_value", sa.Numeric(14, 2), nullable=False),
        sa.Column("taxable_value", sa.Numeric(14, 2), nullable=False),
        sa.Column("gst_rate", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_sales_invoices_owner_id", "sales_invoices", ["owner_id"])
    op.create_index("ix_sales_invoices_client_id", "sales_invoices", ["client_id"])

    op.create_table(
        "purchase_invoices",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("client_id", sa.String(36), nullable=False),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("supplier_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("supplier_gstin", sa.String(20)),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("taxable_value", sa.Numeric(14, 2), nullable=False),
        sa.Column("itc_claimed", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_purchase_invoices_owner_id", "purchase_invoices", ["owner_id"])
    op.create_index("ix_purchase_invoices_client_id", "purchase_invoices", ["client_id"])


def downgrade() -> None:
    op.drop_index("ix_purchase_invoices_client_id", table_name="purchase_invoices")
    op.drop_index("ix_purchase_invoices_owner_id", table_name="purchase_invoices")
    op.drop_table("purchase_invoices")
    op.drop_index("ix_sales_invoices_client_id", table_name="sales_invoices")
    op.drop_index("ix_sales_invoices_owner_id", table_name="sales_invoices")
    op.drop_table("sales_invoices")
    op.drop_index("ix_clients_owner_id", table_name="clients")
    op.drop_table("clients")

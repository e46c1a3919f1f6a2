"""Initial schema: glass types, cutting rates, customers, invoices, payments

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


MONEY = sa.Numeric(12, 2)
THICKNESS = sa.Numeric(6, 2)


def upgrade() -> None:
    op.create_table(
        "glass_types",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("color", sa.String(100), nullable=True),
        sa.Column("thickness", THICKNESS, nullable=False),
        sa.Column("price_per_square_meter", MONEY, nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.CheckConstraint("thickness > 0", name="ck_glass_types_thickness_positive"),
    )

    op.create_table(
        "shataf_rates",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("shataf_type", sa.String(30), nullable=False),
        sa.Column("min_thickness", THICKNESS, nullable=False),
        sa.Column("max_thickness", THICKNESS, nullable=False),
        sa.Column("rate_per_meter", MONEY, nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.CheckConstraint("max_thickness > min_thickness", name="ck_shataf_rates_band"),
    )
    op.create_index(
        "ix_shataf_rates_active_style",
        "shataf_rates",
        ["shataf_type", "min_thickness"],
        postgresql_where=sa.text("active"),
    )

    op.create_table(
        "customers",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("customer_type", sa.String(20), nullable=False),
        sa.Column("balance", MONEY, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_customers_phone", "customers", ["phone"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("customer_id", sa.String(26), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("total_price", MONEY, nullable=False),
        sa.Column("amount_paid", MONEY, nullable=False, server_default="0"),
        sa.Column("remaining_balance", MONEY, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("issue_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("amount_paid <= total_price", name="ck_invoices_not_overpaid"),
    )
    op.create_index("ix_invoices_customer_id", "invoices", ["customer_id"])
    op.create_index("ix_invoices_issue_date", "invoices", ["issue_date"])

    op.create_table(
        "invoice_lines",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("invoice_id", sa.String(26), sa.ForeignKey("invoices.id"), nullable=False),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("glass_type_id", sa.String(26), sa.ForeignKey("glass_types.id"), nullable=False),
        sa.Column("width", sa.Numeric(12, 4), nullable=False),
        sa.Column("height", sa.Numeric(12, 4), nullable=False),
        sa.Column("unit", sa.String(2), nullable=False),
        sa.Column("shataf_type", sa.String(30), nullable=False),
        sa.Column("farma_type", sa.String(30), nullable=False),
        sa.Column("diameter", sa.Numeric(12, 4), nullable=True),
        sa.Column("manual_cutting_price", MONEY, nullable=True),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("area", sa.Numeric(12, 4), nullable=False),
        sa.Column("shataf_meters", sa.Numeric(12, 4), nullable=False),
        sa.Column("glass_price", MONEY, nullable=False),
        sa.Column("cutting_price", MONEY, nullable=False),
    )
    op.create_index("ix_invoice_lines_invoice_id", "invoice_lines", ["invoice_id", "position"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("customer_id", sa.String(26), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("invoice_id", sa.String(26), sa.ForeignKey("invoices.id"), nullable=True),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("method", sa.String(20), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )
    op.create_index("ix_payments_customer_id", "payments", ["customer_id"])
    op.create_index("ix_payments_invoice_id", "payments", ["invoice_id"])


def downgrade() -> None:
    op.drop_table("payments")
    op.drop_table("invoice_lines")
    op.drop_table("invoices")
    op.drop_table("customers")
    op.drop_table("shataf_rates")
    op.drop_table("glass_types")

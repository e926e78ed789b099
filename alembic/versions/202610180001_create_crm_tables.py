"""create crm tables

Revision ID: 202610180001
Revises:
Create Date: 2026-10-18 00:01:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "202610180001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(length=100), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_by", sa.String(length=100), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def upgrade() -> None:
    op.create_table(
        "crm_customer",
        *_audit_columns(),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=50), nullable=True),
        sa.Column("postal_code", sa.String(length=20), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("industry", sa.String(length=50), nullable=True),
        sa.Column("type", sa.String(length=32), nullable=False, server_default="Individual"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="Active"),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_crm_customer_email", "crm_customer", ["email"], unique=False)
    op.create_index("ix_crm_customer_company_name", "crm_customer", ["company_name"], unique=False)
    op.create_index("ix_crm_customer_status", "crm_customer", ["status"], unique=False)

    op.create_table(
        "crm_contact",
        *_audit_columns(),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("job_title", sa.String(length=100), nullable=True),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="General"),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(["customer_id"], ["crm_customer.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_crm_contact_customer_id", "crm_contact", ["customer_id"], unique=False)

    op.create_table(
        "crm_user",
        *_audit_columns(),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="User"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="Active"),
        sa.Column("last_login_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("job_title", sa.String(length=100), nullable=True),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("username"),
    )
    op.create_index("ix_crm_user_role", "crm_user", ["role"], unique=False)

    op.create_table(
        "crm_lead",
        *_audit_columns(),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("job_title", sa.String(length=100), nullable=True),
        sa.Column("industry", sa.String(length=100), nullable=True),
        sa.Column("source", sa.String(length=32), nullable=False, server_default="Website"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="New"),
        sa.Column("priority", sa.String(length=32), nullable=False, server_default="Medium"),
        sa.Column("estimated_value", sa.Numeric(precision=18, scale=2), nullable=False, server_default="0"),
        sa.Column("expected_close_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.Column("assigned_to_user_id", sa.Integer(), nullable=True),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["assigned_to_user_id"], ["crm_user.id"]),
        sa.ForeignKeyConstraint(["customer_id"], ["crm_customer.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_crm_lead_email", "crm_lead", ["email"], unique=False)
    op.create_index("ix_crm_lead_status", "crm_lead", ["status"], unique=False)
    op.create_index("ix_crm_lead_assigned_to_user_id", "crm_lead", ["assigned_to_user_id"], unique=False)

    op.create_table(
        "crm_opportunity",
        *_audit_columns(),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("stage", sa.String(length=32), nullable=False, server_default="Prospecting"),
        sa.Column("amount", sa.Numeric(precision=18, scale=2), nullable=False, server_default="0"),
        sa.Column("probability", sa.Numeric(precision=5, scale=2), nullable=False, server_default="0"),
        sa.Column("expected_close_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("actual_close_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="Open"),
        sa.Column("product", sa.String(length=100), nullable=True),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.Column("assigned_to_user_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["customer_id"], ["crm_customer.id"]),
        sa.ForeignKeyConstraint(["assigned_to_user_id"], ["crm_user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_crm_opportunity_customer_id", "crm_opportunity", ["customer_id"], unique=False)
    op.create_index("ix_crm_opportunity_stage", "crm_opportunity", ["stage"], unique=False)
    op.create_index("ix_crm_opportunity_status", "crm_opportunity", ["status"], unique=False)
    op.create_index(
        "ix_crm_opportunity_assigned_to_user_id",
        "crm_opportunity",
        ["assigned_to_user_id"],
        unique=False,
    )

    op.create_table(
        "crm_work_item",
        *_audit_columns(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("type", sa.String(length=32), nullable=False, server_default="General"),
        sa.Column("priority", sa.String(length=32), nullable=False, server_default="Medium"),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="Pending"),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assigned_to_user_id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        sa.Column("lead_id", sa.Integer(), nullable=True),
        sa.Column("opportunity_id", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.ForeignKeyConstraint(["assigned_to_user_id"], ["crm_user.id"]),
        sa.ForeignKeyConstraint(["customer_id"], ["crm_customer.id"]),
        sa.ForeignKeyConstraint(["lead_id"], ["crm_lead.id"]),
        sa.ForeignKeyConstraint(["opportunity_id"], ["crm_opportunity.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_crm_work_item_status", "crm_work_item", ["status"], unique=False)
    op.create_index("ix_crm_work_item_due_date", "crm_work_item", ["due_date"], unique=False)
    op.create_index("ix_crm_work_item_assigned_to_user_id", "crm_work_item", ["assigned_to_user_id"], unique=False)

    op.create_table(
        "crm_product",
        *_audit_columns(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("sku", sa.String(length=50), nullable=True),
        sa.Column("price", sa.Numeric(precision=18, scale=2), nullable=False, server_default="0"),
        sa.Column("cost", sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_crm_product_sku", "crm_product", ["sku"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_crm_product_sku", table_name="crm_product")
    op.drop_table("crm_product")

    op.drop_index("ix_crm_work_item_assigned_to_user_id", table_name="crm_work_item")
    op.drop_index("ix_crm_work_item_due_date", table_name="crm_work_item")
    op.drop_index("ix_crm_work_item_status", table_name="crm_work_item")
    op.drop_table("crm_work_item")

    op.drop_index("ix_crm_opportunity_assigned_to_user_id", table_name="crm_opportunity")
    op.drop_index("ix_crm_opportunity_status", table_name="crm_opportunity")
    op.drop_index("ix_crm_opportunity_stage", table_name="crm_opportunity")
    op.drop_index("ix_crm_opportunity_customer_id", table_name="crm_opportunity")
    op.drop_table("crm_opportunity")

    op.drop_index("ix_crm_lead_assigned_to_user_id", table_name="crm_lead")
    op.drop_index("ix_crm_lead_status", table_name="crm_lead")
    op.drop_index("ix_crm_lead_email", table_name="crm_lead")
    op.drop_table("crm_lead")

    op.drop_index("ix_crm_user_role", table_name="crm_user")
    op.drop_table("crm_user")

    op.drop_index("ix_crm_contact_customer_id", table_name="crm_contact")
    op.drop_table("crm_contact")

    op.drop_index("ix_crm_customer_status", table_name="crm_customer")
    op.drop_index("ix_crm_customer_company_name", table_name="crm_customer")
    op.drop_index("ix_crm_customer_email", table_name="crm_customer")
    op.drop_table("crm_customer")

"""initial rental schema: landlords, properties, leases, invoices, tickets

Revision ID: 3f1a9c2d7e10
Revises: 
Create Date: 2026-10-19 09:12:44.118203

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e10'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

plan = sa.Enum("FREE", "BASIC", "PRO", name="plan")
landlord_role = sa.Enum("OWNER", "ADMIN", "MANAGER", "ACCOUNTANT", "STAFF", name="landlordrole")
org_role = sa.Enum("OWNER", "ADMIN", "MEMBER", name="orgrole")
invoice_status = sa.Enum("PENDING", "PAID", "OVERDUE", name="invoicestatus")
ticket_status = sa.Enum("OPEN", "IN_PROGRESS", "CLOSED", name="ticketstatus")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "landlords",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("org_name", sa.String(255), nullable=True),
        sa.Column("plan", plan, nullable=False),
    )
    op.create_index("ix_landlords_user_id", "landlords", ["user_id"], unique=True)

    op.create_table(
        "landlord_members",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("landlord_id", sa.Uuid(), sa.ForeignKey("landlords.id"), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("role", landlord_role, nullable=False),
        sa.UniqueConstraint("landlord_id", "user_id", name="uq_landlord_members_landlord_user"),
    )
    op.create_index("ix_landlord_members_landlord_id", "landlord_members", ["landlord_id"])
    op.create_index("ix_landlord_members_user_id", "landlord_members", ["user_id"])

    op.create_table(
        "organizations",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_by_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
    )
    op.create_index("ix_organizations_created_by_id", "organizations", ["created_by_id"])

    op.create_table(
        "memberships",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("organization_id", sa.Uuid(), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("role", org_role, nullable=False),
        sa.UniqueConstraint("user_id", "organization_id", name="uq_memberships_user_org"),
    )
    op.create_index("ix_memberships_user_id", "memberships", ["user_id"])
    op.create_index("ix_memberships_organization_id", "memberships", ["organization_id"])

    op.create_table(
        "properties",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("landlord_id", sa.Uuid(), sa.ForeignKey("landlords.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("intake_token", sa.String(64), nullable=False),
    )
    op.create_index("ix_properties_landlord_id", "properties", ["landlord_id"])
    op.create_index("ix_properties_intake_token", "properties", ["intake_token"], unique=True)

    op.create_table(
        "units",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("property_id", sa.Uuid(), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("label", sa.String(100), nullable=False),
        sa.UniqueConstraint("property_id", "label", name="uq_units_property_label"),
    )
    op.create_index("ix_units_property_id", "units", ["property_id"])

    op.create_table(
        "tenants",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("landlord_id", sa.Uuid(), sa.ForeignKey("landlords.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
    )
    op.create_index("ix_tenants_landlord_id", "tenants", ["landlord_id"])

    op.create_table(
        "leases",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("landlord_id", sa.Uuid(), sa.ForeignKey("landlords.id"), nullable=False),
        sa.Column("unit_id", sa.Uuid(), sa.ForeignKey("units.id"), nullable=False),
        sa.Column("tenant_id", sa.Uuid(), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("rent_amount", sa.Integer(), nullable=False),
        sa.Column("due_day", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
    )
    for column in ("landlord_id", "unit_id", "tenant_id"):
        op.create_index(f"ix_leases_{column}", "leases", [column])

    op.create_table(
        "rent_invoices",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("landlord_id", sa.Uuid(), sa.ForeignKey("landlords.id"), nullable=False),
        sa.Column("lease_id", sa.Uuid(), sa.ForeignKey("leases.id"), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("status", invoice_status, nullable=False),
        sa.Column("period_year", sa.Integer(), nullable=False),
        sa.Column("period_month", sa.Integer(), nullable=False),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint(
            "lease_id", "period_year", "period_month", name="uq_rent_invoices_lease_period"
        ),
    )
    for column in ("landlord_id", "lease_id", "due_date", "status"):
        op.create_index(f"ix_rent_invoices_{column}", "rent_invoices", [column])

    op.create_table(
        "payments",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("rent_invoice_id", sa.Uuid(), sa.ForeignKey("rent_invoices.id"), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("paid_date", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_payments_rent_invoice_id", "payments", ["rent_invoice_id"])

    op.create_table(
        "tickets",
        *_timestamps(),
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("landlord_id", sa.Uuid(), sa.ForeignKey("landlords.id"), nullable=False),
        sa.Column("property_id", sa.Uuid(), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("unit_id", sa.Uuid(), sa.ForeignKey("units.id"), nullable=True),
        sa.Column("tenant_id", sa.Uuid(), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("status", ticket_status, nullable=False),
        sa.Column("closed_at", sa.DateTime(), nullable=True),
    )
    for column in ("landlord_id", "property_id", "status"):
        op.create_index(f"ix_tickets_{column}", "tickets", [column])


def downgrade() -> None:
    for table in (
        "tickets",
        "payments",
        "rent_invoices",
        "leases",
        "tenants",
        "units",
        "properties",
        "memberships",
        "organizations",
        "landlord_members",
        "landlords",
        "users",
    ):
        op.drop_table(table)
    for enum in (ticket_status, invoice_status, org_role, landlord_role, plan):
        enum.drop(op.get_bind(), checkfirst=True)

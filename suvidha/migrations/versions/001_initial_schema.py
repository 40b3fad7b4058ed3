"""Initial schema: users, connections, readings, bills, payments, grievances, audit log.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

SERVICE_TYPES = ("ELECTRICITY", "GAS", "WATER", "MUNICIPAL")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    ]


def upgrade() -> None:
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False, comment="Login phone number"),
        sa.Column("name", sa.String(length=255), nullable=False, comment="Full name"),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column(
            "role",
            sa.Enum("CITIZEN", "ADMIN", "STAFF", native_enum=False),
            nullable=False,
            server_default="CITIZEN",
        ),
        sa.Column("language", sa.String(length=5), nullable=False, server_default="en"),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("phone"),
        sa.Index("ix_users_role", "role"),
        sa.Index("ix_users_created_at", "created_at"),
        sa.Index("idx_user_role_created", "role", "created_at"),
    )

    # Create service_connections table
    op.create_table(
        "service_connections",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="Owning citizen"),
        sa.Column("service_type", sa.Enum(*SERVICE_TYPES, native_enum=False), nullable=False),
        sa.Column("connection_no", sa.String(length=50), nullable=False),
        sa.Column("meter_no", sa.String(length=50), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "ACTIVE", "SUSPENDED", "DISCONNECTED", native_enum=False),
            nullable=False,
            server_default="PENDING",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("connection_no"),
        sa.Index("ix_service_connections_user_id", "user_id"),
        sa.Index("ix_service_connections_service_type", "service_type"),
        sa.Index("ix_service_connections_status", "status"),
        sa.Index("ix_service_connections_created_at", "created_at"),
        sa.Index("idx_connection_user_service", "user_id", "service_type"),
    )

    # Create meter_readings table
    op.create_table(
        "meter_readings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("connection_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False, comment="Submitter"),
        sa.Column("service_type", sa.Enum(*SERVICE_TYPES, native_enum=False), nullable=False),
        sa.Column("reading", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("previous_reading", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("consumption", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            "submitted_by",
            sa.Enum("CITIZEN", "STAFF", native_enum=False),
            nullable=False,
            server_default="CITIZEN",
        ),
        sa.Column("photo_url", sa.String(length=1000), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PENDING", "VERIFIED", "REJECTED", native_enum=False),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("verified_by", sa.Integer(), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("reading_date", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["connection_id"], ["service_connections.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["verified_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_meter_readings_connection_id", "connection_id"),
        sa.Index("ix_meter_readings_user_id", "user_id"),
        sa.Index("ix_meter_readings_service_type", "service_type"),
        sa.Index("ix_meter_readings_status", "status"),
        sa.Index("ix_meter_readings_reading_date", "reading_date"),
        sa.Index("ix_meter_readings_created_at", "created_at"),
        sa.Index(
            "idx_reading_connection_status_date", "connection_id", "status", "reading_date"
        ),
        sa.Index("idx_reading_service_created", "service_type", "created_at"),
    )

    # Create bills table
    op.create_table(
        "bills",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("connection_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("bill_no", sa.String(length=50), nullable=False),
        sa.Column("bill_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("period_from", sa.Date(), nullable=False),
        sa.Column("period_to", sa.Date(), nullable=False),
        sa.Column("units_consumed", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("total_amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column(
            "amount_paid", sa.Numeric(precision=10, scale=2), nullable=False, server_default="0"
        ),
        sa.Column(
            "status",
            sa.Enum("UNPAID", "PAID", "OVERDUE", "PARTIAL", native_enum=False),
            nullable=False,
            server_default="UNPAID",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["connection_id"], ["service_connections.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("bill_no"),
        sa.Index("ix_bills_connection_id", "connection_id"),
        sa.Index("ix_bills_user_id", "user_id"),
        sa.Index("ix_bills_status", "status"),
        sa.Index("ix_bills_created_at", "created_at"),
        sa.Index("idx_bill_connection_date", "connection_id", "bill_date"),
    )

    # Create payments table
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("bill_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "amount",
            sa.Numeric(precision=10, scale=2),
            nullable=False,
            comment="Payment amount in rupees",
        ),
        sa.Column(
            "method",
            sa.Enum("UPI", "CARD", "NET_BANKING", "WALLET", "CASH", native_enum=False),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("PENDING", "SUCCESS", "FAILED", native_enum=False),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("transaction_id", sa.String(length=100), nullable=True),
        sa.Column("receipt_no", sa.String(length=100), nullable=True),
        sa.Column("kiosk_id", sa.String(length=50), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_payments_bill_id", "bill_id"),
        sa.Index("ix_payments_user_id", "user_id"),
        sa.Index("ix_payments_status", "status"),
        sa.Index("ix_payments_created_at", "created_at"),
        sa.Index("idx_payment_status_created", "status", "created_at"),
    )

    # Create grievances table
    op.create_table(
        "grievances",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("connection_id", sa.Integer(), nullable=True),
        sa.Column("ticket_no", sa.String(length=50), nullable=False),
        sa.Column("service_type", sa.Enum(*SERVICE_TYPES, native_enum=False), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "priority",
            sa.Enum("LOW", "MEDIUM", "HIGH", "URGENT", native_enum=False),
            nullable=False,
            server_default="MEDIUM",
        ),
        sa.Column(
            "status",
            sa.Enum(
                "SUBMITTED", "IN_PROGRESS", "RESOLVED", "CLOSED", "REJECTED", native_enum=False
            ),
            nullable=False,
            server_default="SUBMITTED",
        ),
        sa.Column("kiosk_id", sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["connection_id"], ["service_connections.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("ticket_no"),
        sa.Index("ix_grievances_user_id", "user_id"),
        sa.Index("ix_grievances_service_type", "service_type"),
        sa.Index("ix_grievances_status", "status"),
        sa.Index("ix_grievances_created_at", "created_at"),
        sa.Index("idx_grievance_service_created", "service_type", "created_at"),
    )

    # Create audit_logs table
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("actor_id", sa.Integer(), nullable=True),
        sa.Column("changes", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["actor_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_audit_logs_created_at", "created_at"),
    )


def downgrade() -> None:
    for table in (
        "audit_logs",
        "grievances",
        "payments",
        "bills",
        "meter_readings",
        "service_connections",
        "users",
    ):
        op.drop_table(table)

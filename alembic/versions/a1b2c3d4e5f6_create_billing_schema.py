"""Create schools, billing_info, payment_logs and action_logs

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19

action_logs.school_id is SET NULL on delete so deletion entries survive;
billing_info and payment_logs cascade with their school.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "a1b2c3d4e5f6"
down_revision = None
branch_labels = None
depends_on = None

action_type = postgresql.ENUM(
    "school_added", "school_updated", "school_deleted", "payment_added",
    name="action_type",
    create_type=False,
)


def upgrade() -> None:
    action_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "schools",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("contact_person", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("student_count", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("student_count IS NULL OR student_count >= 0", name="ck_schools_student_count"),
    )
    op.create_index("ix_schools_id", "schools", ["id"])
    op.create_index("ix_schools_name", "schools", ["name"])

    op.create_table(
        "billing_info",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "school_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("schools.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("quoted_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("advance_paid", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("advance_paid_date", sa.Date(), nullable=True),
        sa.Column("total_installments", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("quoted_price >= 0", name="ck_billing_info_quoted_price"),
        sa.CheckConstraint("advance_paid >= 0", name="ck_billing_info_advance_paid"),
    )
    op.create_index("ix_billing_info_id", "billing_info", ["id"])
    # One billing record per school
    op.create_index("ix_billing_info_school_id", "billing_info", ["school_id"], unique=True)

    op.create_table(
        "payment_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "school_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("schools.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "billing_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("billing_info.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("credited_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("payment_mode", sa.String(length=50), nullable=True),
        sa.Column("receipt_url", sa.Text(), nullable=True),
        sa.Column("student_count", sa.Integer(), nullable=True),
        sa.Column("price_per_student", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_special_case", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("excess_student_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("excess_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_payment_logs_id", "payment_logs", ["id"])
    op.create_index("ix_payment_logs_school_id", "payment_logs", ["school_id"])
    op.create_index("ix_payment_logs_payment_date", "payment_logs", ["payment_date"])
    op.create_index("ix_payment_logs_created_at", "payment_logs", ["created_at"])

    op.create_table(
        "action_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("action_type", action_type, nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("performed_by", sa.String(length=255), nullable=False),
        sa.Column(
            "school_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("schools.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("related_record_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_action_logs_id", "action_logs", ["id"])
    op.create_index("ix_action_logs_action_type", "action_logs", ["action_type"])
    op.create_index("ix_action_logs_school_id", "action_logs", ["school_id"])
    op.create_index("ix_action_logs_created_at", "action_logs", ["created_at"])


def downgrade() -> None:
    op.drop_table("action_logs")
    op.drop_table("payment_logs")
    op.drop_table("billing_info")
    op.drop_table("schools")
    action_type.drop(op.get_bind(), checkfirst=True)

"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("role", sa.Enum("user", "admin", name="userrole"), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role_active", "users", ["role", "is_active"], unique=False)

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("price", sa.Integer, nullable=False),
        sa.Column("image", sa.String(512), nullable=False),
        sa.Column("instructor", sa.String(255), nullable=False),
        sa.Column("duration", sa.String(64), nullable=False),
        sa.Column("level", sa.Enum("Beginner", "Intermediate", "Advanced", name="courselevel"), nullable=False),
        sa.Column("topics", sa.JSON, nullable=True),
        sa.Column("rating", sa.Numeric(2, 1), nullable=False, server_default="0"),
        sa.Column("featured", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_courses_featured", "courses", ["featured"], unique=False)

    op.create_table(
        "course_inquiries",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("course_id", sa.Integer, sa.ForeignKey("courses.id"), nullable=False),
        sa.Column("course_name", sa.String(255), nullable=False),
        sa.Column("organization", sa.String(255), nullable=False),
        sa.Column("degree", sa.String(128), nullable=True),
        sa.Column("department", sa.String(128), nullable=True),
        sa.Column("year", sa.String(32), nullable=True),
        sa.Column(
            "status",
            sa.Enum("pending", "contacted", "enrolled", "canceled", name="inquirystatus"),
            nullable=False,
        ),
        sa.Column(
            "payment_status",
            sa.Enum("pending", "completed", "failed", name="inquirypaymentstatus"),
            nullable=False,
        ),
        sa.Column("gateway_order_id", sa.String(64), nullable=True),
        sa.Column("gateway_payment_id", sa.String(64), nullable=True),
        sa.Column("gateway_signature", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_course_inquiries_email", "course_inquiries", ["email"], unique=False)
    op.create_index(
        "ix_course_inquiries_status_created", "course_inquiries", ["status", "created_at"], unique=False
    )

    op.create_table(
        "payment_transactions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("flow", sa.Enum("course", "inquiry", name="transactionflow"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("inquiry_id", sa.Integer, sa.ForeignKey("course_inquiries.id"), nullable=True),
        sa.Column("course_id", sa.Integer, sa.ForeignKey("courses.id"), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="INR"),
        sa.Column("receipt", sa.String(64), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "completed", "failed", name="transactionstatus"),
            nullable=False,
        ),
        sa.Column("gateway_order_id", sa.String(64), nullable=False),
        sa.Column("gateway_payment_id", sa.String(64), nullable=True),
        sa.Column("gateway_signature", sa.String(128), nullable=True),
        sa.Column("failure_reason", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_payment_transactions_amount_positive"),
        sa.CheckConstraint(
            "(user_id IS NOT NULL) OR (inquiry_id IS NOT NULL)",
            name="ck_payment_transactions_subject",
        ),
    )
    op.create_index(
        "ix_payment_transactions_gateway_order_id", "payment_transactions", ["gateway_order_id"], unique=True
    )
    op.create_index("ix_payment_transactions_user_id", "payment_transactions", ["user_id"], unique=False)
    op.create_index("ix_payment_transactions_inquiry_id", "payment_transactions", ["inquiry_id"], unique=False)
    op.create_index(
        "ix_payment_transactions_user_created", "payment_transactions", ["user_id", "created_at"], unique=False
    )
    op.create_index(
        "ix_payment_transactions_flow_status", "payment_transactions", ["flow", "status"], unique=False
    )

    op.create_table(
        "enrollments",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("course_id", sa.Integer, sa.ForeignKey("courses.id"), nullable=False),
        sa.Column("transaction_id", sa.Integer, sa.ForeignKey("payment_transactions.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),
    )
    op.create_index("ix_enrollments_user_id", "enrollments", ["user_id"], unique=False)


def downgrade():
    op.drop_table("enrollments")
    op.drop_table("payment_transactions")
    op.drop_table("course_inquiries")
    op.drop_table("courses")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS transactionstatus")
    op.execute("DROP TYPE IF EXISTS transactionflow")
    op.execute("DROP TYPE IF EXISTS inquirypaymentstatus")
    op.execute("DROP TYPE IF EXISTS inquirystatus")
    op.execute("DROP TYPE IF EXISTS courselevel")
    op.execute("DROP TYPE IF EXISTS userrole")

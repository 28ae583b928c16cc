"""Initial schema - profiles + content_items.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLES = ["profiles", "content_items"]


def upgrade() -> None:
    # --- ENUM types (display values are stored) ---
    content_type = sa.Enum("Post", "Story", "Reel", "TikTok", name="content_type")
    content_status = sa.Enum("Pending", "Approved", "Rejected", name="content_status")

    # --- 1. profiles ---
    op.create_table(
        "profiles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=True),
        sa.Column("is_admin", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("company_logo", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean, server_default=sa.text("true")),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- 2. content_items ---
    op.create_table(
        "content_items",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("caption", sa.Text, nullable=False, server_default=""),
        sa.Column("content_type", content_type, nullable=False),
        sa.Column("media_url", sa.String(1500), nullable=False, server_default=""),
        sa.Column("status", content_status, nullable=False, server_default="Pending"),
        sa.Column("schedule_date", sa.Date, nullable=False),
        sa.Column("rejection_notes", sa.Text, nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assigned_to", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("created_by", UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "status <> 'Rejected' OR length(trim(coalesce(rejection_notes, ''))) > 0",
            name="ck_content_items_rejection_notes",
        ),
    )

    # --- Indexes ---
    op.create_index("uq_profiles_email_lower", "profiles", [sa.text("lower(email)")], unique=True)
    op.create_index("ix_content_items_schedule_date", "content_items", ["schedule_date"])
    op.create_index("ix_content_items_assigned_to", "content_items", ["assigned_to"])
    op.create_index(
        "idx_content_items_pending", "content_items", ["assigned_to", "schedule_date"],
        postgresql_where=sa.text("status = 'Pending'"),
    )

    # updated_at auto-update trigger
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    for table in TABLES:
        op.execute(f"""
            CREATE TRIGGER trigger_update_{table}_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
        """)


def downgrade() -> None:
    for table in TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS trigger_update_{table}_updated_at ON {table}")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    for table in reversed(TABLES):
        op.drop_table(table)

    for enum in ["content_type", "content_status"]:
        op.execute(f"DROP TYPE IF EXISTS {enum}")

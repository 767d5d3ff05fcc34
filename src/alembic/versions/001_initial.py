"""Tenant project registry and audit log

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "tenant_projects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=56), nullable=False),
        sa.Column("rest_url", sa.String(length=255), nullable=False),
        sa.Column("anon_key", sa.String(length=2048), nullable=False),
        sa.Column(
            "analytics_flavor",
            sa.String(length=30),
            nullable=False,
            server_default="session_tables",
        ),
        sa.Column("schema_overrides", JSONB(), nullable=True),
        sa.Column("color", sa.String(length=20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "length(slug) BETWEEN 3 AND 56", name="ck_tenant_projects_slug_length"
        ),
        schema="public",
    )
    op.create_index(
        "ix_public_tenant_projects_slug", "tenant_projects", ["slug"], unique=True, schema="public"
    )
    op.create_index(
        "ix_public_tenant_projects_name", "tenant_projects", ["name"], schema="public"
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tenant_project_id", sa.Uuid(), nullable=True),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.String(length=100), nullable=True),
        sa.Column("changes", JSONB(), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.String(length=500), nullable=True),
        sa.Column("request_id", sa.String(length=36), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="success"),
        sa.Column("error_message", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["tenant_project_id"],
            ["public.tenant_projects.id"],
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id"),
        schema="public",
    )
    op.create_index(
        "ix_audit_logs_tenant_created",
        "audit_logs",
        ["tenant_project_id", "created_at"],
        schema="public",
    )
    op.create_index(
        "ix_audit_logs_action_created",
        "audit_logs",
        ["action", "created_at"],
        schema="public",
    )
    op.create_index(
        "ix_audit_logs_entity",
        "audit_logs",
        ["entity_type", "entity_id"],
        schema="public",
    )


def downgrade() -> None:
    op.drop_index("ix_audit_logs_entity", table_name="audit_logs", schema="public")
    op.drop_index("ix_audit_logs_action_created", table_name="audit_logs", schema="public")
    op.drop_index("ix_audit_logs_tenant_created", table_name="audit_logs", schema="public")
    op.drop_table("audit_logs", schema="public")
    op.drop_index("ix_public_tenant_projects_name", table_name="tenant_projects", schema="public")
    op.drop_index("ix_public_tenant_projects_slug", table_name="tenant_projects", schema="public")
    op.drop_table("tenant_projects", schema="public")

"""create run history tables

Revision ID: 0001_create_run_history
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_create_run_history"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "sync_runs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("mode", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=64), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("registry_aeds", sa.Integer(), nullable=False),
        sa.Column("osm_aeds", sa.Integer(), nullable=False),
        sa.Column("linked_aeds", sa.Integer(), nullable=False),
        sa.Column("created", sa.Integer(), nullable=False),
        sa.Column("updated", sa.Integer(), nullable=False),
        sa.Column("deleted", sa.Integer(), nullable=False),
        sa.Column("unchanged", sa.Integer(), nullable=False),
        sa.Column("skipped_create_nearby", sa.Integer(), nullable=False),
        sa.Column("skipped_delete_not_aed_only", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_sync_runs")),
    )
    op.create_index(
        "ix_sync_runs_status_started_at", "sync_runs", ["status", "started_at"], unique=False
    )

    op.create_table(
        "sync_run_issues",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("run_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=64), nullable=False),
        sa.Column("severity", sa.String(length=64), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("register_ref", sa.String(length=64), nullable=True),
        sa.Column("osm_node_id", sa.BigInteger(), nullable=True),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["run_id"],
            ["sync_runs.id"],
            name=op.f("fk_sync_run_issues_run_id_sync_runs"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_sync_run_issues")),
    )
    op.create_index("ix_sync_run_issues_run_id", "sync_run_issues", ["run_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_sync_run_issues_run_id", table_name="sync_run_issues")
    op.drop_table("sync_run_issues")
    op.drop_index("ix_sync_runs_status_started_at", table_name="sync_runs")
    op.drop_table("sync_runs")

"""ledger core: participants, drugs, provenance, quality checks, events

Revision ID: 0001_ledger_core
Revises:
Create Date: 2026-10-18
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_ledger_core"
down_revision = None
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade():
    op.create_table(
        "participants",
        sa.Column("address", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("location", sa.String(length=256), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_participants_role_active", "participants", ["role", "is_active"])

    op.create_table(
        "participant_credentials",
        sa.Column("address", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.ForeignKeyConstraint(["address"], ["participants.address"], ondelete="CASCADE"),
    )

    op.create_table(
        "drugs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False, nullable=False),
        sa.Column("batch_number", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("evidence_hash", sa.String(length=256), nullable=True),
        sa.Column("manufacturer", sa.String(length=128), nullable=False),
        sa.Column("manufactured_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("state", sa.String(length=32), nullable=False),
        sa.Column("current_owner", sa.String(length=128), nullable=False),
        sa.Column("ownership_count", sa.Integer(), nullable=False),
        sa.Column("transfer_count", sa.Integer(), nullable=False),
        sa.Column("quality_check_count", sa.Integer(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.UniqueConstraint("batch_number", name="uq_drugs_batch_number"),
    )
    op.create_index("ix_drugs_current_owner", "drugs", ["current_owner"])

    op.create_table(
        "ownership_entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("drug_id", sa.Integer(), nullable=False),
        sa.Column("idx", sa.Integer(), nullable=False),
        sa.Column("owner", sa.String(length=128), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["drug_id"], ["drugs.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("drug_id", "idx", name="uq_ownership_entries_drug_idx"),
    )

    op.create_table(
        "transfer_records",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("drug_id", sa.Integer(), nullable=False),
        sa.Column("idx", sa.Integer(), nullable=False),
        sa.Column("kind", sa.String(length=16), nullable=False),
        sa.Column("from_address", sa.String(length=128), nullable=False),
        sa.Column("to_address", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("note", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["drug_id"], ["drugs.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("drug_id", "idx", name="uq_transfer_records_drug_idx"),
    )

    op.create_table(
        "quality_checks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("drug_id", sa.Integer(), nullable=False),
        sa.Column("idx", sa.Integer(), nullable=False),
        sa.Column("inspector", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(length=256), nullable=False),
        sa.Column("temperature", sa.Integer(), nullable=False),
        sa.Column("humidity", sa.Integer(), nullable=False),
        sa.Column("passed", sa.Boolean(), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=False),
        sa.Column("evidence_hash", sa.String(length=256), nullable=False),
        sa.Column("gateway_url", sa.String(length=1024), nullable=True),
        sa.ForeignKeyConstraint(["drug_id"], ["drugs.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("drug_id", "idx", name="uq_quality_checks_drug_idx"),
    )

    op.create_table(
        "ledger_sequencer",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False, nullable=False),
        sa.Column("drug_count", sa.Integer(), nullable=False),
        sa.Column("event_seq", sa.Integer(), nullable=False),
        sa.Column("last_event_hash", sa.String(length=128), nullable=False),
    )

    op.create_table(
        "ledger_events",
        sa.Column("seq", sa.Integer(), primary_key=True, autoincrement=False, nullable=False),
        sa.Column("event_type", sa.String(length=64), nullable=False),
        sa.Column("actor", sa.String(length=128), nullable=False),
        sa.Column("drug_id", sa.Integer(), nullable=True),
        sa.Column("subject", sa.String(length=128), nullable=True),
        sa.Column("prev_hash", sa.String(length=128), nullable=False),
        sa.Column("entry_hash", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payload_json", JSON_TYPE, nullable=False),
    )
    op.create_index("ix_ledger_events_drug", "ledger_events", ["drug_id"])
    op.create_index("ix_ledger_events_type", "ledger_events", ["event_type"])


def downgrade():
    op.drop_index("ix_ledger_events_type", table_name="ledger_events")
    op.drop_index("ix_ledger_events_drug", table_name="ledger_events")
    op.drop_table("ledger_events")
    op.drop_table("ledger_sequencer")
    op.drop_table("quality_checks")
    op.drop_table("transfer_records")
    op.drop_table("ownership_entries")
    op.drop_index("ix_drugs_current_owner", table_name="drugs")
    op.drop_table("drugs")
    op.drop_table("participant_credentials")
    op.drop_index("ix_participants_role_active", table_name="participants")
    op.drop_table("participants")

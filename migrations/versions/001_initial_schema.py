"""Initial schema: subject risk states and risk history

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "subject_risk_states",
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subject_type", sa.String(20), nullable=False, server_default="student"),
        sa.Column("risk_level", sa.String(20), nullable=False, server_default="normal"),
        sa.Column("risk_reason", sa.Text, nullable=True),
        sa.Column("streak_area", sa.String(20), nullable=True),
        sa.Column("streak_length", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_checked_date", sa.Date, nullable=True),
        sa.Column("target_entry_date", sa.Date, nullable=True),
        sa.Column("target_entry_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("risk_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("danger_resolved_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("danger_resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("danger_resolve_memo", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("subject_id", name="pk_subject_risk_states"),
    )
    op.create_index("idx_risk_state_level", "subject_risk_states", ["risk_level"])

    op.create_table(
        "risk_history",
        sa.Column("history_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("previous_level", sa.String(20), nullable=True),
        sa.Column("new_level", sa.String(20), nullable=False),
        sa.Column("cause", sa.String(50), nullable=False),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("streak_area", sa.String(20), nullable=True),
        sa.Column("streak_length", sa.Integer, nullable=False, server_default="0"),
        sa.Column("keyword_evidence", postgresql.JSONB, nullable=False),
        sa.Column("target_entry_date", sa.Date, nullable=True),
        sa.Column("target_entry_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("confirmed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("confirmed_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("supervisor_memo", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("history_id", name="pk_risk_history"),
    )
    op.create_index("idx_risk_history_subject", "risk_history", ["subject_id", "created_at"])
    op.create_index("idx_risk_history_confirmed", "risk_history", ["confirmed"])
    op.create_index("idx_risk_history_created", "risk_history", ["created_at"])
    op.create_index("idx_risk_history_new_level", "risk_history", ["new_level"])


def downgrade() -> None:
    op.drop_table("risk_history")
    op.drop_table("subject_risk_states")

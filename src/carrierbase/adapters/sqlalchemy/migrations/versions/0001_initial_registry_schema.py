"""Initial registry schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _utc() -> sa.DateTime:
    return sa.DateTime(timezone=True)


def upgrade() -> None:
    op.create_table(
        "carrier",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("organization_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("mc_number", sa.String(length=16), nullable=True),
        sa.Column("dot_number", sa.String(length=16), nullable=True),
        sa.Column("primary_contact", sa.String(), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("alt_phone", sa.String(length=32), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("driver_name", sa.String(), nullable=True),
        sa.Column("driver_phone", sa.String(length=32), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(length=2), nullable=True),
        sa.Column("zip_code", sa.String(length=16), nullable=True),
        sa.Column("equipment_types", sa.String(), nullable=False),
        sa.Column("preferred_lanes", sa.String(), nullable=False),
        sa.Column("total_loads", sa.Integer(), nullable=False),
        sa.Column("completed_loads", sa.Integer(), nullable=False),
        sa.Column("cancelled_loads", sa.Integer(), nullable=False),
        sa.Column("on_time_percentage", sa.Integer(), nullable=False),
        sa.Column("average_rate", sa.Float(), nullable=True),
        sa.Column("average_margin", sa.Float(), nullable=True),
        sa.Column("lifetime_revenue", sa.Float(), nullable=False),
        sa.Column("performance_score", sa.Integer(), nullable=True),
        sa.Column("last_load_date", _utc(), nullable=True),
        sa.Column("statistics_updated_at", _utc(), nullable=True),
        sa.Column("first_contact_date", _utc(), nullable=True),
        sa.Column("last_contact_date", _utc(), nullable=True),
        sa.Column("last_used_date", _utc(), nullable=True),
        sa.Column("created_at", _utc(), nullable=False),
        sa.Column("updated_at", _utc(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("auto_created", sa.Boolean(), nullable=False),
        sa.Column("source", sa.String(), nullable=True),
        sa.Column("created_from_call_id", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_carrier"),
        sa.UniqueConstraint(
            "organization_id", "mc_number", name="uq_carrier_organization_id_mc_number"
        ),
    )
    op.create_index(
        "ix_carrier_organization_phone", "carrier", ["organization_id", "phone"]
    )
    op.create_index(
        "ix_carrier_organization_dot_number", "carrier", ["organization_id", "dot_number"]
    )

    op.create_table(
        "load",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("organization_id", sa.String(), nullable=False),
        sa.Column("load_number", sa.String(), nullable=True),
        sa.Column("reference_number", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("carrier_id", sa.Uuid(), nullable=True),
        sa.Column("rate_to_carrier", sa.Float(), nullable=True),
        sa.Column("margin", sa.Float(), nullable=True),
        sa.Column("equipment_type", sa.String(), nullable=True),
        sa.Column("origin_state", sa.String(length=2), nullable=True),
        sa.Column("destination_state", sa.String(length=2), nullable=True),
        sa.Column("delivery_date", sa.Date(), nullable=True),
        sa.Column("actual_delivery_date", sa.Date(), nullable=True),
        sa.Column("driver_name", sa.String(), nullable=True),
        sa.Column("driver_phone", sa.String(length=32), nullable=True),
        sa.Column("carrier_assigned_at", _utc(), nullable=True),
        sa.Column("created_at", _utc(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_load"),
        sa.ForeignKeyConstraint(
            ["carrier_id"],
            ["carrier.id"],
            name="fk_load_carrier_id_carrier",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_load_carrier_id", "load", ["carrier_id"])
    op.create_index(
        "ix_load_organization_reference", "load", ["organization_id", "reference_number"]
    )

    op.create_table(
        "carrier_call_interaction",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("carrier_id", sa.Uuid(), nullable=False),
        sa.Column("call_id", sa.String(), nullable=False),
        sa.Column("call_date", _utc(), nullable=False),
        sa.Column("load_id", sa.Uuid(), nullable=True),
        sa.Column("quoted_rate", sa.Float(), nullable=True),
        sa.Column("available_date", sa.Date(), nullable=True),
        sa.Column("equipment_mentioned", sa.String(), nullable=False),
        sa.Column("lanes_mentioned", sa.String(), nullable=False),
        sa.Column("contact_name", sa.String(), nullable=True),
        sa.Column("contact_phone", sa.String(length=32), nullable=True),
        sa.Column("confidence", sa.Integer(), nullable=False),
        sa.Column("created_at", _utc(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_carrier_call_interaction"),
        sa.ForeignKeyConstraint(
            ["carrier_id"],
            ["carrier.id"],
            name="fk_carrier_call_interaction_carrier_id_carrier",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "carrier_id", "call_id", name="uq_carrier_call_interaction_carrier_id_call_id"
        ),
    )

    op.create_table(
        "carrier_conflict",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("organization_id", sa.String(), nullable=False),
        sa.Column("call_id", sa.String(), nullable=False),
        sa.Column("kind", sa.String(length=32), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("candidate_mc_number", sa.String(length=16), nullable=True),
        sa.Column("candidate_phone", sa.String(length=32), nullable=True),
        sa.Column("mc_match_id", sa.Uuid(), nullable=True),
        sa.Column("phone_match_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", _utc(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_carrier_conflict"),
    )
    op.create_index(
        "ix_carrier_conflict_organization_id", "carrier_conflict", ["organization_id"]
    )

    op.create_table(
        "carrier_verification",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("mc_number", sa.String(length=16), nullable=True),
        sa.Column("dot_number", sa.String(length=16), nullable=True),
        sa.Column("carrier_id", sa.Uuid(), nullable=True),
        sa.Column("snapshot", sa.JSON(), nullable=False),
        sa.Column("risk_level", sa.String(length=16), nullable=False),
        sa.Column("risk_score", sa.Integer(), nullable=False),
        sa.Column("warnings", sa.JSON(), nullable=False),
        sa.Column("verified_at", _utc(), nullable=False),
        sa.Column("expires_at", _utc(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_carrier_verification"),
    )
    op.create_index(
        "ix_carrier_verification_mc_number", "carrier_verification", ["mc_number"]
    )
    op.create_index(
        "ix_carrier_verification_dot_number", "carrier_verification", ["dot_number"]
    )


def downgrade() -> None:
    op.drop_table("carrier_verification")
    op.drop_table("carrier_conflict")
    op.drop_table("carrier_call_interaction")
    op.drop_table("load")
    op.drop_table("carrier")

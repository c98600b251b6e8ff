"""core tables: reference data, versioned tenders and bids, decisions, feedback

Revision ID: 0001_core_tables
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_core_tables"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    # ─────────── reference data ───────────
    op.create_table(
        "employee",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False, unique=True),
        sa.Column("first_name", sa.String(length=50), nullable=True),
        sa.Column("last_name", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )

    op.create_table(
        "organization",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("type IN ('IE', 'LLC', 'JSC')", name="ck_organization_type"),
    )

    op.create_table(
        "organization_responsible",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            "organization_id",
            sa.Uuid(),
            sa.ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("employee.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )

    # ─────────── tenders ───────────
    op.create_table(
        "tender",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            "organization_id",
            sa.Uuid(),
            sa.ForeignKey("organization.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("current_version_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_tender_organization_created", "tender", ["organization_id", "created_at"])

    op.create_table(
        "tender_version",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            "tender_id",
            sa.Uuid(),
            sa.ForeignKey("tender.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("service_type", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("tender_id", "version", name="uq_tender_version_tender_version"),
        sa.CheckConstraint("version >= 1", name="ck_tender_version_positive"),
    )

    # ─────────── bids ───────────
    op.create_table(
        "bid",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            "tender_id",
            sa.Uuid(),
            sa.ForeignKey("tender.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("author_type", sa.String(length=16), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("current_version_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_bid_tender_status", "bid", ["tender_id", "status"])
    op.create_index("ix_bid_author", "bid", ["author_type", "author_id"])

    op.create_table(
        "bid_version",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column(
            "bid_id",
            sa.Uuid(),
            sa.ForeignKey("bid.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("bid_id", "version", name="uq_bid_version_bid_version"),
        sa.CheckConstraint("version >= 1", name="ck_bid_version_positive"),
    )

    # ─────────── review ───────────
    op.create_table(
        "bid_decision",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("bid_id", sa.Uuid(), sa.ForeignKey("bid.id", ondelete="CASCADE"), nullable=False),
        sa.Column("decision", sa.String(length=16), nullable=False),
        sa.Column(
            "employee_id",
            sa.Uuid(),
            sa.ForeignKey("employee.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_bid_decision_bid", "bid_decision", ["bid_id"])

    op.create_table(
        "bid_feedback",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("bid_id", sa.Uuid(), sa.ForeignKey("bid.id", ondelete="CASCADE"), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "author_id",
            sa.Uuid(),
            sa.ForeignKey("employee.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_bid_feedback_bid", "bid_feedback", ["bid_id"])


def downgrade():
    op.drop_index("ix_bid_feedback_bid", table_name="bid_feedback")
    op.drop_table("bid_feedback")
    op.drop_index("ix_bid_decision_bid", table_name="bid_decision")
    op.drop_table("bid_decision")
    op.drop_table("bid_version")
    op.drop_index("ix_bid_author", table_name="bid")
    op.drop_index("ix_bid_tender_status", table_name="bid")
    op.drop_table("bid")
    op.drop_table("tender_version")
    op.drop_index("ix_tender_organization_created", table_name="tender")
    op.drop_table("tender")
    op.drop_table("organization_responsible")
    op.drop_table("organization")
    op.drop_table("employee")

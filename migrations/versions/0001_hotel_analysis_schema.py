"""hotel analysis schema

Revision ID: 0001_hotel_analysis_schema
Revises: None
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_hotel_analysis_schema"
down_revision = None
branch_labels = None
depends_on = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password", sa.String(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "hotels",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("accessibility_score", sa.Float(), nullable=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _created_at(),
        sa.CheckConstraint(
            "accessibility_score IS NULL OR "
            "(accessibility_score >= 0 AND accessibility_score <= 10)",
            name="ck_hotels_accessibility_score_range",
        ),
    )
    op.create_index("ix_hotels_user_id", "hotels", ["user_id"])

    op.create_table(
        "accessibility_features",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "hotel_id",
            sa.Uuid(),
            sa.ForeignKey("hotels.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("available", sa.Boolean(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index(
        "ix_accessibility_features_hotel_id", "accessibility_features", ["hotel_id"]
    )

    op.create_table(
        "compliance_notes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "hotel_id",
            sa.Uuid(),
            sa.ForeignKey("hotels.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("note", sa.Text(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index("ix_compliance_notes_hotel_id", "compliance_notes", ["hotel_id"])

    op.create_table(
        "sentiment_insights",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "hotel_id",
            sa.Uuid(),
            sa.ForeignKey("hotels.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("insight", sa.Text(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index(
        "ix_sentiment_insights_hotel_id", "sentiment_insights", ["hotel_id"]
    )


def downgrade() -> None:
    op.drop_table("sentiment_insights")
    op.drop_table("compliance_notes")
    op.drop_table("accessibility_features")
    op.drop_table("hotels")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

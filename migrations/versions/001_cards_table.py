"""
001 — Initial schema: cards catalog table

Revision ID: 001
Create Date: 2025-11-03
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "cards",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("issuer", sa.String(100), nullable=True),
        sa.Column("network", sa.String(50), nullable=True),
        sa.Column("card_type", sa.String(50), nullable=True),
        sa.Column("image", sa.Text, nullable=True),
        sa.Column("apply_link", sa.Text, nullable=True),
        sa.Column("rates_and_fees_link", sa.Text, nullable=True),

        sa.Column("annual_fee", sa.Float, nullable=True),
        sa.Column("foreign_fees", sa.Text, nullable=True),
        sa.Column("min_credit_score", sa.Float, nullable=True),
        sa.Column("intro_apr", sa.Text, nullable=True),
        sa.Column("ongoing_apr", sa.Text, nullable=True),

        sa.Column("reward_program", sa.String(100), nullable=True),
        sa.Column("rewards_currency", sa.String(100), nullable=True),
        sa.Column("point_value_baseline", sa.Float, nullable=True),
        sa.Column("point_value_max", sa.Float, nullable=True),
        sa.Column("recommended_goals", ARRAY(sa.Text), nullable=True),
        sa.Column("rewards", JSONB, nullable=True),
        sa.Column("sign_up_bonus", JSONB, nullable=True),
        sa.Column("credits_and_benefits", JSONB, nullable=True),

        sa.Column("transfer_partners", ARRAY(sa.Text), nullable=True),
        sa.Column("available_regions", ARRAY(sa.Text), nullable=True),
        sa.Column("pairing_synergy", ARRAY(sa.Text), nullable=True),
        sa.Column("card_tier", sa.String(50), nullable=True),
        sa.Column("is_business", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("visibility", sa.Boolean, nullable=True),
        sa.Column("availability_status", sa.String(30), nullable=True),

        sa.Column("data_source", sa.Text, nullable=True),
        sa.Column("last_updated", sa.String(30), nullable=True),
        sa.Column("quiz_metadata", JSONB, nullable=True),
        sa.Column("affiliate_metadata", JSONB, nullable=True),

        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_index("ix_cards_issuer", "cards", ["issuer"])


def downgrade() -> None:
    op.drop_index("ix_cards_issuer", table_name="cards")
    op.drop_table("cards")

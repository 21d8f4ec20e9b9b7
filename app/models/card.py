"""
Card catalog table — one row per card document.
Schema: public.cards (populated by app.services.card_seed)
"""
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Float, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class CardRecord(Base):
    __tablename__ = "cards"

    id = Column(String(100), primary_key=True)
    name = Column(String(200), nullable=True)
    issuer = Column(String(100), nullable=True, index=True)
    network = Column(String(50), nullable=True)
    card_type = Column(String(50), nullable=True)
    image = Column(Text, nullable=True)
    apply_link = Column(Text, nullable=True)
    rates_and_fees_link = Column(Text, nullable=True)

    # ── Cost + APR ──
    annual_fee = Column(Float, nullable=True)
    foreign_fees = Column(Text, nullable=True)
    min_credit_score = Column(Float, nullable=True)
    intro_apr = Column(Text, nullable=True)
    ongoing_apr = Column(Text, nullable=True)

    # ── Rewards ──
    reward_program = Column(String(100), nullable=True)
    rewards_currency = Column(String(100), nullable=True)
    point_value_baseline = Column(Float, nullable=True)
    point_value_max = Column(Float, nullable=True)
    recommended_goals = Column(ARRAY(Text), nullable=True)
    rewards = Column(JSONB, nullable=True)
    sign_up_bonus = Column(JSONB, nullable=True)
    credits_and_benefits = Column(JSONB, nullable=True)

    # ── Eligibility + tags ──
    transfer_partners = Column(ARRAY(Text), nullable=True)
    available_regions = Column(ARRAY(Text), nullable=True)
    pairing_synergy = Column(ARRAY(Text), nullable=True)
    card_tier = Column(String(50), nullable=True)
    is_business = Column(Boolean, nullable=False, default=False)
    visibility = Column(Boolean, nullable=True)
    availability_status = Column(String(30), nullable=True)

    # ── Curation ──
    data_source = Column(Text, nullable=True)
    last_updated = Column(String(30), nullable=True)
    quiz_metadata = Column(JSONB, nullable=True)
    affiliate_metadata = Column(JSONB, nullable=True)

    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def to_document(self) -> dict:
        """Row → plain card document (the shape Card.model_validate expects)."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns if c.name != "updated_at"}

    def __repr__(self):
        return f"<CardRecord {self.id} issuer={self.issuer}>"

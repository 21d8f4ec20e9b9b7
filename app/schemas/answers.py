"""
Inbound questionnaire answers — the JSON body of POST /score.

The quiz front-end posts a flat object with camelCase keys (plus the odd
snake_case one, e.g. redemption_value). Every key is optional; enum answers
are free strings normalized for matching, spend amounts are annualized USD.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.coercion import as_number, as_text, as_text_list, normalize_tag


class AnswerRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    # ── Location ──
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zip")

    # ── Credit + redemption ──
    credit_score: Optional[str] = Field(None, alias="creditScore", description="poor | fair | good | very_good | excellent")
    redemption_value: Optional[str] = Field(None, description="yes | sometimes | no")

    # ── Annualized spend (USD) ──
    spend_groceries: float = Field(0.0, alias="spendGroceries")
    spend_dining: float = Field(0.0, alias="spendDining")
    spend_travel: float = Field(0.0, alias="spendTravel")
    spend_gas: float = Field(0.0, alias="spendGas")
    spend_transit: float = Field(0.0, alias="spendTransit")
    spend_online: float = Field(0.0, alias="spendOnline")
    spend_rent: float = Field(0.0, alias="spendRent")
    spend_entertainment: float = Field(0.0, alias="spendEntertainment")
    spend_utilities: float = Field(0.0, alias="spendUtilities")
    spend_other: float = Field(0.0, alias="spendOther")

    # ── Preferences ──
    goal: Optional[str] = None
    annual_fee: Optional[str] = Field(None, alias="annualFee", description="no_fee | small_fee | premium")
    travel_frequency: Optional[str] = Field(None, alias="travelFrequency", description="rarely | occasionally | frequently")
    perks: list[str] = Field(default_factory=list)
    card_strategy: Optional[str] = Field(None, alias="cardStrategy", description="minimalist | balanced | optimizer")
    business_cards: Optional[str] = Field(None, alias="businessCards", description="yes | no | open_to_both")
    airline: list[str] = Field(default_factory=list)
    hotel: list[str] = Field(default_factory=list)

    @field_validator("state", "zip_code", mode="before")
    @classmethod
    def _location_text(cls, v: Any) -> Optional[str]:
        text = as_text(v)
        return text.strip() if text and text.strip() else None

    @field_validator(
        "credit_score", "redemption_value", "goal", "annual_fee",
        "travel_frequency", "card_strategy", "business_cards",
        mode="before",
    )
    @classmethod
    def _enum_answer(cls, v: Any) -> Optional[str]:
        return normalize_tag(v) or None

    @field_validator(
        "spend_groceries", "spend_dining", "spend_travel", "spend_gas", "spend_transit",
        "spend_online", "spend_rent", "spend_entertainment", "spend_utilities", "spend_other",
        mode="before",
    )
    @classmethod
    def _spend_amount(cls, v: Any) -> float:
        amount = as_number(v)
        return amount if amount is not None and amount > 0 else 0.0

    @field_validator("perks", "airline", "hotel", mode="before")
    @classmethod
    def _tag_set(cls, v: Any) -> list[str]:
        tags: list[str] = []
        for item in as_text_list(v):
            tag = normalize_tag(item)
            if tag and tag not in tags:
                tags.append(tag)
        return tags

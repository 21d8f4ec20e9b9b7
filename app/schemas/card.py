"""
Card catalog document.

Hydrated by the card repository (Postgres row or JSON document) before the
engine runs. Only `id` is required; every other field is optional and a
missing or malformed value means "no signal".

Cards are frozen: the engine builds new ScoreResult values and never touches
the source card.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.coercion import as_bool, as_dict, as_dict_list, as_number, as_text, as_text_list


class Reward(BaseModel):
    """One row of the card's reward-rate table, e.g. {"category": "Dining", "rate": 3}."""
    model_config = ConfigDict(frozen=True, extra="allow")

    category: str = ""
    rate: Optional[float] = None
    details: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _category_text(cls, v: Any) -> str:
        return as_text(v) or ""

    @field_validator("rate", mode="before")
    @classmethod
    def _rate_number(cls, v: Any) -> Optional[float]:
        return as_number(v)

    @field_validator("details", mode="before")
    @classmethod
    def _details_text(cls, v: Any) -> Optional[str]:
        return as_text(v)


class SignUpBonus(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    description: Optional[str] = None
    value_estimate: Optional[float] = None
    spend_requirement: Optional[float] = None
    timeframe_months: Optional[int] = None

    @field_validator("description", mode="before")
    @classmethod
    def _description_text(cls, v: Any) -> Optional[str]:
        return as_text(v)

    @field_validator("value_estimate", "spend_requirement", mode="before")
    @classmethod
    def _numbers(cls, v: Any) -> Optional[float]:
        return as_number(v)

    @field_validator("timeframe_months", mode="before")
    @classmethod
    def _months(cls, v: Any) -> Optional[int]:
        number = as_number(v)
        return int(number) if number is not None else None


class QuizMetadata(BaseModel):
    """Curation tags maintained alongside the catalog."""
    model_config = ConfigDict(frozen=True, extra="allow")

    local_only: bool = False
    region_priority: list[str] = Field(default_factory=list)
    recommended_for: list[str] = Field(default_factory=list)
    manual_tags: list[str] = Field(default_factory=list)

    @field_validator("local_only", mode="before")
    @classmethod
    def _local_only(cls, v: Any) -> bool:
        return as_bool(v) is True

    @field_validator("region_priority", "recommended_for", "manual_tags", mode="before")
    @classmethod
    def _tag_lists(cls, v: Any) -> list[str]:
        return as_text_list(v)


class Card(BaseModel):
    """
    Full card document. Unknown document fields (image, apply_link,
    affiliate_metadata, ...) are kept as extras and passed through to results.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    # ── Identity / issuer metadata ──
    id: str
    name: Optional[str] = None
    issuer: Optional[str] = None
    network: Optional[str] = None
    card_type: Optional[str] = None
    card_tier: Optional[str] = None

    # ── Cost ──
    annual_fee: Optional[float] = None
    foreign_fees: Optional[str] = None
    intro_apr: Optional[str] = None
    ongoing_apr: Optional[str] = None

    # ── Eligibility ──
    min_credit_score: Optional[float] = None
    visibility: Optional[bool] = None
    availability_status: Optional[str] = None
    available_regions: list[str] = Field(default_factory=list)

    # ── Rewards ──
    reward_program: Optional[str] = None
    rewards_currency: Optional[str] = None
    rewards: list[Reward] = Field(default_factory=list)
    point_value_baseline: Optional[float] = None
    point_value_max: Optional[float] = None
    sign_up_bonus: Optional[SignUpBonus] = None

    # ── Descriptive tags ──
    recommended_goals: list[str] = Field(default_factory=list)
    credits_and_benefits: list[str] = Field(default_factory=list)
    transfer_partners: list[str] = Field(default_factory=list)
    pairing_synergy: list[str] = Field(default_factory=list)
    is_business: bool = False
    quiz_metadata: QuizMetadata = Field(default_factory=QuizMetadata)

    @field_validator("id", mode="before")
    @classmethod
    def _id_text(cls, v: Any) -> Any:
        # None / objects fall through to the str validator and fail: identity is required
        text = as_text(v)
        return text if text is not None else v

    @field_validator(
        "name", "issuer", "network", "card_type", "card_tier",
        "foreign_fees", "intro_apr", "ongoing_apr", "availability_status",
        "reward_program", "rewards_currency",
        mode="before",
    )
    @classmethod
    def _optional_text(cls, v: Any) -> Optional[str]:
        return as_text(v)

    @field_validator("annual_fee", "min_credit_score", "point_value_baseline", "point_value_max", mode="before")
    @classmethod
    def _optional_number(cls, v: Any) -> Optional[float]:
        return as_number(v)

    @field_validator("visibility", mode="before")
    @classmethod
    def _visibility(cls, v: Any) -> Optional[bool]:
        return as_bool(v)

    @field_validator("is_business", mode="before")
    @classmethod
    def _is_business(cls, v: Any) -> bool:
        return as_bool(v) is True

    @field_validator(
        "available_regions", "recommended_goals", "credits_and_benefits",
        "transfer_partners", "pairing_synergy",
        mode="before",
    )
    @classmethod
    def _text_lists(cls, v: Any) -> list[str]:
        return as_text_list(v)

    @field_validator("rewards", mode="before")
    @classmethod
    def _reward_rows(cls, v: Any) -> list[dict]:
        return as_dict_list(v)

    @field_validator("sign_up_bonus", mode="before")
    @classmethod
    def _bonus(cls, v: Any) -> Optional[dict]:
        return as_dict(v)

    @field_validator("quiz_metadata", mode="before")
    @classmethod
    def _quiz_metadata(cls, v: Any) -> dict:
        return as_dict(v) or {}

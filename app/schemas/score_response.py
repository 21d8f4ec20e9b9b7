"""
Response payload of POST /score: the card document plus its fit score.
"""
from __future__ import annotations

from pydantic import Field

from app.schemas.card import Card


class ScoreResult(Card):
    score: float = Field(description="Composite fit score, rounded to 2 decimals")
    reasons: list[str] = Field(default_factory=list, description="Up to 6 justifications, first-reported first")

    @classmethod
    def from_card(cls, card: Card, score: float, reasons: list[str]) -> "ScoreResult":
        """Build a new result from a snapshot of the card; the card itself is left untouched."""
        snapshot = card.model_dump()
        snapshot["score"] = score
        snapshot["reasons"] = list(reasons)
        return cls.model_validate(snapshot)

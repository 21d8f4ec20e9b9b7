"""
Eligibility Filter — hard exclusions applied before scoring.

  EL-01  hidden      visibility is explicitly false
  EL-02  inactive    availability_status present and not "active"
  EL-03  region      local/regional card not offered in the user's state
                     (no state given → national cards only)
  EL-04  credit      userScore + 20 < min_credit_score (both known)

Business-card preference is NOT a filter; see factors.score_business_preference.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from app.schemas.card import Card
from app.scoring import rules


class Exclusion(str, Enum):
    HIDDEN = "hidden"
    INACTIVE = "inactive"
    REGION = "region"
    CREDIT = "credit"


def is_national(card: Card) -> bool:
    regions = {r.strip().lower() for r in card.available_regions}
    return not regions or bool(regions & rules.NATIONAL_REGION_MARKERS)


def check_eligibility(card: Card, state: Optional[str], user_score: int) -> Optional[Exclusion]:
    """
    Returns the first rule that excludes the card, or None when it is eligible.
    `user_score` is the mapped credit score (0 = unknown).
    """
    # ── EL-01 / EL-02: catalog status ──
    if card.visibility is False:
        return Exclusion.HIDDEN

    status = (card.availability_status or "").strip().lower()
    if status and status != "active":
        return Exclusion.INACTIVE

    # ── EL-03: state + national ──
    if not is_national(card):
        user_state = (state or "").strip().lower()
        if not user_state:
            return Exclusion.REGION
        if user_state not in {r.strip().lower() for r in card.available_regions}:
            return Exclusion.REGION

    # ── EL-04: credit band ──
    min_score = card.min_credit_score
    if min_score and min_score > 0 and user_score > 0:
        if user_score + rules.CREDIT_SCORE_LEEWAY < min_score:
            return Exclusion.CREDIT

    return None

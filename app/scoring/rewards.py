"""
Reward Value Estimation

  1. Category rate resolution   (reward table × spend label → multiplier)
  2. Credit tier mapping        (quiz bucket → representative score)
  3. Point value                (redemption effort → $/point)
  4. Monetary value             (annual spend → yearly rewards, net of bonus + fee)

All values are USD. Tables and constants come from rules.py.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Optional, Sequence

from app.schemas.answers import AnswerRecord
from app.schemas.card import Card, Reward
from app.scoring import rules
from app.scoring.factors import FactorResult


# ═══════════════════════════════════════════════════════════════
# 1. CATEGORY RATE
#    best rate among entries matching the label or one of its keywords,
#    then the catch-all entry, then 1x
# ═══════════════════════════════════════════════════════════════
def resolve_category_rate(rewards: Sequence[Reward], category_label: str) -> float:
    label = category_label.lower()
    keywords = rules.CATEGORY_KEYWORDS.get(category_label, ())

    best = 0.0
    for reward in rewards:
        category = reward.category.lower()
        if label in category or any(k in category for k in keywords):
            if reward.rate is not None and reward.rate > best:
                best = reward.rate

    if best <= 0:
        for reward in rewards:
            if reward.category.strip().lower() in rules.CATCH_ALL_CATEGORIES and reward.rate:
                best = reward.rate
                break

    return best if best > 0 else rules.DEFAULT_REWARD_RATE


# ═══════════════════════════════════════════════════════════════
# 2. CREDIT TIER
# ═══════════════════════════════════════════════════════════════
def map_credit_score(credit_tier: Optional[str]) -> int:
    """0 means unknown — callers must not filter on it."""
    return rules.CREDIT_TIER_SCORES.get(credit_tier or "", 0)


# ═══════════════════════════════════════════════════════════════
# 3. POINT VALUE
# ═══════════════════════════════════════════════════════════════
def estimate_point_value(
    redemption_effort: Optional[str],
    point_value_baseline: Optional[float],
    point_value_max: Optional[float],
) -> float:
    baseline = point_value_baseline if point_value_baseline and point_value_baseline > 0 else rules.DEFAULT_POINT_VALUE
    maximum = point_value_max if point_value_max and point_value_max > 0 else baseline * rules.POINT_VALUE_MAX_MULTIPLIER

    if redemption_effort == "yes":
        return maximum
    if redemption_effort == "sometimes":
        return (baseline + maximum) / 2
    return baseline


# ═══════════════════════════════════════════════════════════════
# 4. MONETARY VALUE
# ═══════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class ValueEstimate:
    point_value: float
    yearly_rewards: float
    bonus_value: float
    annual_fee: float

    @property
    def net_first_year(self) -> float:
        return _clamp(self.yearly_rewards + self.bonus_value - self.annual_fee)


def estimate_yearly_rewards(card: Card, answers: AnswerRecord, point_value: float) -> float:
    total = 0.0
    for label, field_name in rules.SPEND_CATEGORIES:
        amount = getattr(answers, field_name)
        if amount <= 0:
            continue
        total += amount * resolve_category_rate(card.rewards, label) * point_value
    return _clamp(total)


def _clamp(amount: float) -> float:
    """Overflowing products saturate at the largest float instead of becoming inf."""
    return max(min(amount, sys.float_info.max), -sys.float_info.max)


def estimate_value(card: Card, answers: AnswerRecord) -> ValueEstimate:
    point_value = estimate_point_value(
        answers.redemption_value,
        card.point_value_baseline,
        card.point_value_max,
    )
    bonus = card.sign_up_bonus.value_estimate if card.sign_up_bonus else None
    return ValueEstimate(
        point_value=point_value,
        yearly_rewards=estimate_yearly_rewards(card, answers, point_value),
        bonus_value=max(bonus or 0.0, 0.0),
        annual_fee=max(card.annual_fee or 0.0, 0.0),
    )


def score_value(card: Card, answers: AnswerRecord) -> FactorResult:
    estimate = estimate_value(card, answers)

    reasons = []
    if estimate.yearly_rewards > 0:
        reasons.append(f"Estimated ${_dollars(estimate.yearly_rewards)} in yearly rewards based on your spending")
    if estimate.bonus_value > 0:
        reasons.append(f"Sign-up bonus worth ~${_dollars(estimate.bonus_value)}")
    if estimate.annual_fee > 0:
        reasons.append(f"Annual fee: ${_dollars(estimate.annual_fee)}")
    else:
        reasons.append("No annual fee")

    return FactorResult(
        "Value",
        estimate.net_first_year / rules.VALUE_SCORE_DIVISOR,
        tuple(reasons),
    )


def _dollars(amount: float) -> str:
    # half-up
    return f"{int(amount + 0.5):,}"

"""
v2.0 Ranking Model — Preference Alignment Factors

Each factor:
  1. Takes the card and the relevant quiz answers
  2. Matches them against the tables in rules.py
  3. Returns a bounded contribution plus optional reasons

Aggregation happens in the engine, not here. An absent or unrecognized
answer always contributes 0.

Convention: HIGHER score = BETTER fit.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from app.schemas.answers import AnswerRecord
from app.schemas.card import Card
from app.schemas.coercion import normalize_tag
from app.scoring import rules


@dataclass(frozen=True)
class FactorResult:
    factor_name: str
    score: float
    reasons: tuple[str, ...] = ()


_ZERO_PERCENT = re.compile(r"(?<![\d.])0(?:\.0+)?\s*%")
_PERCENTAGE = re.compile(r"(\d+(?:\.\d+)?)\s*%")
_MONTHS = re.compile(r"(\d+)\s*(?:billing\s+)?(?:months?|mos?)\b")


def _label(tag: str) -> str:
    return tag.replace("_", " ")


def canonical_goal(goal: Optional[str]) -> str:
    tag = normalize_tag(goal)
    return rules.GOAL_SYNONYMS.get(tag, tag)


def has_no_foreign_fee(foreign_fees: Optional[str]) -> bool:
    text = (foreign_fees or "").lower()
    return any(m in text for m in rules.NO_FOREIGN_FEE_MARKERS) or bool(_ZERO_PERCENT.search(text))


# ═══════════════════════════════════════════════════════════════
# 1. GOAL MATCH
#    exact tag 1.5 / synonym 1.0 / adjacent 0.8 / weak 0.3
# ═══════════════════════════════════════════════════════════════
def score_goal_match(card: Card, goal: Optional[str]) -> FactorResult:
    user_tag = normalize_tag(goal)
    if not user_tag:
        return FactorResult("Goal", 0.0)

    card_tags = [t for t in (normalize_tag(g) for g in card.recommended_goals) if t]
    user_goal = canonical_goal(user_tag)
    card_goals = {rules.GOAL_SYNONYMS.get(t, t) for t in card_tags}

    if user_tag in card_tags:
        return FactorResult("Goal", rules.GOAL_EXACT_SCORE, (f"Built for your {_label(user_goal)} goal",))
    if user_goal in card_goals:
        return FactorResult("Goal", rules.GOAL_SYNONYM_SCORE, (f"Suited to your {_label(user_goal)} goal",))

    adjacent = rules.GOAL_ADJACENT.get(user_goal, frozenset())
    if card_goals & adjacent or any(user_tag in t or t in user_tag for t in card_tags):
        return FactorResult("Goal", rules.GOAL_ADJACENT_SCORE)

    return FactorResult("Goal", rules.GOAL_WEAK_SCORE)


# ═══════════════════════════════════════════════════════════════
# 2. FEE PREFERENCE
# ═══════════════════════════════════════════════════════════════
def score_fee_preference(card: Card, preference: Optional[str]) -> FactorResult:
    fee = max(card.annual_fee or 0.0, 0.0)

    if preference == "no_fee":
        if fee == 0:
            return FactorResult("FeePreference", rules.NO_FEE_MATCH_SCORE)
        score = rules.NO_FEE_PENALTY_FLOOR + rules.NO_FEE_PENALTY_SPAN * (
            rules.NO_FEE_PENALTY_PIVOT / (rules.NO_FEE_PENALTY_PIVOT + fee)
        )
        return FactorResult("FeePreference", score)

    if preference == "small_fee":
        if fee == 0:
            return FactorResult("FeePreference", rules.SMALL_FEE_ZERO_SCORE)
        if fee <= rules.SMALL_FEE_CEILING:
            return FactorResult("FeePreference", rules.SMALL_FEE_MATCH_SCORE)
        if fee <= rules.SMALL_FEE_MID_CEILING:
            return FactorResult("FeePreference", rules.SMALL_FEE_MID_SCORE)
        return FactorResult("FeePreference", rules.SMALL_FEE_HIGH_SCORE)

    if preference == "premium":
        for threshold, score in rules.PREMIUM_FEE_TIERS:
            if fee >= threshold:
                return FactorResult("FeePreference", score)
        return FactorResult("FeePreference", rules.PREMIUM_FEE_LOW_SCORE)

    return FactorResult("FeePreference", 0.0)


# ═══════════════════════════════════════════════════════════════
# 3. TRAVEL FIT
#    base(frequency) × (1 + travel rewards + partners + no FX fee)
# ═══════════════════════════════════════════════════════════════
def score_travel_fit(card: Card, travel_frequency: Optional[str]) -> FactorResult:
    base = rules.TRAVEL_FREQUENCY_BASE.get(travel_frequency or "")
    if not base:
        return FactorResult("TravelFit", 0.0)

    has_travel_rewards = any("travel" in r.category.lower() for r in card.rewards)
    partner_count = len(card.transfer_partners)
    no_fx = has_no_foreign_fee(card.foreign_fees)

    bonus = 0.0
    if has_travel_rewards:
        bonus += rules.TRAVEL_REWARD_BONUS
    if partner_count:
        bonus += rules.TRANSFER_PARTNER_BONUS
    if no_fx:
        bonus += rules.NO_FOREIGN_FEE_BONUS

    reasons = []
    # rare travellers still get the score, just no travel reasons
    if travel_frequency != "rarely":
        if partner_count:
            noun = "partner" if partner_count == 1 else "partners"
            reasons.append(f"Transfers points to {partner_count} travel {noun}")
        if no_fx:
            reasons.append("No foreign transaction fees")

    return FactorResult("TravelFit", base * (1 + bonus), tuple(reasons))


# ═══════════════════════════════════════════════════════════════
# 4. AIRLINE / HOTEL ALIGNMENT  (cap 4.0)
# ═══════════════════════════════════════════════════════════════
def score_loyalty_alignment(card: Card, airlines: Sequence[str], hotels: Sequence[str]) -> FactorResult:
    partners_text = " | ".join(card.transfer_partners).lower()
    benefits_text = " | ".join(
        [*card.credits_and_benefits, card.name or "", card.reward_program or ""]
    ).lower()

    score = 0.0
    reasons: list[str] = []

    for preferences, aliases, generic, generic_score, partner_score, benefit_score in (
        (airlines, rules.AIRLINE_ALIASES, rules.GENERIC_AIRLINE_PREFERENCES,
         rules.GENERIC_AIRLINE_SCORE, rules.AIRLINE_PARTNER_SCORE, rules.AIRLINE_BENEFIT_SCORE),
        (hotels, rules.HOTEL_ALIASES, rules.GENERIC_HOTEL_PREFERENCES,
         rules.GENERIC_HOTEL_SCORE, rules.HOTEL_PARTNER_SCORE, rules.HOTEL_BENEFIT_SCORE),
    ):
        for tag in preferences:
            if tag in rules.NO_LOYALTY_PREFERENCES:
                continue
            if tag in generic:
                if card.transfer_partners:
                    score += generic_score
                continue

            names = aliases.get(tag, (_label(tag),))
            program = _label(tag).title()
            if any(n in partners_text for n in names):
                score += partner_score
                reasons.append(f"Transfers to {program}")
            elif any(n in benefits_text for n in names):
                score += benefit_score
                reasons.append(f"{program} benefits")

    return FactorResult("LoyaltyAlignment", min(score, rules.LOYALTY_SCORE_CAP), tuple(reasons))


# ═══════════════════════════════════════════════════════════════
# 5. PERKS  (cap 2.0)
# ═══════════════════════════════════════════════════════════════
def score_perks(card: Card, perks: Sequence[str]) -> FactorResult:
    if "none" in perks:
        return FactorResult("Perks", rules.NO_PERKS_SCORE)

    benefits_text = " | ".join(card.credits_and_benefits).lower()

    score = 0.0
    matched: list[str] = []
    for tag in perks:
        rule = rules.PERK_RULES.get(tag)
        if rule is None:
            keyword = _label(tag)
            if keyword and keyword in benefits_text:
                score += rules.UNKNOWN_PERK_WEIGHT
                matched.append(keyword)
            continue

        hit = any(k in benefits_text for k in rule.keywords)
        if tag == "no_foreign_fee":
            hit = hit or has_no_foreign_fee(card.foreign_fees)
        if hit:
            score += rule.weight
            matched.append(rule.label)

    reasons = (f"Includes perks you want: {', '.join(matched[:3])}",) if matched else ()
    return FactorResult("Perks", min(score, rules.PERKS_SCORE_CAP), reasons)


# ═══════════════════════════════════════════════════════════════
# 6. CARD STRATEGY
# ═══════════════════════════════════════════════════════════════
def score_card_strategy(card: Card, strategy: Optional[str]) -> FactorResult:
    scores = rules.STRATEGY_SCORES.get(strategy or "")
    if scores is None:
        return FactorResult("CardStrategy", 0.0)

    without_synergy, with_synergy = scores
    if card.pairing_synergy:
        reasons = (f"Pairs well with {card.pairing_synergy[0]}",) if strategy == "optimizer" else ()
        return FactorResult("CardStrategy", with_synergy, reasons)

    reasons = ("Works well as a standalone card",) if strategy == "minimalist" else ()
    return FactorResult("CardStrategy", without_synergy, reasons)


# ═══════════════════════════════════════════════════════════════
# 7. BUSINESS PREFERENCE
#    "no" + business card → −5: ranks last but is still returned
# ═══════════════════════════════════════════════════════════════
def score_business_preference(card: Card, business_cards: Optional[str]) -> FactorResult:
    score = rules.BUSINESS_SCORES.get((business_cards or "", card.is_business), 0.0)

    if score < 0:
        return FactorResult("BusinessPreference", score, ("Business card (you prefer personal cards)",))
    if business_cards == "yes" and card.is_business:
        return FactorResult("BusinessPreference", score, ("Business card for your business spending",))
    return FactorResult("BusinessPreference", score)


# ═══════════════════════════════════════════════════════════════
# 8. REGION BOOST
# ═══════════════════════════════════════════════════════════════
def score_region_boost(card: Card, state: Optional[str]) -> FactorResult:
    user_state = (state or "").strip().lower()
    if not user_state:
        return FactorResult("RegionBoost", 0.0)

    score = 0.0
    reasons = []
    if user_state in (r.strip().lower() for r in card.available_regions):
        score += rules.REGION_MATCH_BOOST
        reasons.append(f"Available in your state ({user_state.upper()})")
    if user_state in (r.strip().lower() for r in card.quiz_metadata.region_priority):
        score += rules.REGION_PRIORITY_BOOST
        reasons.append(f"Prioritized for {user_state.upper()} residents")

    return FactorResult("RegionBoost", score, tuple(reasons))


# ═══════════════════════════════════════════════════════════════
# 9. QUIZ METADATA TAGS  (cap 1.5)
# ═══════════════════════════════════════════════════════════════
def profile_tags(answers: AnswerRecord) -> frozenset[str]:
    """Implicit profile derived from the quiz answers, in catalog tag vocabulary."""
    tags: set[str] = set()
    tags.update(rules.CREDIT_PROFILE_TAGS.get(answers.credit_score or "", ()))
    tags.update(rules.TRAVEL_PROFILE_TAGS.get(answers.travel_frequency or "", ()))
    tags.update(rules.BUSINESS_PROFILE_TAGS.get(answers.business_cards or "", ()))
    tags.update(rules.STRATEGY_PROFILE_TAGS.get(answers.card_strategy or "", ()))
    if answers.goal:
        tags.add(answers.goal)
        tags.add(canonical_goal(answers.goal))
    return frozenset(tags)


def score_quiz_tags(card: Card, answers: AnswerRecord) -> FactorResult:
    card_tags: list[str] = []
    for raw in (*card.quiz_metadata.recommended_for, *card.quiz_metadata.manual_tags):
        tag = normalize_tag(raw)
        if tag and tag not in card_tags:
            card_tags.append(tag)

    if not card_tags:
        return FactorResult("QuizTags", 0.0)

    profile = profile_tags(answers)
    matched = [t for t in card_tags if t in profile]
    if not matched:
        return FactorResult("QuizTags", rules.QUIZ_TAG_FLOOR)

    score = min(len(matched) * rules.QUIZ_TAG_SCORE, rules.QUIZ_TAG_CAP)
    return FactorResult("QuizTags", score, (f"Recommended for: {', '.join(_label(t) for t in matched[:3])}",))


# ═══════════════════════════════════════════════════════════════
# 10. LOW INTEREST
#     only scored when the user's goal is low interest
# ═══════════════════════════════════════════════════════════════
def score_low_interest(card: Card, goal: Optional[str]) -> FactorResult:
    if canonical_goal(goal) != "low_interest":
        return FactorResult("LowInterest", 0.0)

    intro = (card.intro_apr or "").lower()
    ongoing = (card.ongoing_apr or "").lower()

    score = 0.0
    reasons = []

    intro_zero = bool(_ZERO_PERCENT.search(intro))
    if intro_zero:
        months = max((int(m) for m in _MONTHS.findall(intro)), default=0)
        score += rules.INTRO_ZERO_LONG_SCORE if months >= rules.INTRO_LONG_MONTHS else rules.INTRO_ZERO_SCORE
        reasons.append(f"Intro APR: {card.intro_apr}")

    if "balance transfer" in intro:
        score += rules.BALANCE_TRANSFER_ZERO_SCORE if intro_zero else rules.BALANCE_TRANSFER_SCORE
        reasons.append("Balance transfer offer")

    match = _PERCENTAGE.search(ongoing)
    if match:
        rate = float(match.group(1))
        for ceiling, tier_score in rules.ONGOING_APR_TIERS:
            if rate <= ceiling:
                score += tier_score
                reasons.append(f"Low ongoing APR ({card.ongoing_apr})")
                break

    return FactorResult("LowInterest", score, tuple(reasons))


# ═══════════════════════════════════════════════════════════════
# Approval comfort
#    userScore − min_credit_score, only when both are known
# ═══════════════════════════════════════════════════════════════
def score_approval_comfort(card: Card, user_score: int) -> FactorResult:
    min_score = card.min_credit_score
    if not min_score or min_score <= 0 or user_score <= 0:
        return FactorResult("ApprovalComfort", 0.0)

    margin = user_score - min_score
    for threshold, score, reason in rules.APPROVAL_BANDS:
        if margin >= threshold:
            return FactorResult("ApprovalComfort", score, (reason,))
    return FactorResult("ApprovalComfort", rules.APPROVAL_FLOOR_SCORE, (rules.APPROVAL_FLOOR_REASON,))

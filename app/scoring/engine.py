"""
v2.0 Card Ranking Engine

Orchestrates, per card:
  1. Eligibility filter (hard exclusions)
  2. Monetary value (yearly rewards + bonus − fee)
  3. All preference alignment factors
  4. Composite score + capped reasons
  5. New ScoreResult built from the card snapshot

then sorts the results by score (stable: ties keep catalog order).

Pure computation: no I/O, no shared mutable state. Called synchronously by
the API endpoint.
"""
from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

import structlog

from app.schemas.answers import AnswerRecord
from app.schemas.card import Card
from app.schemas.score_response import ScoreResult
from app.scoring import factors, rules
from app.scoring.eligibility import check_eligibility
from app.scoring.factors import FactorResult
from app.scoring.rewards import map_credit_score, score_value

logger = structlog.get_logger()


@dataclass(frozen=True)
class CardScore:
    """Full breakdown for one card; ScoreResult only exposes total + reasons."""
    card: Card
    total_score: float
    factor_scores: tuple[FactorResult, ...]
    reasons: tuple[str, ...]


def score_card(card: Card, answers: AnswerRecord, user_score: Optional[int] = None) -> CardScore:
    """
    Score a single (already eligible) card.
    """
    if user_score is None:
        user_score = map_credit_score(answers.credit_score)

    # ── Step 1: value first, so its reasons lead ──
    factor_scores = (
        score_value(card, answers),
        factors.score_goal_match(card, answers.goal),
        factors.score_fee_preference(card, answers.annual_fee),
        factors.score_travel_fit(card, answers.travel_frequency),
        factors.score_loyalty_alignment(card, answers.airline, answers.hotel),
        factors.score_perks(card, answers.perks),
        factors.score_card_strategy(card, answers.card_strategy),
        factors.score_business_preference(card, answers.business_cards),
        factors.score_region_boost(card, answers.state),
        factors.score_quiz_tags(card, answers),
        factors.score_low_interest(card, answers.goal),
        factors.score_approval_comfort(card, user_score),
    )

    # ── Step 2: composite = direct sum (weights live in each factor's range) ──
    total_score = round(sum(f.score for f in factor_scores), 2)
    reasons = tuple(r for f in factor_scores for r in f.reasons)[: rules.MAX_REASONS]

    return CardScore(
        card=card,
        total_score=total_score,
        factor_scores=factor_scores,
        reasons=reasons,
    )


def rank_cards(cards: Iterable[Card], answers: AnswerRecord) -> list[ScoreResult]:
    """
    Main ranking entry point.
    """
    t0 = time.perf_counter_ns()
    user_score = map_credit_score(answers.credit_score)

    results: list[ScoreResult] = []
    excluded: Counter[str] = Counter()
    evaluated = 0

    for card in cards:
        evaluated += 1
        exclusion = check_eligibility(card, answers.state, user_score)
        if exclusion is not None:
            excluded[exclusion.value] += 1
            continue

        scored = score_card(card, answers, user_score)
        results.append(ScoreResult.from_card(card, scored.total_score, list(scored.reasons)))

    # sorted() is stable → equal scores keep catalog order
    results = sorted(results, key=lambda r: r.score, reverse=True)

    elapsed_ms = int((time.perf_counter_ns() - t0) / 1_000_000)
    logger.info(
        "card_ranking_complete",
        ruleset_version=rules.RULESET_VERSION,
        evaluated=evaluated,
        ranked=len(results),
        excluded=dict(excluded),
        top_card=results[0].id if results else None,
        elapsed_ms=elapsed_ms,
    )
    return results

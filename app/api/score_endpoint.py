"""
POST /score

The single endpoint called by the quiz front-end.
Synchronous request → load catalog → rank → response.
Results are never persisted.
"""
from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram

from app.repository.card_repository import CardRepository, get_card_repository
from app.schemas.answers import AnswerRecord
from app.schemas.score_response import ScoreResult
from app.scoring import rules
from app.scoring.engine import rank_cards

logger = structlog.get_logger()
router = APIRouter(tags=["score"])

SCORING_REQUESTS = Counter(
    "card_scoring_requests_total",
    "POST /score requests by outcome",
    ["outcome"],
)
RANKING_SECONDS = Histogram(
    "card_ranking_seconds",
    "Time spent ranking the catalog for one request",
)


@router.post(
    "/score",
    response_model=list[ScoreResult],
    summary="Rank the card catalog against quiz answers",
    description="Returns every eligible card with its fit score and up to six reasons, best first.",
    responses={500: {"description": "Catalog unavailable or scoring error", "content": {"application/json": {"example": {"error": "Scoring failed."}}}}},
)
async def score_cards(
    answers: Optional[AnswerRecord] = None,
    repository: CardRepository = Depends(get_card_repository),
):
    # no body ranks against an empty questionnaire
    if answers is None:
        answers = AnswerRecord()

    logger.info(
        "scoring_started",
        ruleset_version=rules.RULESET_VERSION,
        state=answers.state,
        credit_score=answers.credit_score,
        goal=answers.goal,
    )

    try:
        cards = await repository.list_cards()
        with RANKING_SECONDS.time():
            results = rank_cards(cards, answers)
    except Exception as e:
        logger.error("scoring_failed", error=str(e), error_type=type(e).__name__)
        SCORING_REQUESTS.labels(outcome="error").inc()
        return JSONResponse(status_code=500, content={"error": "Scoring failed."})

    SCORING_REQUESTS.labels(outcome="success").inc()
    return results

"""
GET /cards — the full catalog, ordered by id.
"""
from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.repository.card_repository import CardRepository, get_card_repository
from app.schemas.card import Card

logger = structlog.get_logger()
router = APIRouter(tags=["cards"])


@router.get("/cards", response_model=list[Card], summary="List every card in the catalog")
async def list_cards(repository: CardRepository = Depends(get_card_repository)):
    try:
        return await repository.list_cards()
    except Exception as e:
        logger.error("card_fetch_failed", error=str(e), error_type=type(e).__name__)
        return JSONResponse(status_code=500, content={"error": "Could not load cards."})

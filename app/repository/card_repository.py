"""
Card catalog repositories.

The HTTP layer depends on the CardRepository protocol only; which backend
serves it is decided by settings.card_store:

  database → SqlCardRepository   (Postgres `cards` table, async SQLAlchemy)
  json     → JsonCardRepository  (<card_data_dir>/<issuer>/*.json documents)

The scoring engine never sees a repository — it receives hydrated Cards.
"""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import AsyncIterator, Protocol

import structlog
from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.models.card import CardRecord
from app.models.database import get_sessionmaker
from app.schemas.card import Card

logger = structlog.get_logger()


class CardRepository(Protocol):
    async def list_cards(self) -> list[Card]:
        """Return the full catalog, ordered by card id."""


class SqlCardRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_cards(self) -> list[Card]:
        result = await self.session.execute(select(CardRecord).order_by(CardRecord.id))
        cards = [Card.model_validate(row.to_document()) for row in result.scalars()]
        logger.debug("cards_loaded", source="database", count=len(cards))
        return cards


class JsonCardRepository:
    def __init__(self, cards_dir: str | Path):
        self.cards_dir = Path(cards_dir)

    async def list_cards(self) -> list[Card]:
        documents = await asyncio.to_thread(load_card_documents, self.cards_dir)
        cards = sorted((Card.model_validate(d) for d in documents), key=lambda c: c.id)
        logger.debug("cards_loaded", source="json", count=len(cards), cards_dir=str(self.cards_dir))
        return cards


class StaticCardRepository:
    """Fixed in-memory catalog (used for tests and local experiments)."""

    def __init__(self, cards: list[Card]):
        self.cards = list(cards)

    async def list_cards(self) -> list[Card]:
        return list(self.cards)


def load_card_documents(cards_dir: str | Path) -> list[dict]:
    """
    Read every card document under `cards_dir`.

    Layout (one file per card):
        cards_dir/
            chase/sapphire-preferred.json
            amex/gold.json
            local-credit-union.json

    Files are read in sorted path order; a file holding a JSON list
    contributes each of its objects.
    """
    root = Path(cards_dir)
    if not root.is_dir():
        raise ValueError(f"Card directory not found: {root}")

    documents: list[dict] = []
    for path in sorted([*root.glob("*.json"), *root.glob("*/*.json")]):
        with path.open(encoding="utf-8") as fh:
            payload = json.load(fh)
        for doc in payload if isinstance(payload, list) else [payload]:
            if isinstance(doc, dict) and doc.get("id") is not None:
                documents.append(doc)
            else:
                logger.warning("card_document_skipped", path=str(path), reason="missing id")
    return documents


async def get_card_repository(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[CardRepository]:
    """FastAPI dependency yielding the configured repository."""
    if settings.card_store == "json":
        yield JsonCardRepository(settings.card_data_dir)
        return

    async with get_sessionmaker()() as session:
        yield SqlCardRepository(session)

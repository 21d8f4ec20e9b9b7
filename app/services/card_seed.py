"""
card_seed.py
────────────
Batch job that loads card documents from the catalog directory and upserts
them into the `cards` table.

This is how catalog edits reach the ranking path:
  card JSON documents → cards table → GET /cards, POST /score read it → engine ranks.

Usage:
  python -m app.services.card_seed [cards_dir]

Environment variables:
  DATABASE_URL   - catalog DB (asyncpg URLs are converted to plain postgresql://)
  CARD_DATA_DIR  - default catalog directory when none is passed
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import psycopg2
import psycopg2.extras
import structlog

from app.core.config import get_settings
from app.repository.card_repository import load_card_documents

logger = structlog.get_logger(__name__)


# ─── Column mapping ───────────────────────────────────────────────

# Stored as Postgres text[]
ARRAY_COLUMNS = ("recommended_goals", "transfer_partners", "available_regions", "pairing_synergy")

# Stored as JSONB: (column, empty value)
JSON_COLUMNS = (
    ("rewards", []),
    ("sign_up_bonus", None),
    ("credits_and_benefits", []),
    ("quiz_metadata", {}),
    ("affiliate_metadata", {}),
)

SCALAR_COLUMNS = (
    "id", "name", "issuer", "network", "card_type", "image", "apply_link", "rates_and_fees_link",
    "annual_fee", "foreign_fees", "min_credit_score", "intro_apr", "ongoing_apr",
    "reward_program", "rewards_currency", "point_value_baseline", "point_value_max",
    "card_tier", "visibility", "availability_status", "data_source", "last_updated",
)

UPSERT_COLUMNS = (*SCALAR_COLUMNS, *ARRAY_COLUMNS, *(c for c, _ in JSON_COLUMNS), "is_business")

UPSERT_QUERY = f"""
INSERT INTO cards (
    {", ".join(UPSERT_COLUMNS)}, updated_at
) VALUES (
    {", ".join(f"%({c})s" for c in UPSERT_COLUMNS)}, NOW()
)
ON CONFLICT (id)
DO UPDATE SET
    {", ".join(f"{c} = EXCLUDED.{c}" for c in UPSERT_COLUMNS if c != "id")},
    updated_at = NOW();
"""


def build_upsert_row(doc: dict) -> dict:
    """Card document → parameter dict for UPSERT_QUERY."""
    row = {c: doc.get(c) for c in SCALAR_COLUMNS}
    row["id"] = str(doc["id"])
    for column in ARRAY_COLUMNS:
        value = doc.get(column)
        row[column] = list(value) if isinstance(value, (list, tuple)) else []
    for column, empty in JSON_COLUMNS:
        value = doc.get(column)
        row[column] = psycopg2.extras.Json(value if value is not None else empty)
    row["is_business"] = doc.get("is_business") is True
    return row


def to_sync_url(database_url: str) -> str:
    """postgresql+asyncpg://... → postgresql://... (psycopg2)"""
    return (
        database_url
        .replace("postgresql+asyncpg://", "postgresql://")
        .replace("postgresql+psycopg2://", "postgresql://")
    )


# ─── Write to cards ───────────────────────────────────────────────

def write_cards(conn, documents: list[dict]) -> int:
    """
    Upsert every document in one transaction. Rolls back and re-raises on
    any failure so a bad file never leaves a half-seeded catalog.
    Returns the number of rows written.
    """
    rows = [build_upsert_row(doc) for doc in documents]
    try:
        with conn.cursor() as cur:
            psycopg2.extras.execute_batch(cur, UPSERT_QUERY, rows, page_size=50)
        conn.commit()
    except Exception:
        conn.rollback()
        raise

    for doc in documents:
        logger.debug("card_upserted", card_id=str(doc["id"]), name=doc.get("name"))
    return len(rows)


# ─── Main entry point ─────────────────────────────────────────────

def run_seed(
    cards_dir: Optional[str] = None,
    database_url: Optional[str] = None,
) -> dict:
    """
    Full seed cycle:
      1. Read card documents from the catalog directory
      2. Upsert them into `cards`
      3. Return summary

    Args:
        cards_dir:     Override CARD_DATA_DIR
        database_url:  Override DATABASE_URL
    """
    settings = get_settings()
    source = Path(cards_dir or settings.card_data_dir)
    db_url = database_url or settings.database_url

    if not db_url:
        raise ValueError("DATABASE_URL not set — cannot connect to catalog DB")

    started_at = datetime.now(timezone.utc)
    logger.info("card_seed_started", cards_dir=str(source))

    documents = load_card_documents(source)

    conn = psycopg2.connect(to_sync_url(db_url))
    try:
        rows_written = write_cards(conn, documents)
    finally:
        conn.close()

    elapsed = (datetime.now(timezone.utc) - started_at).total_seconds()
    result = {
        "cards_dir": str(source),
        "cards_written": rows_written,
        "elapsed_seconds": round(elapsed, 2),
        "status": "success",
    }
    logger.info("card_seed_complete", **result)
    return result


if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO)

    try:
        result = run_seed(sys.argv[1] if len(sys.argv) > 1 else None)
        print(f"✓ Seeded {result['cards_written']} cards from {result['cards_dir']} ({result['elapsed_seconds']}s)")
    except Exception as e:
        print(f"✗ Seed failed: {e}", file=sys.stderr)
        sys.exit(1)

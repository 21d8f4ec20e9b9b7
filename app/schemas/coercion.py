"""
Lenient coercion helpers for catalog documents and quiz answers.

Card rows come from Postgres (NUMERIC → Decimal, JSONB possibly as text) and
answers come straight from a browser form, so every optional field is
coerced to a typed default instead of failing validation:
  non-number → None, non-list → [], JSON text → decoded value.
"""
from __future__ import annotations

import json
import math
import re
from decimal import Decimal
from typing import Any, Optional


def as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, Decimal, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return None
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def as_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def decode_json(value: Any) -> Any:
    """Decode JSON text; anything else (or undecodable text) is returned as-is."""
    if isinstance(value, (str, bytes)):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def as_text_list(value: Any) -> list[str]:
    """
    Flatten a list-ish value to strings.
    Dict items (e.g. {"name": ..., "description": ...}) collapse to their text values.
    """
    value = decode_json(value)
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, (list, tuple, set, frozenset)):
        return []

    items: list[str] = []
    for item in value:
        if isinstance(item, dict):
            text = " ".join(str(v) for v in item.values() if isinstance(v, (str, int, float)) and not isinstance(v, bool))
        else:
            text = as_text(item)
        if text and text.strip():
            items.append(text.strip())
    return items


def as_dict_list(value: Any) -> list[dict]:
    value = decode_json(value)
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, dict)]


def as_dict(value: Any) -> Optional[dict]:
    value = decode_json(value)
    return value if isinstance(value, dict) else None


_TAG_SEPARATORS = re.compile(r"[\s\-]+")


def normalize_tag(value: Any) -> str:
    """'Very Good' / 'very-good' / ' very_good ' → 'very_good'."""
    text = as_text(value)
    if not text:
        return ""
    return _TAG_SEPARATORS.sub("_", text.strip().lower())

#!/usr/bin/env python3
"""
Price target record helpers.

Field access that works for pydantic records, plain dicts and attribute
objects alike, the numeric validity check shared by ranking and stats, and
normalisation of the backend's raw price target documents.

Backend documents carry the target as free text, e.g. ``"$444 → $439"``
(previous → current) or ``"$439"``.  Number-dash-number strings such as
``"11-21"`` are malformed ranges and never count as a target.
"""

import math
import numbers
import re
from collections.abc import Mapping
from typing import Any, Iterable, Optional

import pandas as pd

from formatting import comparable_timestamp
from schemas import PriceTargetRecord

_RANGE_RE = re.compile(r"^\d+-\d+$")
_ARROW_TARGET_RE = re.compile(r"→\s*\$?([\d,.]+)")
_ARROW_PREVIOUS_RE = re.compile(r"\$?([\d,.]+)\s*→")
_PRICE_RE = re.compile(r"\$?([\d,.]+)")


def record_field(record: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping or an attribute-style record."""
    if record is None:
        return default
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def is_valid_target(value: Any) -> bool:
    """True for finite real numbers. Bools and numeric strings do not count."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


# =========================================================================
# Raw backend documents
# =========================================================================

def _to_price(text: str) -> Optional[float]:
    try:
        price = float(text.replace(",", ""))
    except ValueError:
        return None
    return price if math.isfinite(price) else None


def parse_price_target(price_target_change: Optional[str]) -> Optional[float]:
    """Return the current target from a ``price_target_change`` string."""
    if not price_target_change:
        return None
    cleaned = price_target_change.strip()
    if _RANGE_RE.match(cleaned):
        return None

    m = _ARROW_TARGET_RE.search(cleaned)
    if m:
        return _to_price(m.group(1))
    m = _PRICE_RE.search(cleaned)
    if m:
        return _to_price(m.group(1))
    return None


def parse_previous_target(price_target_change: Optional[str]) -> Optional[float]:
    """Return the target before the arrow, or None when there is no arrow."""
    if not price_target_change:
        return None
    m = _ARROW_PREVIOUS_RE.search(price_target_change.strip())
    if m:
        return _to_price(m.group(1))
    return None


def _as_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    if isinstance(v, pd.Timestamp):
        return v.isoformat()
    return str(v)


def normalize_raw_target(raw: Mapping) -> Optional[PriceTargetRecord]:
    """Map a backend document onto PriceTargetRecord.

    Returns None when no positive target can be parsed.
    """
    target = parse_price_target(raw.get("price_target_change"))
    if target is None or target <= 0:
        return None

    return PriceTargetRecord(
        _id=_as_str(raw.get("_id")) or "",
        symbol=raw.get("ticker"),
        analyst_firm=raw.get("analyst") or "",
        price_target=target,
        rating=raw.get("rating_change"),
        published_date=_as_str(raw.get("date")),
        action=raw.get("action"),
        previous_target=parse_previous_target(raw.get("price_target_change")),
        updated_at=_as_str(raw.get("inserted_at")),
    )


def normalize_raw_targets(raw_docs: Iterable[Mapping]) -> list[PriceTargetRecord]:
    normalized = (normalize_raw_target(doc) for doc in raw_docs or [])
    return [r for r in normalized if r is not None]


def deduplicate_by_analyst(records: Iterable[Any]) -> list:
    """Keep the most recently published record per analyst firm.

    Firms stay in first-seen order.  A later record replaces the kept one
    only when its date is strictly newer; unparsable dates never win.
    """
    by_firm: dict = {}
    for rec in records or []:
        firm = record_field(rec, "analyst_firm")
        existing = by_firm.get(firm)
        if existing is None:
            by_firm[firm] = rec
            continue
        new_ts = comparable_timestamp(record_field(rec, "published_date"))
        old_ts = comparable_timestamp(record_field(existing, "published_date"))
        if pd.notna(new_ts) and (pd.isna(old_ts) or new_ts > old_ts):
            by_firm[firm] = rec
    return list(by_firm.values())

#!/usr/bin/env python3
"""
Display formatting for price target rows.

Dates render as "Mon D, YYYY" with a fixed English month table so output
does not depend on the process locale.  Dates carrying a UTC offset are
shown on the calendar day as written, not converted to local time.
"""

import logging
import math
import warnings
from datetime import date, datetime
from typing import Any

import pandas as pd
from pandas.errors import OutOfBoundsDatetime

logger = logging.getLogger("price_targets.formatting")

INVALID_DATE = "Invalid date"
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def parse_date(raw: Any) -> pd.Timestamp:
    """Parse a date-like value; NaT when it is missing or unparsable.

    Results are held at nanosecond resolution, so dates outside roughly
    1677-09-22 .. 2262-04-11 come back as NaT whatever unit pandas
    would otherwise infer for them.
    """
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return pd.NaT
    elif not isinstance(raw, (datetime, date)):
        return pd.NaT

    try:
        with warnings.catch_warnings():
            # pandas warns when it falls back to dateutil for free-form text
            warnings.simplefilter("ignore")
            ts = pd.to_datetime(raw, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return pd.NaT
    if not isinstance(ts, pd.Timestamp):
        return pd.NaT
    try:
        return ts.as_unit("ns")
    except (OutOfBoundsDatetime, OverflowError):
        return pd.NaT


def comparable_timestamp(raw: Any) -> pd.Timestamp:
    """Like parse_date, but offset-aware values are shifted to naive UTC."""
    ts = parse_date(raw)
    if pd.notna(ts) and ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def format_date(raw: Any, invalid_label: str = INVALID_DATE) -> str:
    ts = parse_date(raw)
    if pd.isna(ts):
        logger.debug("Unparsable published date: %r", raw)
        return invalid_label
    return f"{MONTH_ABBR[ts.month - 1]} {ts.day}, {ts.year:04d}"


def format_target_price(price: Any) -> str:
    """Format a target for display with a $ prefix.

    Prices under $10 keep two decimals; $10 and above round half-up to a
    whole dollar.
    """
    try:
        value = float(price)
    except (TypeError, ValueError, OverflowError):
        return "N/A"
    if not math.isfinite(value):
        return "N/A"
    if value < 10:
        return f"${value:.2f}"
    return f"${math.floor(value + 0.5)}"

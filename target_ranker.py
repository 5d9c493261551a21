#!/usr/bin/env python3
"""
Analyst Price Target Ranker
===========================
Turns the raw price target collection the host application already holds
into the short, ranked list the modal displays:

  1. Validate  - drop records without a finite numeric price_target
  2. Order     - by price_target (HIGH: descending, LOW: ascending), or by
                 published_date newest first when the date view is active
  3. Truncate  - keep the first top_n (default 10)
  4. Rank      - 1-based, contiguous, in final order

Ties keep their original relative input order in every mode, so the same
(records, mode) always yields the same output.  The input collection is
never mutated; each call works on its own DataFrame of positions.

Nothing here touches the network or disk except load_config(), which the
host calls once at start-up.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Optional

import numpy as np
import pandas as pd
import yaml

from formatting import comparable_timestamp
from records import is_valid_target, record_field
from schemas import (
    DisplayMode,
    OverlayConfig,
    PriceTargetStats,
    RankedEntry,
    SortMode,
)

logger = logging.getLogger("price_targets.ranker")

# =========================================================================
# A. Configuration
# =========================================================================
ROOT = Path(__file__).resolve().parent
CONFIG_PATH = ROOT / "config.yaml"
TOP_N = 10

DEFAULT_CONFIG = OverlayConfig()


def load_config(path: Path = CONFIG_PATH) -> OverlayConfig:
    """Load and validate the YAML configuration file."""
    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}
    return OverlayConfig(**raw)


# =========================================================================
# B. Validation
# =========================================================================
_FRAME_COLS = ["pos", "price_target", "published_date"]


def _valid_frame(pool: list) -> pd.DataFrame:
    """One row per record with a usable price_target, keyed by input position."""
    rows = []
    for pos, rec in enumerate(pool):
        value = record_field(rec, "price_target")
        if is_valid_target(value):
            rows.append((pos, float(value), record_field(rec, "published_date")))

    dropped = len(pool) - len(rows)
    if dropped:
        logger.debug(f"Dropped {dropped} of {len(pool)} price targets "
                     f"without a finite price_target",
                     extra={"dropped": dropped, "kept": len(rows)})
    return pd.DataFrame(rows, columns=_FRAME_COLS)


def _rank(pool: list, frame: pd.DataFrame, top_n: int) -> list[RankedEntry]:
    top = frame.head(max(int(top_n), 0))
    return [RankedEntry(rank=rank, record=pool[pos])
            for rank, pos in enumerate(top["pos"].tolist(), start=1)]


# =========================================================================
# C. Selection
# =========================================================================
def select_price_targets(records: Optional[Iterable[Any]], mode: DisplayMode | str,
                         top_n: int = TOP_N) -> list[RankedEntry]:
    """Rank the top_n highest (HIGH) or lowest (LOW) price targets."""
    mode = DisplayMode(mode)
    pool = list(records) if records is not None else []
    frame = _valid_frame(pool)
    frame = frame.sort_values(["price_target", "pos"],
                              ascending=[mode is DisplayMode.LOW, True])
    return _rank(pool, frame, top_n)


def select_latest_price_targets(records: Optional[Iterable[Any]],
                                top_n: int = TOP_N) -> list[RankedEntry]:
    """Rank valid price targets newest first; unparsable dates go last."""
    pool = list(records) if records is not None else []
    frame = _valid_frame(pool)
    frame["published_ts"] = pd.Series(
        [comparable_timestamp(v) for v in frame["published_date"]],
        index=frame.index, dtype="datetime64[ns]",
    )
    frame = frame.sort_values(["published_ts", "pos"],
                              ascending=[False, True], na_position="last")
    return _rank(pool, frame, top_n)


def select_for_view(records: Optional[Iterable[Any]], mode: DisplayMode | str,
                    sort_mode: SortMode | str = SortMode.PRICE,
                    top_n: int = TOP_N) -> list[RankedEntry]:
    if SortMode(sort_mode) is SortMode.DATE:
        return select_latest_price_targets(records, top_n)
    return select_price_targets(records, mode, top_n)


# =========================================================================
# D. Aggregate statistics
# =========================================================================
def calculate_price_target_stats(records: Optional[Iterable[Any]]) -> Optional[PriceTargetStats]:
    """Average, median, high and low over finite, strictly positive targets.

    Returns None when no such target exists.
    """
    prices = np.array(
        [float(v) for v in (record_field(r, "price_target") for r in (records or []))
         if is_valid_target(v) and v > 0],
        dtype=float,
    )
    if prices.size == 0:
        return None
    return PriceTargetStats(
        average=float(prices.mean()),
        median=float(np.median(prices)),
        high=float(prices.max()),
        low=float(prices.min()),
        count=int(prices.size),
    )

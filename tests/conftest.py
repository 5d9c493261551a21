"""Shared fixtures for price target overlay tests."""

import sys
from pathlib import Path

import numpy as np
import pytest
import yaml

# Ensure project root is importable
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

FIRMS = [
    "Goldman Sachs", "Morgan Stanley", "JPMorgan", "Barclays", "UBS",
    "Citigroup", "Wells Fargo", "Deutsche Bank", "Jefferies", "Piper Sandler",
    "Mizuho", "Bernstein", "Evercore ISI", "Wedbush", "Needham",
]


def _generate_sample_targets(n: int = 15, seed: int = 42,
                             invalid_every: int = 0) -> list[dict]:
    """Sector-agnostic sample price targets, deterministic per seed.

    With ``invalid_every`` > 0 every k-th record gets an unusable
    price_target (None, NaN, inf or a numeric string, in rotation).
    """
    rng = np.random.default_rng(seed)
    bad_values = [None, float("nan"), float("inf"), "250"]
    out = []
    for i in range(n):
        price = round(float(rng.uniform(5, 600)), 2)
        day = int(rng.integers(1, 28))
        month = int(rng.integers(1, 13))
        rec = {
            "_id": f"pt-{seed}-{i:03d}",
            "symbol": "TSLA",
            "analyst_firm": FIRMS[i % len(FIRMS)],
            "price_target": price,
            "published_date": f"2024-{month:02d}-{day:02d}",
        }
        if invalid_every and i % invalid_every == 0:
            rec["price_target"] = bad_values[(i // invalid_every) % len(bad_values)]
        out.append(rec)
    return out


@pytest.fixture
def raw_cfg():
    """The production config.yaml as a plain dict."""
    with open(ROOT / "config.yaml") as f:
        return yaml.safe_load(f)


@pytest.fixture
def cfg():
    """The production config.yaml, validated."""
    from target_ranker import load_config
    return load_config()


@pytest.fixture
def sample_targets():
    """15 valid price targets."""
    return _generate_sample_targets(15, seed=42)


@pytest.fixture
def mixed_targets():
    """20 price targets, every third one unusable."""
    return _generate_sample_targets(20, seed=7, invalid_every=3)


@pytest.fixture
def scenario_targets():
    """Five targets with one duplicate value: [12, 45, 7, 45, 30]."""
    return [
        {"_id": "a", "analyst_firm": "Alpha", "price_target": 12, "published_date": "2024-01-05"},
        {"_id": "b", "analyst_firm": "Bravo", "price_target": 45, "published_date": "2024-02-10"},
        {"_id": "c", "analyst_firm": "Charlie", "price_target": 7, "published_date": "2024-03-15"},
        {"_id": "d", "analyst_firm": "Delta", "price_target": 45, "published_date": "2024-04-20"},
        {"_id": "e", "analyst_firm": "Echo", "price_target": 30, "published_date": "2024-05-25"},
    ]

#!/usr/bin/env python3
"""
Typed schemas for the analyst price target overlay.

Provides Pydantic models for the records the host application hands in,
the ranked entries the selection pipeline produces, the view model the
modal renders, and the validated config.yaml contents.
"""

import logging
from enum import Enum
from typing import Any, Callable, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DisplayMode(str, Enum):
    """Which end of the price target distribution to surface."""
    HIGH = "high"
    LOW = "low"


class SortMode(str, Enum):
    PRICE = "price"
    DATE = "date"


Theme = Literal["light", "dark"]


class PriceTargetRecord(BaseModel):
    """One analyst price target as supplied by the host application.

    ``price_target`` is Optional on purpose: the selection pipeline drops
    records whose target is missing or non-finite instead of rejecting
    them here.
    """
    id: str = Field("", alias="_id")
    symbol: Optional[str] = None
    analyst_firm: Optional[str] = ""
    analyst_name: Optional[str] = None
    price_target: Optional[float] = None
    rating: Optional[str] = None
    published_date: Optional[str] = None
    action: Optional[str] = None
    previous_target: Optional[float] = None
    updated_at: Optional[str] = None

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)


class RankedEntry(BaseModel):
    """A source record paired with its 1-based position in the output."""
    rank: int = Field(..., ge=1)
    record: Any

    model_config = ConfigDict(frozen=True)


class PriceTargetStats(BaseModel):
    average: float
    median: float
    high: float
    low: float
    count: int = Field(..., ge=1)


# =========================================================================
# Modal props and view model
# =========================================================================

class ModalProps(BaseModel):
    """Caller-owned inputs for one render of the price target modal."""
    is_open: bool = False
    on_close: Callable[[], Any]
    title: str = ""
    price_targets: Optional[Sequence[Any]] = None
    mode: DisplayMode = DisplayMode.HIGH
    sort_mode: SortMode = SortMode.PRICE
    theme: Optional[Theme] = None  # None -> config default

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ModalRow(BaseModel):
    key: str
    rank: int = Field(..., ge=1)
    rank_label: str
    firm: str
    price: str
    date: str

    model_config = ConfigDict(frozen=True)


class ModalView(BaseModel):
    """What a visible modal shows: header, then rows or the empty message."""
    title: str
    theme: Theme
    rows: tuple[ModalRow, ...] = ()
    empty_message: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.rows


# =========================================================================
# OverlayConfig: top-level config schema
# =========================================================================

class OverlayConfig(BaseModel):
    """Schema for validated config.yaml contents."""

    class DisplayConfig(BaseModel):
        top_n: int = Field(10, ge=1, le=50)
        title_suffix: str = "Price Targets"
        latest_title: str = "Latest Price Targets"
        empty_message: str = "No price targets available"
        invalid_date_label: str = "Invalid date"
        default_theme: Theme = "light"

        model_config = ConfigDict(frozen=True)

        @field_validator("title_suffix", "latest_title", "empty_message",
                         "invalid_date_label")
        @classmethod
        def label_not_blank(cls, v: str) -> str:
            if not v.strip():
                raise ValueError("Display labels must not be blank")
            return v

    class LoggingConfig(BaseModel):
        level: str = "INFO"
        json_format: bool = Field(False, alias="json")

        model_config = ConfigDict(frozen=True, populate_by_name=True)

        @field_validator("level")
        @classmethod
        def level_is_known(cls, v: str) -> str:
            name = v.upper()
            if not isinstance(logging.getLevelName(name), int):
                raise ValueError(f"Unknown logging level: {v}")
            return name

    display: DisplayConfig = DisplayConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = ConfigDict(frozen=True)

#!/usr/bin/env python3
"""
Logging setup for the price target overlay.

Every module logs under the ``price_targets`` namespace.  The host calls
configure_logging() once with the loaded OverlayConfig; output goes to
stdout either as structured JSON lines or as a short human-readable line.

Usage:
    cfg = load_config()
    log = configure_logging(cfg)
    log.info("Overlay ready", extra={"count": 12})
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from schemas import OverlayConfig

LOGGER_NAME = "price_targets"


class _JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "func": record.funcName,
            "msg": record.getMessage(),
        }
        # Merge any extra fields passed by the ranker
        for key in ("mode", "sort_mode", "dropped", "kept", "count"):
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val
        return json.dumps(entry, default=str)


def configure_logging(cfg: Optional[OverlayConfig] = None) -> logging.Logger:
    """Attach a single stdout handler to the ``price_targets`` logger."""
    cfg = cfg or OverlayConfig()
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(cfg.logging.level)
    log.propagate = False

    # Remove existing handlers to avoid duplicates on re-configure
    log.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if cfg.logging.json_format:
        handler.setFormatter(_JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S"))
    log.addHandler(handler)
    return log

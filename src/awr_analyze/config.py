"""Threshold configuration loading.

Thresholds can be tuned from a TOML file so alert limits change without
touching code. Keys may sit at the top level or under a ``[thresholds]``
table:

    wait_pct = 10.0
    io_latency_ms = 20.0
    row_lock_pct = 3.0
    gc_remote_pct = 2.0
    io_request_rate = 10000.0

Missing keys take their defaults. A missing or malformed file never
aborts a run: the defaults are used and a single warning is logged.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from awr_analyze.models import ThresholdSet

logger = logging.getLogger(__name__)


def _threshold_values(document: dict[str, Any]) -> dict[str, Any]:
    section = document.get("thresholds", document)
    if not isinstance(section, dict):
        raise TypeError("[thresholds] must be a table")
    values: dict[str, Any] = {}
    for key, value in section.items():
        if key in ThresholdSet.model_fields:
            values[key] = value
        elif key != "thresholds":
            logger.debug("Ignoring unknown threshold key %r", key)
    return values


def load_thresholds(path: Path | None = None) -> ThresholdSet:
    """Load thresholds from a TOML file, falling back to defaults on any problem."""
    if path is None:
        return ThresholdSet()

    try:
        with path.open("rb") as f:
            document = tomllib.load(f)
        thresholds = ThresholdSet.model_validate(_threshold_values(document))
    except FileNotFoundError:
        logger.warning("Threshold config %s not found; using default thresholds", path)
        return ThresholdSet()
    except (OSError, tomllib.TOMLDecodeError, TypeError, ValidationError) as e:
        logger.warning("Invalid threshold config %s (%s); using default thresholds", path, e)
        return ThresholdSet()

    logger.debug("Loaded thresholds from %s: %s", path, thresholds.model_dump())
    return thresholds

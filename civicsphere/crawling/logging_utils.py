"""
JSON event logging for the crawl pipeline.
"""

from __future__ import annotations

import json
import logging
from typing import Any


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """
    Log `event` with `fields` as one JSON line. Fields set to None are dropped.
    """

    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event}
    payload.update((key, value) for key, value in fields.items() if value is not None)
    logger.log(level, json.dumps(payload, default=str, sort_keys=True, separators=(",", ":")))

# -*- coding: utf-8 -*-
"""observability.py

Structured event logs for the journal API
-----------------------------------------

One line per event so hosted log search can filter on ``event``. Journals are
private: any field named after a reflection (gratitude / progress / challenges /
goals) or a calendar note is replaced with ``[redacted]`` before the line is
built, at any nesting depth. Routes can pass a whole entry dict and only its
shape reaches the log.

Env
- BLOOM_LOG_JSON=true/false (default true). false writes ``event key=value ...``.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from bloom.services.analysis_engine.journal import REFLECTION_FIELDS

BLOOM_LOG_JSON = (os.getenv("BLOOM_LOG_JSON", "true").strip().lower() != "false")

REDACTED = "[redacted]"
PRIVATE_FIELDS = frozenset(REFLECTION_FIELDS) | {"notes"}

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def scrub(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of ``fields`` with private text replaced; lists and nested dicts are walked."""
    return {k: (REDACTED if k in PRIVATE_FIELDS else _scrub_value(v)) for k, v in fields.items()}


def _scrub_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return scrub(value)
    if isinstance(value, (list, tuple)):
        return [_scrub_value(v) for v in value]
    return value


def format_event(event: str, fields: Mapping[str, Any]) -> str:
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "event": event,
    }
    payload.update(scrub(fields))
    if BLOOM_LOG_JSON:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=repr)
    rest = " ".join(f"{k}={v}" for k, v in payload.items() if k != "event")
    return f"{event} {rest}"


def log_event(logger: logging.Logger, event: str, *, level: str = "info", **fields: Any) -> None:
    """Write a structured event log.

    - level: debug|info|warning|error (anything else logs at info)
    - event: stable identifier (e.g., journal_entry_saved)
    """
    logger.log(_LEVELS.get(level, logging.INFO), format_event(event, fields))

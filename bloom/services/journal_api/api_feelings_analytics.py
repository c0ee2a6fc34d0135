# -*- coding: utf-8 -*-
"""Feelings Analytics API
------------------------
- GET  /feelings/taxonomy  : feelings wheel reference data
- POST /feelings/analytics : snapshot over records supplied by the client

Records must arrive oldest -> newest. Unknown core feelings are skipped by the
engine rather than rejected, so a stale client never gets an error card.
"""

from __future__ import annotations

import logging
import os
from datetime import tzinfo
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import FastAPI
from pydantic import BaseModel, Field

from bloom.services.analysis_engine import (
    EngineConfig,
    FeelingRecord,
    FeelingSelection,
    FeelingsAnalytics,
    FeelingsAnalyticsEngine,
)
from bloom.services.journal_api.observability import log_event

logger = logging.getLogger("feelings_analytics")

# ---------- env ----------

try:
    RECENT_WINDOW = int(os.getenv("BLOOM_RECENT_WINDOW", "5"))
except ValueError:
    RECENT_WINDOW = 5
try:
    TREND_THRESHOLD = float(os.getenv("BLOOM_TREND_THRESHOLD", "0.15"))
except ValueError:
    TREND_THRESHOLD = 0.15
TIMEZONE_NAME = (os.getenv("BLOOM_TIMEZONE") or "").strip()


def resolve_timezone(name: str = TIMEZONE_NAME) -> Optional[tzinfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("unknown BLOOM_TIMEZONE %r; using timestamps as recorded", name)
        return None


def build_engine_from_env() -> FeelingsAnalyticsEngine:
    config = EngineConfig(
        recent_window=max(1, RECENT_WINDOW),
        trend_threshold=max(0.0, TREND_THRESHOLD),
        tz=resolve_timezone(),
    )
    return FeelingsAnalyticsEngine(config=config, cache=True)


# ---------- Models ----------

class FeelingIn(BaseModel):
    core: str = Field(..., min_length=1, description="core feeling id (e.g. joy)")
    specific: str = Field(default="", description="specific feeling id under the core (e.g. proud)")


class FeelingRecordIn(FeelingIn):
    timestamp: Optional[str] = Field(default=None, description="ISO-8601 creation time of the entry")


class AnalyticsRequest(BaseModel):
    records: List[FeelingRecordIn] = Field(default_factory=list, description="oldest -> newest")


class FeelingsAnalyticsResponse(BaseModel):
    total_entries: int
    core_distribution: Dict[str, int]
    weekly_patterns: Dict[str, int]
    recent_trend: str
    recent_mood_score: float
    emotional_diversity: float
    dominant_feeling: Optional[str] = None
    insights: List[str] = Field(default_factory=list)


def to_response(snapshot: FeelingsAnalytics) -> FeelingsAnalyticsResponse:
    return FeelingsAnalyticsResponse(**snapshot.to_dict())


def records_from_request(items: List[FeelingRecordIn]) -> List[FeelingRecord]:
    return [
        FeelingRecord(
            selection=FeelingSelection(core_id=i.core.strip(), specific_id=(i.specific or "").strip()),
            timestamp=i.timestamp,
        )
        for i in items
    ]


def register_feelings_routes(app: FastAPI, engine: FeelingsAnalyticsEngine) -> None:
    """Register /feelings/* endpoints."""

    @app.get("/feelings/taxonomy")
    async def feelings_taxonomy() -> Dict[str, Any]:
        return engine.taxonomy.to_dict()

    @app.post("/feelings/analytics", response_model=FeelingsAnalyticsResponse)
    async def feelings_analytics(req: AnalyticsRequest) -> FeelingsAnalyticsResponse:
        records = records_from_request(req.records)
        snapshot = engine.analyze_feelings(records)
        log_event(
            logger,
            "feelings_analytics_computed",
            source="request",
            n_records=len(records),
            n_counted=snapshot.total_entries,
            trend=snapshot.recent_trend,
        )
        return to_response(snapshot)

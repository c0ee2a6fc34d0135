# -*- coding: utf-8 -*-
"""Calendar API
--------------
- GET    /calendar/entries        : the HRT calendar map {YYYY-MM-DD: {type, notes, timestamp}}
- PUT    /calendar/entries/{day}  : mark a day as a dose ("hrt") or a milestone
- DELETE /calendar/entries/{day}  : clear a day
- GET    /calendar/streak         : consecutive dose days ending today or yesterday

One entry per day, stored under ``hrtEntries`` like the app does. A PUT on a day
that already has an entry replaces it.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from bloom.services.analysis_engine import FeelingsAnalyticsEngine, count_hrt_streak
from bloom.services.journal_api.api_journal import HRT_KEY, _now_iso_z, _today
from bloom.services.journal_api.kv_store import KeyValueStore, KeyValueStoreError
from bloom.services.journal_api.observability import log_event

logger = logging.getLogger("calendar_api")


class CalendarEntryIn(BaseModel):
    type: Literal["hrt", "milestone"]
    notes: str = ""


class CalendarEntryOut(BaseModel):
    type: Literal["hrt", "milestone"]
    notes: str = ""
    timestamp: str = Field(..., description="ISO-8601, when the day was marked")


class StreakResponse(BaseModel):
    streak_days: int
    as_of: str = Field(..., description="YYYY-MM-DD")


def _parse_day(day: str) -> date:
    try:
        return date.fromisoformat(day)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Not a YYYY-MM-DD date: {day}")


async def load_hrt_entries(store: KeyValueStore) -> Dict[str, Any]:
    try:
        raw = await store.get_item(HRT_KEY)
    except Exception as exc:
        logger.warning("hrt entries read failed: %s", exc)
        return {}
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("stored hrt entries are not valid JSON: %s", exc)
        return {}
    return data if isinstance(data, dict) else {}


async def _save_hrt_entries(store: KeyValueStore, hrt: Dict[str, Any]) -> None:
    try:
        await store.set_item(HRT_KEY, json.dumps(hrt, ensure_ascii=False))
    except KeyValueStoreError as exc:
        log_event(logger, "calendar_save_failed", level="error", store=store.name, err=str(exc))
        raise HTTPException(status_code=503, detail="Could not save calendar entries")


def _entries_out(hrt: Dict[str, Any]) -> Dict[str, CalendarEntryOut]:
    out: Dict[str, CalendarEntryOut] = {}
    for key in sorted(hrt):
        item = hrt[key]
        if not isinstance(item, dict) or item.get("type") not in ("hrt", "milestone"):
            logger.warning("skipping malformed calendar entry for %r", key)
            continue
        out[key] = CalendarEntryOut(
            type=item["type"],
            notes=str(item.get("notes") or ""),
            timestamp=str(item.get("timestamp") or ""),
        )
    return out


def register_calendar_routes(app: FastAPI, store: KeyValueStore, engine: FeelingsAnalyticsEngine) -> None:
    """Register /calendar/* endpoints."""

    tz = engine.config.tz

    @app.get("/calendar/entries", response_model=Dict[str, CalendarEntryOut])
    async def list_calendar_entries() -> Dict[str, CalendarEntryOut]:
        return _entries_out(await load_hrt_entries(store))

    @app.put("/calendar/entries/{day}", response_model=CalendarEntryOut)
    async def put_calendar_entry(day: str, req: CalendarEntryIn) -> CalendarEntryOut:
        key = _parse_day(day).isoformat()
        hrt = await load_hrt_entries(store)
        item = {"type": req.type, "notes": req.notes, "timestamp": _now_iso_z()}
        hrt[key] = item
        await _save_hrt_entries(store, hrt)
        log_event(logger, "calendar_entry_saved", store=store.name, kind=req.type, n_days=len(hrt))
        return CalendarEntryOut(**item)

    @app.delete("/calendar/entries/{day}", status_code=204)
    async def delete_calendar_entry(day: str) -> None:
        key = _parse_day(day).isoformat()
        hrt = await load_hrt_entries(store)
        if key not in hrt:
            raise HTTPException(status_code=404, detail="Calendar entry not found")
        del hrt[key]
        await _save_hrt_entries(store, hrt)
        log_event(logger, "calendar_entry_deleted", store=store.name, n_days=len(hrt))

    @app.get("/calendar/streak", response_model=StreakResponse)
    async def calendar_streak() -> StreakResponse:
        today = _today(tz)
        hrt = await load_hrt_entries(store)
        return StreakResponse(streak_days=count_hrt_streak(hrt, today), as_of=today.isoformat())

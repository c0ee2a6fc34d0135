# -*- coding: utf-8 -*-
"""Journal API
-------------
- GET    /journal/entries             : stored entries, newest first
- POST   /journal/entries             : add a reflection
- DELETE /journal/entries/{entry_id}  : remove one reflection
- GET    /journal/analytics           : entry stats + feelings analytics

Storage keys match the app (``journalEntries``, ``hrtEntries``); values are
JSON strings. Reads never fail the request: an unreadable store renders as an
empty journal. Writes that do not go through answer 503.
"""

from __future__ import annotations

import logging
import time
from datetime import date, datetime, timezone, tzinfo
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from bloom.services.analysis_engine import (
    EntryStats,
    FeelingSelection,
    FeelingsAnalyticsEngine,
    JournalEntry,
    build_entry_stats,
    entries_from_json,
    entries_to_json,
    has_reflection,
    records_from_entries,
)
from bloom.services.journal_api.api_feelings_analytics import (
    FeelingIn,
    FeelingsAnalyticsResponse,
    to_response,
)
from bloom.services.journal_api.kv_store import KeyValueStore, KeyValueStoreError
from bloom.services.journal_api.observability import log_event

logger = logging.getLogger("journal_api")

JOURNAL_KEY = "journalEntries"
HRT_KEY = "hrtEntries"


# ---------- Models ----------

class JournalEntryCreate(BaseModel):
    mood: int = Field(default=5, ge=1, le=10, description="1..10")
    gratitude: str = ""
    progress: str = ""
    challenges: str = ""
    goals: str = ""
    feeling: Optional[FeelingIn] = None


class JournalEntryOut(BaseModel):
    id: str
    date: str
    mood: Optional[int] = None
    gratitude: str = ""
    progress: str = ""
    challenges: str = ""
    goals: str = ""
    feeling: Optional[FeelingIn] = None


class EntryStatsOut(BaseModel):
    total_entries: int
    average_mood: Optional[float] = None
    streak_days: int


class JournalAnalyticsResponse(BaseModel):
    stats: EntryStatsOut
    analytics: FeelingsAnalyticsResponse


def _entry_out(e: JournalEntry) -> JournalEntryOut:
    return JournalEntryOut(**e.to_dict())


def _stats_out(s: EntryStats) -> EntryStatsOut:
    return EntryStatsOut(**s.to_dict())


def _now_iso_z() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _today(tz: Optional[tzinfo]) -> date:
    return datetime.now(tz).date() if tz is not None else datetime.now().date()


def _new_entry_id(existing: List[JournalEntry]) -> str:
    taken = {e.id for e in existing}
    n = int(time.time() * 1000)
    while str(n) in taken:
        n += 1
    return str(n)


async def load_entries(store: KeyValueStore) -> List[JournalEntry]:
    try:
        raw = await store.get_item(JOURNAL_KEY)
    except Exception as exc:
        logger.warning("journal entries read failed: %s", exc)
        return []
    return entries_from_json(raw)


async def _save_entries(store: KeyValueStore, entries: List[JournalEntry]) -> None:
    try:
        await store.set_item(JOURNAL_KEY, entries_to_json(entries))
    except KeyValueStoreError as exc:
        log_event(logger, "journal_save_failed", level="error", store=store.name, err=str(exc))
        raise HTTPException(status_code=503, detail="Could not save journal entries")


def register_journal_routes(app: FastAPI, store: KeyValueStore, engine: FeelingsAnalyticsEngine) -> None:
    """Register /journal/* endpoints."""

    tz = engine.config.tz

    @app.get("/journal/entries", response_model=List[JournalEntryOut])
    async def list_entries() -> List[JournalEntryOut]:
        entries = await load_entries(store)
        return [_entry_out(e) for e in entries]

    @app.post("/journal/entries", response_model=JournalEntryOut, status_code=201)
    async def add_entry(req: JournalEntryCreate) -> JournalEntryOut:
        fields = {"gratitude": req.gratitude, "progress": req.progress,
                  "challenges": req.challenges, "goals": req.goals}
        if not has_reflection(fields):
            raise HTTPException(status_code=400, detail="Please write at least one reflection")

        feeling = None
        if req.feeling is not None:
            core_id = req.feeling.core.strip()
            if engine.taxonomy.core(core_id) is None:
                raise HTTPException(status_code=422, detail=f"Unknown core feeling: {core_id}")
            feeling = FeelingSelection(core_id=core_id, specific_id=(req.feeling.specific or "").strip())

        entries = await load_entries(store)
        entry = JournalEntry(
            id=_new_entry_id(entries),
            date=_now_iso_z(),
            mood=req.mood,
            feeling=feeling,
            **fields,
        )
        await _save_entries(store, [entry] + entries)
        log_event(logger, "journal_entry_saved", store=store.name, n_entries=len(entries) + 1,
                  has_feeling=feeling is not None)
        return _entry_out(entry)

    @app.delete("/journal/entries/{entry_id}", status_code=204)
    async def delete_entry(entry_id: str) -> None:
        entries = await load_entries(store)
        remaining = [e for e in entries if e.id != entry_id]
        if len(remaining) == len(entries):
            raise HTTPException(status_code=404, detail="Journal entry not found")
        await _save_entries(store, remaining)
        log_event(logger, "journal_entry_deleted", store=store.name, n_entries=len(remaining))

    @app.get("/journal/analytics", response_model=JournalAnalyticsResponse)
    async def journal_analytics() -> JournalAnalyticsResponse:
        entries = await load_entries(store)
        stats = build_entry_stats(entries, today=_today(tz), tz=tz)
        records = records_from_entries(entries)
        snapshot = engine.analyze_feelings(records)
        log_event(
            logger,
            "feelings_analytics_computed",
            source="journal",
            n_entries=len(entries),
            n_counted=snapshot.total_entries,
            trend=snapshot.recent_trend,
        )
        return JournalAnalyticsResponse(stats=_stats_out(stats), analytics=to_response(snapshot))


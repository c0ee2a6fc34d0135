from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
from datetime import date, timedelta, tzinfo
import json
import logging
from .models import JournalEntry, FeelingSelection, FeelingRecord, EntryStats
from .feelings import parse_timestamp

# Journal entries as the app persists them: a JSON list, newest first.
# Policy:
# - Malformed items are skipped (logged), never raised. The screen must always render.
# - Reflection text is never logged.

logger = logging.getLogger("journal")

REFLECTION_FIELDS = ("gratitude", "progress", "challenges", "goals")
MOOD_MIN, MOOD_MAX = 1, 10


def _mood(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        m = int(value)
    except (TypeError, ValueError):
        return None
    if m != value and not isinstance(value, str):
        return None
    return m if MOOD_MIN <= m <= MOOD_MAX else None


def _feeling(value: Any) -> Optional[FeelingSelection]:
    if not isinstance(value, Mapping):
        return None
    core = value.get("core")
    specific = value.get("specific")
    if not isinstance(core, str) or not core.strip():
        return None
    if not isinstance(specific, str):
        specific = ""
    return FeelingSelection(core_id=core.strip(), specific_id=specific.strip())


def entry_from_dict(raw: Any) -> Optional[JournalEntry]:
    if not isinstance(raw, Mapping):
        return None
    entry_id = raw.get("id")
    date_s = raw.get("date")
    if entry_id is None or str(entry_id).strip() == "":
        return None
    if parse_timestamp(date_s) is None:
        return None
    texts = {f: (raw.get(f) if isinstance(raw.get(f), str) else "") for f in REFLECTION_FIELDS}
    return JournalEntry(
        id=str(entry_id),
        date=str(date_s),
        mood=_mood(raw.get("mood")),
        feeling=_feeling(raw.get("feeling")),
        **texts,
    )


def entries_from_json(payload: Union[str, bytes, None, List[Any]]) -> List[JournalEntry]:
    if payload is None:
        return []
    if isinstance(payload, (str, bytes)):
        if not payload.strip():
            return []
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            logger.warning("stored journal entries are not valid JSON: %s", exc)
            return []
    if not isinstance(payload, list):
        logger.warning("stored journal entries are not a list: %s", type(payload).__name__)
        return []
    out: List[JournalEntry] = []
    skipped = 0
    for item in payload:
        e = entry_from_dict(item)
        if e is None:
            skipped += 1
            continue
        out.append(e)
    if skipped:
        logger.warning("skipped %d malformed journal entries", skipped)
    return out


def entries_to_json(entries: Iterable[JournalEntry]) -> str:
    return json.dumps([e.to_dict() for e in entries], ensure_ascii=False)


def has_reflection(fields: Mapping[str, Any]) -> bool:
    return any(isinstance(fields.get(f), str) and fields.get(f).strip() for f in REFLECTION_FIELDS)


def records_from_entries(entries: Iterable[JournalEntry]) -> List[FeelingRecord]:
    """Entries carrying a feeling -> engine records, oldest first."""
    dated = []
    for i, e in enumerate(entries):
        if e.feeling is None:
            continue
        dt = parse_timestamp(e.date)
        # naive and aware datetimes don't compare; order on UTC epoch when aware
        key = dt.timestamp() if dt is not None else float("inf")
        dated.append((key, i, FeelingRecord(selection=e.feeling, timestamp=e.date)))
    dated.sort(key=lambda t: (t[0], t[1]))
    return [r for _, _, r in dated]


# ---------- streaks ----------

def consecutive_day_streak(days: Iterable[date], today: date) -> int:
    """Consecutive days ending today, or yesterday when today has nothing yet."""
    present = set(days)
    if today in present:
        cur = today
    elif today - timedelta(days=1) in present:
        cur = today - timedelta(days=1)
    else:
        return 0
    streak = 0
    while cur in present:
        streak += 1
        cur -= timedelta(days=1)
    return streak


def _local_day(ts: str, tz: Optional[tzinfo]) -> Optional[date]:
    dt = parse_timestamp(ts)
    if dt is None:
        return None
    if tz is not None and dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return dt.date()


def build_entry_stats(entries: List[JournalEntry], today: date, tz: Optional[tzinfo] = None) -> EntryStats:
    moods = [e.mood for e in entries if e.mood is not None]
    avg = round(sum(moods) / len(moods), 1) if moods else None
    days = [d for d in (_local_day(e.date, tz) for e in entries) if d is not None]
    return EntryStats(
        total_entries=len(entries),
        average_mood=avg,
        streak_days=consecutive_day_streak(days, today),
    )


def count_hrt_streak(hrt_entries: Mapping[str, Any], today: date) -> int:
    """Streak over the calendar map {YYYY-MM-DD: {type, notes, timestamp}}; milestones don't count."""
    days = []
    for key, item in (hrt_entries or {}).items():
        if not isinstance(item, Mapping) or item.get("type") != "hrt":
            continue
        try:
            days.append(date.fromisoformat(str(key)))
        except ValueError:
            continue
    return consecutive_day_streak(days, today)

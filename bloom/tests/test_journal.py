from __future__ import annotations

import json
from datetime import date

from bloom.services.analysis_engine import (
    FeelingSelection,
    JournalEntry,
    build_entry_stats,
    count_hrt_streak,
    entries_from_json,
    entries_to_json,
    has_reflection,
    records_from_entries,
)


def _raw(entry_id, day, mood=5, feeling=None, **texts):
    d = {"id": entry_id, "date": day, "mood": mood, "gratitude": "", "progress": "",
         "challenges": "", "goals": ""}
    d.update(texts)
    if feeling is not None:
        d["feeling"] = feeling
    return d


def test_entries_from_json_skips_malformed_items():
    stored = json.dumps([
        _raw("3", "2025-10-06T10:00:00.000Z", gratitude="sun", feeling={"core": "joy", "specific": "happy"}),
        {"date": "2025-10-05T10:00:00Z"},
        _raw("2", "yesterday-ish"),
        "oops",
        _raw("1", "2025-10-04T10:00:00Z", mood=3),
    ])
    entries = entries_from_json(stored)
    assert [e.id for e in entries] == ["3", "1"]
    assert entries[0].feeling == FeelingSelection("joy", "happy")
    assert entries[0].gratitude == "sun"
    assert entries[1].feeling is None


def test_entries_from_json_tolerates_bad_payloads():
    assert entries_from_json(None) == []
    assert entries_from_json("") == []
    assert entries_from_json("{not json") == []
    assert entries_from_json('{"id": "1"}') == []


def test_mood_values_are_checked():
    entries = entries_from_json([
        _raw("a", "2025-10-06T10:00:00Z", mood="7"),
        _raw("b", "2025-10-06T10:00:00Z", mood=11),
        _raw("c", "2025-10-06T10:00:00Z", mood=5.5),
        _raw("d", "2025-10-06T10:00:00Z", mood=True),
        _raw("e", "2025-10-06T10:00:00Z", mood=None),
    ])
    assert [e.mood for e in entries] == [7, None, None, None, None]


def test_entries_to_json_keeps_the_stored_shape():
    entry = JournalEntry(id="1", date="2025-10-06T10:00:00Z", mood=8, progress="walked",
                         feeling=FeelingSelection("peace", "calm"))
    data = json.loads(entries_to_json([entry]))
    assert data == [{
        "id": "1", "date": "2025-10-06T10:00:00Z", "mood": 8, "gratitude": "", "progress": "walked",
        "challenges": "", "goals": "", "feeling": {"core": "peace", "specific": "calm"},
    }]
    assert entries_from_json(json.dumps(data))[0] == entry


def test_records_are_oldest_first_and_need_a_feeling():
    entries = entries_from_json([
        _raw("3", "2025-10-06T10:00:00Z", feeling={"core": "joy", "specific": "proud"}),
        _raw("2", "2025-10-05T10:00:00Z"),
        _raw("1", "2025-10-04T10:00:00Z", feeling={"core": "sadness", "specific": "tired"}),
    ])
    records = records_from_entries(entries)
    assert [r.selection.core_id for r in records] == ["sadness", "joy"]
    assert records[0].timestamp == "2025-10-04T10:00:00Z"


def test_has_reflection():
    assert not has_reflection({"gratitude": "", "progress": "  "})
    assert has_reflection({"goals": "rest more"})


def test_entry_stats_average_and_streak():
    entries = entries_from_json([
        _raw("4", "2025-10-06T20:00:00", mood=8),
        _raw("3", "2025-10-06T08:00:00", mood=7),
        _raw("2", "2025-10-05T08:00:00", mood=4),
        _raw("1", "2025-10-04T08:00:00", mood=None),
        _raw("0", "2025-10-01T08:00:00", mood=6),
    ])
    stats = build_entry_stats(entries, today=date(2025, 10, 6))
    assert stats.total_entries == 5
    assert stats.average_mood == 6.2
    assert stats.streak_days == 3
    assert build_entry_stats(entries, today=date(2025, 10, 7)).streak_days == 3
    assert build_entry_stats(entries, today=date(2025, 10, 8)).streak_days == 0


def test_entry_stats_empty():
    stats = build_entry_stats([], today=date(2025, 10, 6))
    assert stats.to_dict() == {"total_entries": 0, "average_mood": None, "streak_days": 0}


def test_hrt_streak_ignores_milestones():
    hrt = {
        "2025-10-06": {"type": "hrt", "notes": "", "timestamp": "2025-10-06T09:00:00Z"},
        "2025-10-05": {"type": "hrt", "notes": "", "timestamp": "2025-10-05T09:00:00Z"},
        "2025-10-04": {"type": "milestone", "notes": "name change", "timestamp": "2025-10-04T09:00:00Z"},
        "2025-10-03": {"type": "hrt", "notes": "", "timestamp": "2025-10-03T09:00:00Z"},
        "bad-key": {"type": "hrt"},
    }
    assert count_hrt_streak(hrt, date(2025, 10, 6)) == 2
    assert count_hrt_streak(hrt, date(2025, 10, 7)) == 2
    assert count_hrt_streak(hrt, date(2025, 10, 9)) == 0
    assert count_hrt_streak({}, date(2025, 10, 6)) == 0

from __future__ import annotations

from datetime import timedelta, timezone

import pytest

from bloom.services.analysis_engine import (
    DEFAULT_TAXONOMY,
    EngineConfig,
    FeelingRecord,
    FeelingSelection,
    FeelingsAnalyticsEngine,
    analyze_feelings,
    get_emotional_diversity,
    get_insights,
    get_recent_mood_score,
)

N = DEFAULT_TAXONOMY.size

SPECIFIC = {
    "joy": "happy",
    "love": "grateful",
    "peace": "calm",
    "surprise": "curious",
    "sadness": "lonely",
    "fear": "anxious",
    "anger": "frustrated",
}


def rec(core: str, specific: str | None = None, ts: str | None = None) -> FeelingRecord:
    return FeelingRecord(
        selection=FeelingSelection(core_id=core, specific_id=specific or SPECIFIC.get(core, "")),
        timestamp=ts,
    )


def test_empty_input_gives_defaults():
    snap = analyze_feelings([])
    assert snap.total_entries == 0
    assert snap.core_distribution == {}
    assert snap.weekly_patterns == {}
    assert snap.recent_trend == "stable"
    assert snap.recent_mood_score == 5.0
    assert snap.emotional_diversity == 0.0
    assert snap.dominant_feeling is None
    assert snap.insights == []
    assert get_recent_mood_score([]) == 5
    assert get_emotional_diversity([]) == 0


def test_all_joy_scenario():
    records = [rec("joy") for _ in range(5)]
    snap = analyze_feelings(records)
    assert snap.core_distribution == {"joy": 5}
    assert snap.emotional_diversity == pytest.approx(1 / N)
    assert snap.dominant_feeling == "joy"
    assert snap.insights
    assert "joy" in snap.insights[0].lower()


@pytest.mark.parametrize("half", [1, 2, 3, 5, 8, 10, 15, 50])
def test_sadness_then_joy_is_improving(half):
    records = [rec("sadness")] * half + [rec("joy")] * half
    assert analyze_feelings(records).recent_trend == "improving"


def test_joy_then_sadness_is_declining():
    records = [rec("joy")] * 4 + [rec("sadness")] * 4
    assert analyze_feelings(records).recent_trend == "declining"


def test_small_valence_difference_is_stable():
    # love (0.9) after joy (1.0) stays inside the threshold
    records = [rec("joy")] * 5 + [rec("love")] * 5
    assert analyze_feelings(records).recent_trend == "stable"


def test_older_window_covers_all_earlier_records():
    # the five peace records just before the recent window are not the whole story
    records = [rec("sadness")] * 10 + [rec("peace")] * 10
    assert analyze_feelings(records).recent_trend == "improving"


def test_single_entry():
    snap = analyze_feelings([rec("fear")])
    assert snap.recent_trend == "stable"
    assert snap.emotional_diversity == pytest.approx(1 / N)
    assert get_insights(snap) == []
    assert snap.insights == []


def test_two_entries_have_no_insights():
    snap = analyze_feelings([rec("joy"), rec("peace")])
    assert snap.total_entries == 2
    assert snap.insights == []


def test_weekly_patterns_count_only_parseable_timestamps():
    records = [
        rec("joy", ts="2025-10-06T09:00:00+09:00"),  # Monday
        rec("sadness", ts="2025-10-06T21:00:00"),  # Monday, naive
        rec("peace", ts="2025-10-07T08:00:00.000Z"),  # Tuesday
        rec("anger"),
        rec("fear", ts="not a date"),
    ]
    snap = analyze_feelings(records)
    assert snap.weekly_patterns == {"Monday": 2, "Tuesday": 1}
    assert sum(snap.weekly_patterns.values()) == 3
    assert sum(snap.core_distribution.values()) == len(records)


def test_weekly_patterns_follow_configured_timezone():
    engine = FeelingsAnalyticsEngine(config=EngineConfig(tz=timezone(timedelta(hours=9))))
    snap = engine.analyze_feelings([rec("joy", ts="2025-10-06T23:30:00+00:00")])
    assert snap.weekly_patterns == {"Tuesday": 1}


def test_recent_mood_score_uses_recent_window():
    records = [rec("sadness")] + [rec("joy")] * 5
    assert get_recent_mood_score(records) == 10.0
    assert get_recent_mood_score([rec("sadness")] * 3) == 1.0


@pytest.mark.parametrize("cores", [
    ["joy"], ["sadness", "anger"], ["fear", "peace", "surprise", "love", "joy", "sadness", "anger"],
])
def test_mood_score_and_diversity_ranges(cores):
    records = [rec(c) for c in cores]
    assert 0.0 <= get_recent_mood_score(records) <= 10.0
    assert 0.0 <= get_emotional_diversity(records) <= 1.0


def test_diversity_grows_with_distinct_feelings():
    order = DEFAULT_TAXONOMY.core_ids
    length = len(order)
    previous = -1.0
    for k in range(1, length + 1):
        used = order[:k]
        records = [rec(used[i % k]) for i in range(length)]
        d = get_emotional_diversity(records)
        assert d >= previous
        previous = d
    assert previous == 1.0


def test_unknown_core_is_excluded_and_mismatched_specific_is_trusted():
    records = [rec("joy"), rec("bogus", "happy"), rec("joy", "lonely"), rec("sadness")]
    snap = analyze_feelings(records)
    assert snap.core_distribution == {"joy": 2, "sadness": 1}
    assert snap.total_entries == 3
    assert sum(snap.core_distribution.values()) == snap.total_entries


def test_distribution_follows_taxonomy_order():
    snap = analyze_feelings([rec("anger"), rec("joy"), rec("sadness"), rec("anger")])
    assert list(snap.core_distribution) == ["joy", "sadness", "anger"]
    assert snap.dominant_feeling == "anger"


def test_analyze_is_idempotent_and_does_not_mutate_input():
    records = [rec("joy", ts="2025-10-06T09:00:00"), rec("sadness"), rec("peace"), rec("fear")]
    before = list(records)
    first = analyze_feelings(records)
    second = analyze_feelings(records)
    assert first.to_dict() == second.to_dict()
    assert records == before


def test_cache_returns_equal_snapshot_and_misses_on_change():
    engine = FeelingsAnalyticsEngine(cache=True)
    records = [rec("joy"), rec("joy"), rec("sadness")]
    first = engine.analyze_feelings(records)
    first.core_distribution["joy"] = 99
    again = engine.analyze_feelings(list(records))
    assert again.core_distribution == {"joy": 2, "sadness": 1}

    changed = engine.analyze_feelings(records + [rec("anger")])
    assert changed.core_distribution == {"joy": 2, "sadness": 1, "anger": 1}


def test_injected_config_changes_window_and_threshold():
    engine = FeelingsAnalyticsEngine(config=EngineConfig(recent_window=1, trend_threshold=0.0))
    # the last record against everything before it
    assert engine.analyze_feelings([rec("joy"), rec("sadness"), rec("joy")]).recent_trend == "improving"
    assert engine.get_recent_mood_score([rec("joy"), rec("sadness")]) == 1.0


def test_insights_are_deterministic_and_mention_trend():
    records = [rec("sadness", ts="2025-10-06T09:00:00")] * 3 + [rec("joy", ts="2025-10-07T09:00:00")] * 3
    snap = analyze_feelings(records)
    assert snap.insights == get_insights(snap)
    assert any("improvement" in s for s in snap.insights)
    assert snap.insights[-1] == "You reflect most often on Mondays."

from __future__ import annotations
from typing import Dict, Iterator, Optional
from .models import FeelingsAnalytics, WEEKDAYS, TREND_IMPROVING, TREND_DECLINING
from .taxonomy import FeelingTaxonomy

# Narrator for the journal summary cards. Plain, gentle, no diagnosis.

_TREND_TEXT = {
    TREND_IMPROVING: "You've shown improvement over your last entries. Keep honoring what's helping.",
    TREND_DECLINING: "Your recent entries have felt heavier than the ones before. Be gentle with yourself.",
}
_STEADY_TEXT = "Your feelings have been fairly steady across your recent entries."


def _busiest_day(weekly: Dict[str, int]) -> Optional[str]:
    best = None
    for day in WEEKDAYS:
        n = weekly.get(day, 0)
        if n > 0 and (best is None or n > weekly[best]):
            best = day
    return best


def iter_insights(analytics: FeelingsAnalytics, taxonomy: FeelingTaxonomy) -> Iterator[str]:
    """Yield observations for a snapshot, most important first."""
    if analytics.dominant_feeling:
        name = taxonomy.name_of(analytics.dominant_feeling)
        yield f"Your most common feeling recently has been {name.lower()}."

    yield _TREND_TEXT.get(analytics.recent_trend, _STEADY_TEXT)

    distinct = len(analytics.core_distribution)
    if distinct == 1:
        yield "Your entries have centered on a single feeling. Naming the smaller ones can help too."
    elif analytics.emotional_diversity >= 0.5:
        yield "You're noticing a wide range of feelings. That kind of awareness is a strength."

    if analytics.recent_mood_score >= 7.5:
        yield "Your most recent entries lean toward lighter feelings."
    elif analytics.recent_mood_score <= 2.5:
        yield "Your most recent entries have been heavy. Reaching out to someone you trust can help."

    day = _busiest_day(analytics.weekly_patterns)
    if day:
        yield f"You reflect most often on {day}s."

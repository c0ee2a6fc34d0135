from __future__ import annotations
from typing import List, Dict, Optional, Sequence, Tuple
from datetime import datetime
import logging
import threading
from .models import (
    FeelingRecord, FeelingsAnalytics, EngineConfig, WEEKDAYS,
    TREND_IMPROVING, TREND_DECLINING, TREND_STABLE,
)
from .taxonomy import FeelingTaxonomy, DEFAULT_TAXONOMY
from .insights import iter_insights

logger = logging.getLogger("feelings_engine")


def parse_timestamp(ts: Optional[str]) -> Optional[datetime]:
    """ISO-8601 -> datetime, or None when missing/unparseable."""
    if not ts:
        return None
    s = str(ts).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


class FeelingsAnalyticsEngine:
    """Aggregates a history of feeling selections into a snapshot.

    Records are read oldest -> newest. Records whose core feeling is unknown to
    the taxonomy are left out of every tally; a specific feeling filed under the
    wrong core is ignored and the core id is trusted.
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 taxonomy: Optional[FeelingTaxonomy] = None, cache: bool = False):
        self.config = config or EngineConfig()
        self.taxonomy = taxonomy or DEFAULT_TAXONOMY
        self._cache_enabled = cache
        self._cache_key: Optional[Tuple[FeelingRecord, ...]] = None
        self._cache_value: Optional[FeelingsAnalytics] = None
        self._cache_lock = threading.Lock()

    # ---------- input hygiene ----------

    def _usable(self, records: Sequence[FeelingRecord]) -> List[FeelingRecord]:
        out = []
        for r in records:
            sel = r.selection
            if self.taxonomy.core(sel.core_id) is None:
                logger.debug("skipping record with unknown core feeling %r", sel.core_id)
                continue
            if not self.taxonomy.is_well_formed(sel):
                logger.debug("specific feeling %r is not under %r; counting core only",
                             sel.specific_id, sel.core_id)
            out.append(r)
        return out

    # ---------- aggregations ----------

    def _core_distribution(self, records: Sequence[FeelingRecord]) -> Dict[str, int]:
        counts = {c: 0 for c in self.taxonomy.core_ids}
        for r in records:
            counts[r.selection.core_id] += 1
        return {c: n for c, n in counts.items() if n > 0}

    def _weekday_of(self, ts: Optional[str]) -> Optional[str]:
        dt = parse_timestamp(ts)
        if dt is None:
            return None
        if self.config.tz is not None and dt.tzinfo is not None:
            dt = dt.astimezone(self.config.tz)
        return WEEKDAYS[dt.weekday()]

    def _weekly_patterns(self, records: Sequence[FeelingRecord]) -> Dict[str, int]:
        counts = {d: 0 for d in WEEKDAYS}
        for r in records:
            day = self._weekday_of(r.timestamp)
            if day is not None:
                counts[day] += 1
        return {d: n for d, n in counts.items() if n > 0}

    def _windows(self, records: Sequence[FeelingRecord]) -> Tuple[Sequence[FeelingRecord], Sequence[FeelingRecord]]:
        # recent window is at most half the history; older is everything before it
        n = len(records)
        size = min(self.config.recent_window, n // 2)
        if size <= 0:
            return [], []
        return records[n - size:], records[:n - size]

    def _trend(self, records: Sequence[FeelingRecord]) -> str:
        if len(records) < 2:
            return TREND_STABLE
        recent, older = self._windows(records)
        if not recent or not older:
            return TREND_STABLE
        v = self.config.valence_of
        delta = _mean([v(r.selection.core_id) for r in recent]) - _mean([v(r.selection.core_id) for r in older])
        if delta > self.config.trend_threshold:
            return TREND_IMPROVING
        if delta < -self.config.trend_threshold:
            return TREND_DECLINING
        return TREND_STABLE

    def _mood_score(self, records: Sequence[FeelingRecord]) -> float:
        if not records:
            return float(self.config.neutral_mood_score)
        window = records[-self.config.recent_window:] if self.config.recent_window > 0 else records
        mean_v = _mean([self.config.valence_of(r.selection.core_id) for r in window])
        score = round((mean_v + 1.0) * 5.0, 1)
        return max(0.0, min(10.0, score))

    def _diversity(self, records: Sequence[FeelingRecord]) -> float:
        if not records or self.taxonomy.size == 0:
            return 0.0
        distinct = {r.selection.core_id for r in records}
        return len(distinct) / self.taxonomy.size

    def _dominant(self, distribution: Dict[str, int]) -> Optional[str]:
        if not distribution:
            return None
        # ties go to taxonomy order (dict order of the distribution)
        best = None
        for core_id, n in distribution.items():
            if best is None or n > distribution[best]:
                best = core_id
        return best

    # ---------- public operations ----------

    def analyze_feelings(self, records: Sequence[FeelingRecord]) -> FeelingsAnalytics:
        key = tuple(records)
        if self._cache_enabled:
            with self._cache_lock:
                if self._cache_key == key and self._cache_value is not None:
                    return _copy_snapshot(self._cache_value)

        usable = self._usable(key)
        distribution = self._core_distribution(usable)
        snapshot = FeelingsAnalytics(
            total_entries=len(usable),
            core_distribution=distribution,
            weekly_patterns=self._weekly_patterns(usable),
            recent_trend=self._trend(usable),
            recent_mood_score=self._mood_score(usable),
            emotional_diversity=self._diversity(usable),
            dominant_feeling=self._dominant(distribution),
        )
        snapshot.insights = self.get_insights(snapshot)

        if self._cache_enabled:
            with self._cache_lock:
                self._cache_key = key
                self._cache_value = _copy_snapshot(snapshot)
        return snapshot

    def get_recent_mood_score(self, records: Sequence[FeelingRecord]) -> float:
        return self._mood_score(self._usable(records))

    def get_emotional_diversity(self, records: Sequence[FeelingRecord]) -> float:
        return self._diversity(self._usable(records))

    def get_insights(self, analytics: FeelingsAnalytics) -> List[str]:
        if analytics.total_entries < self.config.min_entries_for_insights:
            return []
        return list(iter_insights(analytics, self.taxonomy))


def _copy_snapshot(s: FeelingsAnalytics) -> FeelingsAnalytics:
    return FeelingsAnalytics(
        total_entries=s.total_entries,
        core_distribution=dict(s.core_distribution),
        weekly_patterns=dict(s.weekly_patterns),
        recent_trend=s.recent_trend,
        recent_mood_score=s.recent_mood_score,
        emotional_diversity=s.emotional_diversity,
        dominant_feeling=s.dominant_feeling,
        insights=list(s.insights),
    )


_default_engine = FeelingsAnalyticsEngine()


def analyze_feelings(records: Sequence[FeelingRecord]) -> FeelingsAnalytics:
    return _default_engine.analyze_feelings(records)


def get_recent_mood_score(records: Sequence[FeelingRecord]) -> float:
    return _default_engine.get_recent_mood_score(records)


def get_emotional_diversity(records: Sequence[FeelingRecord]) -> float:
    return _default_engine.get_emotional_diversity(records)


def get_insights(analytics: FeelingsAnalytics) -> List[str]:
    return _default_engine.get_insights(analytics)

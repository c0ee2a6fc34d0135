from __future__ import annotations
from dataclasses import dataclass, field, asdict
from datetime import tzinfo
from typing import List, Dict, Optional, Any

TREND_IMPROVING = "improving"
TREND_DECLINING = "declining"
TREND_STABLE = "stable"

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Valence per core feeling, -1 (heaviest) .. 1 (lightest)
DEFAULT_VALENCE: Dict[str, float] = {
    "joy": 1.0,
    "love": 0.9,
    "peace": 0.7,
    "surprise": 0.2,
    "fear": -0.6,
    "anger": -0.7,
    "sadness": -0.8,
}


@dataclass(frozen=True)
class CoreFeeling:
    id: str
    name: str
    color: str


@dataclass(frozen=True)
class SpecificFeeling:
    id: str
    name: str
    core_id: str


@dataclass(frozen=True)
class FeelingSelection:
    core_id: str
    specific_id: str


@dataclass(frozen=True)
class FeelingRecord:
    selection: FeelingSelection
    timestamp: Optional[str] = None  # ISO-8601 of the containing entry


@dataclass(frozen=True)
class EngineConfig:
    recent_window: int = 5
    trend_threshold: float = 0.15
    valence: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_VALENCE))
    min_entries_for_insights: int = 3
    neutral_mood_score: float = 5.0
    tz: Optional[tzinfo] = None

    def valence_of(self, core_id: str) -> float:
        v = float(self.valence.get(core_id, 0.0))
        return max(-1.0, min(1.0, v))


@dataclass
class FeelingsAnalytics:
    total_entries: int
    core_distribution: Dict[str, int]
    weekly_patterns: Dict[str, int]
    recent_trend: str
    recent_mood_score: float
    emotional_diversity: float
    dominant_feeling: Optional[str] = None
    insights: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class JournalEntry:
    id: str
    date: str  # ISO-8601
    mood: Optional[int] = None  # 1..10
    gratitude: str = ""
    progress: str = ""
    challenges: str = ""
    goals: str = ""
    feeling: Optional[FeelingSelection] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        if self.feeling is not None:
            d["feeling"] = {"core": self.feeling.core_id, "specific": self.feeling.specific_id}
        return d


@dataclass
class EntryStats:
    total_entries: int
    average_mood: Optional[float]
    streak_days: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

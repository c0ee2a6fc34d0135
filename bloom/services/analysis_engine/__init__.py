
from .models import (
    CoreFeeling, SpecificFeeling, FeelingSelection, FeelingRecord, EngineConfig,
    FeelingsAnalytics, JournalEntry, EntryStats,
)
from .taxonomy import FeelingTaxonomy, DEFAULT_TAXONOMY
from .feelings import (
    FeelingsAnalyticsEngine, analyze_feelings, get_recent_mood_score,
    get_emotional_diversity, get_insights,
)
from .journal import (
    entries_from_json, entries_to_json, records_from_entries,
    build_entry_stats, count_hrt_streak, has_reflection,
)

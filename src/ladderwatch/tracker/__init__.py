"""
Ladderwatch statistics engine.

Pure functions over collections of normalized match records:

- compute_per_account_stats: volume, rolling averages, percentiles, deltas, tilt
- compute_consolidated_stats: per-account bundles plus a roster-wide bundle
- compute_cycles: games/days between rating thresholds
- calculate_period_progress: rating progress inside a time window
- analyze_game_patterns: weekday/hour play patterns and insights
"""

from ladderwatch.tracker.cycles import compute_cycles
from ladderwatch.tracker.models import (
    ConsolidatedStats,
    CorrelationReport,
    EfficiencyBracket,
    EloCycle,
    Insight,
    MatchRecord,
    PatternReport,
    PeriodProgress,
    SlotStats,
    StatsBundle,
    TiltEvent,
    TimelinePoint,
    WeeklyStats,
)
from ladderwatch.tracker.patterns import analyze_game_patterns
from ladderwatch.tracker.progress import (
    calculate_period_progress,
    calculate_volume_progress_correlation,
    pearson_correlation,
)
from ladderwatch.tracker.reports import build_player_history, build_summary, build_volume_report
from ladderwatch.tracker.roster import (
    NicknameCache,
    TrackedAccount,
    filter_matches,
    group_by_account,
    parse_roster,
)
from ladderwatch.tracker.stats import (
    compute_consolidated_stats,
    compute_per_account_stats,
    detect_tilt_streaks,
)
from ladderwatch.tracker.timeline import build_timeline

__all__ = [
    # Engine
    "compute_per_account_stats",
    "compute_consolidated_stats",
    "detect_tilt_streaks",
    "compute_cycles",
    "calculate_period_progress",
    "calculate_volume_progress_correlation",
    "pearson_correlation",
    "analyze_game_patterns",
    "build_timeline",
    # Roster & reports
    "TrackedAccount",
    "NicknameCache",
    "parse_roster",
    "filter_matches",
    "group_by_account",
    "build_volume_report",
    "build_summary",
    "build_player_history",
    # Models
    "MatchRecord",
    "StatsBundle",
    "ConsolidatedStats",
    "TiltEvent",
    "EloCycle",
    "PeriodProgress",
    "WeeklyStats",
    "EfficiencyBracket",
    "CorrelationReport",
    "SlotStats",
    "Insight",
    "PatternReport",
    "TimelinePoint",
]

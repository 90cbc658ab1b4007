"""
Ladderwatch - Community Ladder Tracker

Rating-progress statistics for a fixed roster of ladder accounts: rolling
averages, percentiles, deltas, tilt detection, elo cycles, period progress,
volume-vs-progress correlation and play patterns.

Usage:
    from ladderwatch import MatchRecord, compute_per_account_stats

    matches = [MatchRecord.from_dict(m) for m in raw_matches]
    stats = compute_per_account_stats(matches)
    print(stats.rolling_avg["g10"], stats.percentiles["p50"])
"""

__version__ = "0.2.0"
__author__ = "Ladderwatch Contributors"


def __getattr__(name):
    """Lazy import of the statistics engine."""
    if name in (
        "MatchRecord",
        "StatsBundle",
        "compute_per_account_stats",
        "compute_consolidated_stats",
        "compute_cycles",
        "calculate_period_progress",
        "calculate_volume_progress_correlation",
        "analyze_game_patterns",
    ):
        import ladderwatch.tracker as tracker

        return getattr(tracker, name)
    raise AttributeError(f"module 'ladderwatch' has no attribute '{name}'")


__all__ = [
    # Version
    "__version__",
    # Engine
    "MatchRecord",
    "StatsBundle",
    "compute_per_account_stats",
    "compute_consolidated_stats",
    "compute_cycles",
    "calculate_period_progress",
    "calculate_volume_progress_correlation",
    "analyze_game_patterns",
]

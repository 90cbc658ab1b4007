"""Period progress and volume-vs-progress correlation for one player."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Iterable, Sequence

from ladderwatch.core.constants import (
    CORRELATION_MIN_MATCHES,
    CORRELATION_MIN_WEEKS,
    SECONDS_PER_DAY,
    SECONDS_PER_WEEK,
    VOLUME_BRACKETS,
)
from ladderwatch.core.utils import is_finite, round_half_up, sort_by_ended_at
from ladderwatch.tracker.models import (
    CorrelationReport,
    EfficiencyBracket,
    MatchRecord,
    PeriodProgress,
    WeeklyStats,
    ensure_records,
)

logger = logging.getLogger(__name__)

# (lower bound exclusive, analysis, recommendation), checked top to bottom
CORRELATION_BANDS: tuple[tuple[float, str, str], ...] = (
    (
        0.5,
        "Strong positive correlation: the more you play, the more you progress",
        "Keep up your current game volume!",
    ),
    (
        0.2,
        "Moderate positive correlation: playing more tends to help your progress",
        "Consider slightly increasing your game volume",
    ),
    (
        -0.2,
        "Neutral correlation: volume does not significantly affect your progress",
        "Focus on the quality of your games rather than the volume",
    ),
    (
        -0.5,
        "Moderate negative correlation: playing too much may hurt your progress",
        "Consider reducing volume and focusing on higher quality games",
    ),
    (
        -math.inf,
        "Strong negative correlation: excessive volume hurts your progress",
        "Significantly reduce your game volume and improve game quality",
    ),
)

INSUFFICIENT_DATA = (
    "Insufficient data for correlation analysis",
    "Play more games to generate enough data",
)
FEW_PERIODS = (
    "Too few periods for a meaningful analysis",
    "Keep playing for a few more weeks",
)


def rating_change(first: MatchRecord, last: MatchRecord) -> float:
    """last.rating_after - first.rating_before, or 0 if either is missing."""
    if is_finite(first.rating_before) and is_finite(last.rating_after):
        return last.rating_after - first.rating_before
    return 0


def calculate_period_progress(
    matches: Iterable[MatchRecord],
    from_ts: int | None = None,
    to_ts: int | None = None,
) -> PeriodProgress:
    """Summarize rating progress for matches that ended inside [from_ts, to_ts].

    Both bounds are optional and inclusive. An empty window yields a
    zero-valued PeriodProgress rather than an error.
    """
    period = [
        m
        for m in sort_by_ended_at(ensure_records(matches))
        if (from_ts is None or m.ended_at >= from_ts) and (to_ts is None or m.ended_at <= to_ts)
    ]
    if not period:
        return PeriodProgress()

    first, last = period[0], period[-1]
    games = len(period)
    elo_change = rating_change(first, last)
    wins = sum(1 for m in period if m.won is True)

    ratings = [m.rating_after for m in period if is_finite(m.rating_after)]
    avg_elo = round_half_up(sum(ratings) / len(ratings)) if ratings else None

    total_days = (last.ended_at - first.ended_at) / SECONDS_PER_DAY if games > 1 else 1
    day_divisor = max(total_days, 1)

    return PeriodProgress(
        games=games,
        elo_change=round_half_up(elo_change),
        win_rate=round_half_up(wins / games * 100, 1),
        avg_elo=avg_elo,
        start_elo=first.rating_before,
        end_elo=last.rating_after,
        games_per_day=round_half_up(games / day_divisor, 2),
        elo_per_game=round_half_up(elo_change / games, 2),
        elo_per_day=round_half_up(elo_change / day_divisor, 2),
        total_days=round_half_up(total_days, 2),
    )


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equally long series.

    Returns 0.0 for empty or mismatched series and when either series has
    no variance.
    """
    if len(x) != len(y) or len(x) == 0:
        return 0.0

    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y))
    sum_x2 = sum(a * a for a in x)
    sum_y2 = sum(b * b for b in y)

    numerator = n * sum_xy - sum_x * sum_y
    denominator = math.sqrt((n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y))
    if denominator == 0:
        return 0.0
    return numerator / denominator


def weekly_stats(matches: Sequence[MatchRecord]) -> list[WeeklyStats]:
    """Group chronologically sorted matches into fixed 7-day epoch buckets."""
    groups: dict[int, list[MatchRecord]] = defaultdict(list)
    for match in matches:
        groups[(match.ended_at // SECONDS_PER_WEEK) * SECONDS_PER_WEEK].append(match)

    stats = []
    for week_start in sorted(groups):
        week = groups[week_start]
        games = len(week)
        change = rating_change(week[0], week[-1])
        wins = sum(1 for m in week if m.won is True)
        stats.append(
            WeeklyStats(
                week_start=week_start,
                games=games,
                elo_change=change,
                win_rate=round_half_up(wins / games * 100, 1),
                efficiency=change / games,
            )
        )
    return stats


def classify_correlation(coefficient: float) -> tuple[str, str]:
    """Return the (analysis, recommendation) pair for a coefficient."""
    for lower, analysis, recommendation in CORRELATION_BANDS[:-1]:
        if coefficient > lower:
            return analysis, recommendation
    return CORRELATION_BANDS[-1][1], CORRELATION_BANDS[-1][2]


def efficiency_brackets(weeks: Sequence[WeeklyStats]) -> list[EfficiencyBracket]:
    """Average weekly efficiency per volume bracket; empty brackets report zeros."""
    brackets = []
    for low, high, label in VOLUME_BRACKETS:
        members = [w for w in weeks if low <= w.games <= high]
        if not members:
            brackets.append(EfficiencyBracket(bracket=label))
            continue
        count = len(members)
        brackets.append(
            EfficiencyBracket(
                bracket=label,
                avg_games=round_half_up(sum(w.games for w in members) / count, 1),
                avg_efficiency=round_half_up(sum(w.efficiency for w in members) / count, 2),
                avg_win_rate=round_half_up(sum(w.win_rate for w in members) / count, 1),
                sample_size=count,
            )
        )
    return brackets


def calculate_volume_progress_correlation(matches: Iterable[MatchRecord]) -> CorrelationReport:
    """Correlate games played per week with rating gained that week.

    Needs at least 10 matches spread over at least 3 weekly buckets;
    otherwise an explanatory report with no coefficient is returned.
    """
    records = sort_by_ended_at(ensure_records(matches))
    if len(records) < CORRELATION_MIN_MATCHES:
        return CorrelationReport(None, *INSUFFICIENT_DATA)

    weeks = weekly_stats(records)
    if len(weeks) < CORRELATION_MIN_WEEKS:
        return CorrelationReport(None, *FEW_PERIODS)

    coefficient = pearson_correlation([w.games for w in weeks], [w.elo_change for w in weeks])
    analysis, recommendation = classify_correlation(coefficient)
    logger.debug("Volume/progress correlation %.3f over %d weeks", coefficient, len(weeks))

    return CorrelationReport(
        correlation_coefficient=round_half_up(coefficient, 3),
        analysis=analysis,
        recommendation=recommendation,
        efficiency_brackets=efficiency_brackets(weeks),
        total_weeks_analyzed=len(weeks),
        weekly_stats=weeks,
    )

"""
Play-pattern analysis: when a player plays and how well it goes.

Matches are placed on the player's local calendar using their end time,
grouped by weekday and by hour of day, and summarized into a handful of
plain-language insights.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, tzinfo

from ladderwatch.core.constants import WEEKDAY_NAMES
from ladderwatch.core.utils import is_finite, round_half_up
from ladderwatch.tracker.models import (
    Insight,
    MatchRecord,
    PatternReport,
    SlotStats,
    ensure_records,
)

logger = logging.getLogger(__name__)

PEAK_DAY_SHARE = 0.30
PEAK_HOUR_SHARE = 0.25
CONSISTENT_SCORE = 80
SCATTERED_SCORE = 40
BEST_DAY_MIN_GAMES = 3


@dataclass
class _Tally:
    games: int = 0
    wins: int = 0
    elo_change: float = 0

    def add(self, match: MatchRecord) -> None:
        self.games += 1
        if match.won is True:
            self.wins += 1
        if is_finite(match.rating_before) and is_finite(match.rating_after):
            self.elo_change += match.rating_after - match.rating_before

    @property
    def win_ratio(self) -> float:
        return self.wins / self.games if self.games else 0.0

    def summary(self) -> SlotStats:
        if not self.games:
            return SlotStats()
        return SlotStats(
            games=self.games,
            win_rate=round_half_up(self.win_ratio * 100),
            avg_elo_change=round_half_up(self.elo_change / self.games, 2),
        )


def weekday_index(moment: datetime) -> int:
    """Day of week with Sunday as 0 and Saturday as 6."""
    return (moment.weekday() + 1) % 7


def day_period(hour: int) -> str:
    """Label an hour of the day as morning, afternoon, evening or late night."""
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 18:
        return "afternoon"
    if 18 <= hour < 22:
        return "evening"
    return "late night"


def analyze_game_patterns(
    matches: Iterable[MatchRecord], tz: tzinfo | None = None
) -> PatternReport:
    """Build weekday/hour distributions, peaks, a consistency score and insights.

    Args:
        matches: Match records in any order
        tz: Time zone for calendar placement; host local time when None

    Returns:
        PatternReport; an empty report when no match has finished
    """
    records = [m for m in ensure_records(matches) if m.is_finished]
    if not records:
        return PatternReport()

    weekdays = [_Tally() for _ in WEEKDAY_NAMES]
    hours = [_Tally() for _ in range(24)]

    for match in records:
        moment = datetime.fromtimestamp(match.ended_at, tz)
        weekdays[weekday_index(moment)].add(match)
        hours[moment.hour].add(match)

    peak_day_idx = max(range(7), key=lambda d: (weekdays[d].games, -d))
    peak_hour = 0
    for hour in range(24):
        if hours[hour].games > hours[peak_hour].games:
            peak_hour = hour

    total_games = len(records)
    mean_per_day = total_games / 7
    variance = sum((t.games - mean_per_day) ** 2 for t in weekdays) / 7
    consistency = max(0.0, min(100.0, 100 - (variance / mean_per_day) * 10))

    best_day_idx = _best_day(weekdays)

    peak_day = WEEKDAY_NAMES[peak_day_idx]
    peak_day_games = weekdays[peak_day_idx].games
    insights: list[Insight] = []

    if peak_day_games > total_games * PEAK_DAY_SHARE:
        insights.append(
            Insight(
                type="pattern",
                icon="📅",
                message=f"{peak_day} is your main gaming day ({peak_day_games} games)",
            )
        )

    if hours[peak_hour].games > total_games * PEAK_HOUR_SHARE:
        insights.append(
            Insight(
                type="pattern",
                icon="🕐",
                message=f"You mostly play in the {day_period(peak_hour)} ({peak_hour}:00)",
            )
        )

    if consistency > CONSISTENT_SCORE:
        insights.append(
            Insight(
                type="positive",
                icon="📊",
                message="Excellent consistency across your gaming days!",
            )
        )
    elif consistency < SCATTERED_SCORE:
        insights.append(
            Insight(
                type="info",
                icon="🔄",
                message="Consider spreading your games more evenly across the week",
            )
        )

    best_day = None
    if best_day_idx is not None:
        best_day = WEEKDAY_NAMES[best_day_idx]
        best_rate = round_half_up(weekdays[best_day_idx].win_ratio * 100)
        insights.append(
            Insight(
                type="performance",
                icon="🏆",
                message=f"{best_day} is your best day ({best_rate}% win rate)",
            )
        )

    logger.debug(
        "Pattern analysis over %d matches: peak %s %02d:00", total_games, peak_day, peak_hour
    )

    return PatternReport(
        weekday_distribution={name: weekdays[i].summary() for i, name in enumerate(WEEKDAY_NAMES)},
        hour_distribution={hour: hours[hour].summary() for hour in range(24)},
        peak_day=peak_day,
        peak_hour=peak_hour,
        consistency_score=round_half_up(consistency),
        best_day=best_day,
        insights=insights,
    )


def _best_day(weekdays: list[_Tally]) -> int | None:
    """Weekday with the highest win rate among days with enough games."""
    best = None
    for idx, tally in enumerate(weekdays):
        if tally.games < BEST_DAY_MIN_GAMES:
            continue
        if best is None or tally.win_ratio > weekdays[best].win_ratio:
            best = idx
    return best

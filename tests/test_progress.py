"""Tests for period progress and volume/progress correlation."""

import pytest

from ladderwatch.tracker.models import MatchRecord
from ladderwatch.tracker.progress import (
    FEW_PERIODS,
    INSUFFICIENT_DATA,
    calculate_period_progress,
    calculate_volume_progress_correlation,
    classify_correlation,
    pearson_correlation,
    weekly_stats,
)

DAY = 86_400
WEEK = 7 * DAY
BASE = 2_500 * WEEK  # aligned on an epoch week


def _make_match(idx, ended_at, rating_before=1500, rating_after=1510, won=True) -> MatchRecord:
    return MatchRecord(
        match_id=f"p{idx:04d}",
        profile_id=3,
        started_at=ended_at - 1800,
        ended_at=ended_at,
        won=won,
        rating_before=rating_before,
        rating_after=rating_after,
    )


def _weeks(games_per_week: list[int], gain: int = 10) -> list[MatchRecord]:
    """Every match is a win worth `gain`; week k holds games_per_week[k] matches."""
    matches = []
    rating = 1500
    idx = 0
    for week, games in enumerate(games_per_week):
        for g in range(games):
            matches.append(
                _make_match(idx, BASE + week * WEEK + g * 3600, rating, rating + gain, True)
            )
            rating += gain
            idx += 1
    return matches


# =============================================================================
# Period progress
# =============================================================================


class TestPeriodProgress:
    def test_empty_window(self):
        progress = calculate_period_progress([])
        assert progress.to_dict() == {
            "games": 0,
            "elo_change": 0,
            "win_rate": 0,
            "avg_elo": None,
            "start_elo": None,
            "end_elo": None,
        }

    def test_window_excludes_everything(self):
        matches = [_make_match(0, BASE)]
        progress = calculate_period_progress(matches, BASE + 1, BASE + DAY)
        assert progress.games == 0

    def test_multi_day_window(self):
        matches = [
            _make_match(0, BASE, 1500, 1520, True),
            _make_match(1, BASE + DAY, 1520, 1540, True),
            _make_match(2, BASE + DAY + 3600, 1540, 1525, False),
            _make_match(3, BASE + 2 * DAY, 1525, 1560, True),
        ]
        progress = calculate_period_progress(matches)

        assert progress.games == 4
        assert progress.elo_change == 60
        assert progress.win_rate == 75.0
        assert progress.start_elo == 1500
        assert progress.end_elo == 1560
        assert progress.avg_elo == 1536  # (1520 + 1540 + 1525 + 1560) / 4 = 1536.25
        assert progress.total_days == 2.0
        assert progress.games_per_day == 2.0
        assert progress.elo_per_game == 15.0
        assert progress.elo_per_day == 30.0

    def test_single_match_counts_as_one_day(self):
        progress = calculate_period_progress([_make_match(0, BASE, 1500, 1516)])
        assert progress.total_days == 1
        assert progress.games_per_day == 1.0
        assert progress.elo_per_day == 16.0

    def test_short_span_uses_one_day_divisor(self):
        matches = [
            _make_match(0, BASE, 1500, 1510),
            _make_match(1, BASE + 6 * 3600, 1510, 1520),
        ]
        progress = calculate_period_progress(matches)
        assert progress.total_days == 0.25
        assert progress.games_per_day == 2.0
        assert progress.elo_per_day == 20.0

    def test_bounds_are_inclusive(self):
        matches = [_make_match(i, BASE + i * DAY) for i in range(5)]
        progress = calculate_period_progress(matches, BASE + DAY, BASE + 3 * DAY)
        assert progress.games == 3

    def test_unsorted_input(self):
        matches = [
            _make_match(1, BASE + DAY, 1520, 1540),
            _make_match(0, BASE, 1500, 1520),
        ]
        assert calculate_period_progress(matches).elo_change == 40

    def test_missing_rating_gives_zero_change(self):
        matches = [
            _make_match(0, BASE, None, 1520),
            _make_match(1, BASE + DAY, 1520, 1540),
        ]
        progress = calculate_period_progress(matches)
        assert progress.elo_change == 0
        assert progress.start_elo is None

    def test_win_rate_rounding(self):
        matches = [_make_match(i, BASE + i * 3600, won=i == 0) for i in range(3)]
        assert calculate_period_progress(matches).win_rate == 33.3


# =============================================================================
# Pearson correlation
# =============================================================================


class TestPearson:
    def test_perfect_positive(self):
        assert pearson_correlation([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert pearson_correlation([1, 2, 3], [6, 4, 2]) == pytest.approx(-1.0)

    def test_no_variance(self):
        assert pearson_correlation([5, 5, 5], [1, 2, 3]) == 0.0

    def test_empty_or_mismatched(self):
        assert pearson_correlation([], []) == 0.0
        assert pearson_correlation([1, 2], [1, 2, 3]) == 0.0


class TestClassifyCorrelation:
    @pytest.mark.parametrize(
        "coefficient,prefix",
        [
            (0.9, "Strong positive"),
            (0.5, "Moderate positive"),
            (0.3, "Moderate positive"),
            (0.0, "Neutral"),
            (-0.2, "Moderate negative"),
            (-0.5, "Strong negative"),
            (-1.0, "Strong negative"),
        ],
    )
    def test_bands(self, coefficient, prefix):
        analysis, recommendation = classify_correlation(coefficient)
        assert analysis.startswith(prefix)
        assert recommendation


# =============================================================================
# Volume vs progress correlation
# =============================================================================


class TestWeeklyStats:
    def test_groups_by_epoch_week(self):
        weeks = weekly_stats(_weeks([2, 0, 3]))
        assert [w.week_start for w in weeks] == [BASE, BASE + 2 * WEEK]
        assert [w.games for w in weeks] == [2, 3]
        assert weeks[1].elo_change == 30
        assert weeks[1].efficiency == 10
        assert weeks[1].win_rate == 100.0


class TestVolumeProgressCorrelation:
    def test_insufficient_matches(self):
        report = calculate_volume_progress_correlation(_weeks([3, 3, 3]))
        assert report.correlation_coefficient is None
        assert (report.analysis, report.recommendation) == INSUFFICIENT_DATA
        assert "total_weeks_analyzed" not in report.to_dict()
        assert report.efficiency_brackets == []

    def test_too_few_weeks(self):
        report = calculate_volume_progress_correlation(_weeks([6, 6]))
        assert report.correlation_coefficient is None
        assert (report.analysis, report.recommendation) == FEW_PERIODS

    def test_more_games_more_progress(self):
        report = calculate_volume_progress_correlation(_weeks([3, 8, 20]))

        assert report.correlation_coefficient == 1.0
        assert report.analysis.startswith("Strong positive")
        assert report.total_weeks_analyzed == 3
        assert len(report.weekly_stats) == 3

        brackets = {b.bracket: b for b in report.efficiency_brackets}
        assert brackets["Few games (0-5/week)"].sample_size == 1
        assert brackets["Few games (0-5/week)"].avg_games == 3.0
        assert brackets["Moderate (6-15/week)"].avg_efficiency == 10.0
        assert brackets["Very active (16-25/week)"].avg_win_rate == 100.0
        assert brackets["Extremely active (26+/week)"].sample_size == 0
        assert brackets["Extremely active (26+/week)"].avg_games == 0

    def test_brackets_in_fixed_order(self):
        report = calculate_volume_progress_correlation(_weeks([4, 4, 4]))
        assert [b.bracket for b in report.efficiency_brackets] == [
            "Few games (0-5/week)",
            "Moderate (6-15/week)",
            "Very active (16-25/week)",
            "Extremely active (26+/week)",
        ]

    def test_flat_volume_is_neutral(self):
        report = calculate_volume_progress_correlation(_weeks([4, 4, 4]))
        assert report.correlation_coefficient == 0.0
        assert report.analysis.startswith("Neutral")

    def test_to_dict_shape(self):
        data = calculate_volume_progress_correlation(_weeks([3, 8, 20])).to_dict()
        assert set(data) == {
            "correlation_coefficient",
            "analysis",
            "recommendation",
            "efficiency_brackets",
            "total_weeks_analyzed",
            "weekly_stats",
        }
        assert data["weekly_stats"][0]["week_start"] == BASE

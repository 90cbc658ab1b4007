"""Tests for weekday/hour play-pattern analysis."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from ladderwatch.tracker.models import MatchRecord, SlotStats
from ladderwatch.tracker.patterns import analyze_game_patterns, day_period, weekday_index

HOUR = 3600
DAY = 86_400
SUNDAY = 1_704_585_600  # 2024-01-07 00:00 UTC


def _make_match(idx: int, ended_at: int, won: bool = True) -> MatchRecord:
    before = 1500
    return MatchRecord(
        match_id=f"g{idx:03d}",
        profile_id=11,
        started_at=ended_at - 1800,
        ended_at=ended_at,
        won=won,
        rating_before=before,
        rating_after=before + 10 if won else before - 10,
    )


class TestCalendarHelpers:
    def test_weekday_index_starts_on_sunday(self):
        assert weekday_index(datetime(2024, 1, 7, tzinfo=UTC)) == 0
        assert weekday_index(datetime(2024, 1, 8, tzinfo=UTC)) == 1
        assert weekday_index(datetime(2024, 1, 13, tzinfo=UTC)) == 6

    @pytest.mark.parametrize(
        "hour,label",
        [
            (6, "morning"),
            (11, "morning"),
            (12, "afternoon"),
            (17, "afternoon"),
            (18, "evening"),
            (21, "evening"),
            (22, "late night"),
            (3, "late night"),
        ],
    )
    def test_day_period(self, hour, label):
        assert day_period(hour) == label


class TestAnalyzeGamePatterns:
    def test_empty(self):
        report = analyze_game_patterns([])
        assert report.peak_day is None
        assert report.peak_hour is None
        assert report.insights == []

    def test_single_evening(self):
        # five Sunday games at 20:00, four of them won
        matches = [
            _make_match(i, SUNDAY + 20 * HOUR + i * 60, won=i != 4) for i in range(5)
        ]
        report = analyze_game_patterns(matches, tz=UTC)

        assert report.peak_day == "Sunday"
        assert report.peak_hour == 20
        assert report.best_day == "Sunday"
        assert report.weekday_distribution["Sunday"] == SlotStats(
            games=5, win_rate=80, avg_elo_change=6.0
        )
        assert report.weekday_distribution["Monday"] == SlotStats()
        assert report.hour_distribution[20].games == 5
        assert report.consistency_score == 57

        messages = [(i.type, i.message) for i in report.insights]
        assert messages == [
            ("pattern", "Sunday is your main gaming day (5 games)"),
            ("pattern", "You mostly play in the evening (20:00)"),
            ("performance", "Sunday is your best day (80% win rate)"),
        ]

    def test_unfinished_matches_ignored(self):
        finished = [
            _make_match(i, SUNDAY + 20 * HOUR + i * 60, won=i != 4) for i in range(5)
        ]
        pending = [_make_match(10 + i, 0) for i in range(3)]
        report = analyze_game_patterns(finished + pending, tz=UTC)

        assert report == analyze_game_patterns(finished, tz=UTC)
        assert report.consistency_score == 57
        assert report.insights[0].message == "Sunday is your main gaming day (5 games)"

    def test_only_unfinished_matches(self):
        report = analyze_game_patterns([_make_match(i, 0) for i in range(3)], tz=UTC)
        assert report.peak_day is None
        assert report.consistency_score == 0

    def test_even_spread_is_consistent(self):
        matches = []
        for week in range(2):
            for day in range(7):
                ts = SUNDAY + week * 7 * DAY + day * DAY + (8 + day) * HOUR
                matches.append(_make_match(len(matches), ts))
        report = analyze_game_patterns(matches, tz=UTC)

        assert report.consistency_score == 100
        assert report.peak_day == "Sunday"  # tie goes to the first day
        assert report.peak_hour == 8
        assert report.best_day is None
        assert [(i.type, i.icon) for i in report.insights] == [("positive", "📊")]

    def test_concentrated_play_is_scattered(self):
        matches = [_make_match(i, SUNDAY + i * 600) for i in range(20)]
        report = analyze_game_patterns(matches, tz=UTC)

        assert report.consistency_score == 0
        assert "info" in [i.type for i in report.insights]

    def test_best_day_needs_three_games(self):
        matches = [
            _make_match(0, SUNDAY + 10 * HOUR, won=True),
            _make_match(1, SUNDAY + 11 * HOUR, won=True),
            _make_match(2, SUNDAY + DAY + 10 * HOUR, won=True),
            _make_match(3, SUNDAY + DAY + 11 * HOUR, won=False),
            _make_match(4, SUNDAY + DAY + 12 * HOUR, won=True),
        ]
        report = analyze_game_patterns(matches, tz=UTC)
        assert report.best_day == "Monday"

    def test_time_zone_shifts_calendar(self):
        # 02:00 UTC on Sunday is 21:00 on Saturday at UTC-5
        matches = [_make_match(0, SUNDAY + 2 * HOUR)]
        report = analyze_game_patterns(matches, tz=timezone(timedelta(hours=-5)))
        assert report.peak_day == "Saturday"
        assert report.peak_hour == 21

    def test_all_days_and_hours_present(self):
        report = analyze_game_patterns([_make_match(0, SUNDAY)], tz=UTC)
        assert list(report.weekday_distribution) == [
            "Sunday",
            "Monday",
            "Tuesday",
            "Wednesday",
            "Thursday",
            "Friday",
            "Saturday",
        ]
        assert list(report.hour_distribution) == list(range(24))

    def test_to_dict(self):
        data = analyze_game_patterns([_make_match(0, SUNDAY)], tz=UTC).to_dict()
        assert data["weekday_distribution"]["Sunday"] == {
            "games": 1,
            "win_rate": 100,
            "avg_elo_change": 10.0,
        }
        assert data["insights"][0]["icon"] == "📅"

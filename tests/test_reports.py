"""Tests for the roster and player report builders."""

import json
from datetime import UTC

import pytest

from ladderwatch.tracker.models import MatchRecord
from ladderwatch.tracker.reports import build_player_history, build_summary, build_volume_report
from ladderwatch.tracker.roster import NicknameCache, TrackedAccount

DAY = 86_400
NOW = 1_760_000_000


def _make_match(idx: int, profile_id: int, days_ago: float, rating_after: int, won: bool = True):
    ended = int(NOW - days_ago * DAY)
    return MatchRecord(
        match_id=f"{profile_id}-{idx}",
        profile_id=profile_id,
        started_at=ended - 1800,
        ended_at=ended,
        won=won,
        rating_before=rating_after - 10 if won else rating_after + 10,
        rating_after=rating_after,
    )


@pytest.fixture
def accounts():
    return [TrackedAccount(1, "s1", nick="Alpha"), TrackedAccount(2, "s2")]


@pytest.fixture
def matches():
    first = [_make_match(i, 1, days_ago=40 - i * 3, rating_after=1500 + 10 * i) for i in range(14)]
    second = [
        _make_match(i, 2, days_ago=5 - i, rating_after=1700 - 10 * i, won=False) for i in range(4)
    ]
    return first + second


class TestVolumeReport:
    def test_per_account_and_roster(self, accounts, matches):
        report = build_volume_report(accounts, matches, now=NOW)
        by_id = {row["profile_id"]: row for row in report["byAccount"]}

        # account 1 plays every 3 days from 40 days ago to 1 day ago
        assert by_id[1] == {"profile_id": 1, "week": 3, "month": 10}
        assert by_id[2] == {"profile_id": 2, "week": 4, "month": 4}
        assert report["consolidated"] == {"week": 7, "month": 14}

    def test_untracked_profiles_only_in_consolidated(self, accounts, matches):
        extra = _make_match(0, 99, days_ago=1, rating_after=1400)
        report = build_volume_report(accounts, matches + [extra], now=NOW)
        assert [row["profile_id"] for row in report["byAccount"]] == [1, 2]
        assert report["consolidated"]["week"] == 8


class TestSummary:
    def test_shape(self, accounts, matches):
        report = build_summary(accounts, matches, now=NOW)

        assert [row["profile_id"] for row in report["byAccount"]] == [1, 2]
        row = report["byAccount"][1]
        assert set(row) == {"profile_id", "volume", "rollingAvg", "percentiles", "delta", "tilt"}
        assert row["tilt"][0]["type"] == "loss_streak"
        assert row["tilt"][0]["losses"] == 4

        assert report["meta"]["accountsProcessed"] == 2
        assert report["meta"]["includeDetails"] is False
        assert isinstance(report["meta"]["processingTime"], int)
        json.dumps(report)

    def test_with_nicknames(self, accounts, matches):
        names = NicknameCache(fetch=lambda pid: f"fetched-{pid}")
        report = build_summary(accounts, matches, now=NOW, nicknames=names)

        assert report["byAccount"][0]["player"] == {"nick": "Alpha"}
        assert report["byAccount"][1]["player"] == {"nick": "fetched-2"}
        assert report["meta"]["includeDetails"] is True

    def test_account_without_matches(self, matches):
        report = build_summary([TrackedAccount(77, "s")], matches, now=NOW)
        assert report["byAccount"][0]["rollingAvg"]["g10"] is None
        assert report["consolidated"]["volume"] == {"week": 0, "month": 0}


class TestPlayerHistory:
    def test_report_sections(self, matches):
        report = build_player_history(1, matches, now=NOW, tz=UTC)

        assert report["profile_id"] == 1
        assert report["total_matches"] == 14
        assert set(report["progress"]) == {"lastWeek", "lastMonth", "lastQuarter", "overall"}
        assert report["progress"]["overall"]["games"] == 14
        assert report["progress"]["overall"]["elo_change"] == 140
        assert report["progress"]["lastWeek"]["games"] == 3
        assert report["volume_progress_correlation"]["total_weeks_analyzed"] >= 3
        assert "weekday_distribution" in report["game_patterns"]
        assert report["period"] == {"from": None, "to": None, "limit": None, "sort": "desc"}
        json.dumps(report, ensure_ascii=False)

    def test_match_order(self, matches):
        desc = build_player_history(1, matches, now=NOW)["matches"]
        asc = build_player_history(1, matches, now=NOW, sort="asc")["matches"]
        assert desc[0]["match_id"] == "1-13"
        assert asc[0]["match_id"] == "1-0"

    def test_limit_keeps_most_recent(self, matches):
        report = build_player_history(1, matches, now=NOW, limit=5)
        assert report["total_matches"] == 5
        assert [m["match_id"] for m in report["matches"]] == ["1-13", "1-12", "1-11", "1-10", "1-9"]

    def test_time_window(self, matches):
        report = build_player_history(1, matches, from_ts=NOW - 10 * DAY, to_ts=NOW, now=NOW)
        assert report["total_matches"] == 4  # 10, 7, 4 and 1 days ago

    def test_unknown_player(self, matches):
        report = build_player_history(5, matches, now=NOW, player={"nick": "Ghost"})
        assert report["total_matches"] == 0
        assert report["player"] == {"nick": "Ghost"}
        assert report["progress"]["overall"]["games"] == 0
        assert report["volume_progress_correlation"]["correlation_coefficient"] is None

    def test_invalid_sort(self, matches):
        with pytest.raises(ValueError, match="sort"):
            build_player_history(1, matches, sort="sideways")

    @pytest.mark.parametrize("limit", [0, -1])
    def test_invalid_limit(self, matches, limit):
        with pytest.raises(ValueError, match="limit"):
            build_player_history(1, matches, limit=limit)

"""
Data contracts for the statistics engine.

Match records come in from the collector layer already normalized; every
other type here is a computed value produced fresh on each call.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from ladderwatch.core.constants import DEFAULT_LADDER, DELTA_WINDOWS, PERCENTILES, ROLLING_WINDOWS


def _optional_number(value: Any) -> float | int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _optional_bool(value: Any) -> bool | None:
    if value is None:
        return None
    return bool(value)


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MatchRecord:
    """One finished ladder match seen from a single tracked account."""

    match_id: str
    profile_id: int
    started_at: int
    ended_at: int
    ladder: str = DEFAULT_LADDER
    map: str = "Unknown"
    civ: str | None = None
    won: bool | None = None
    rating_before: float | None = None
    rating_after: float | None = None

    @property
    def is_finished(self) -> bool:
        return bool(self.ended_at) and self.ended_at > 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MatchRecord:
        """Build a record from a stored or collected match dict.

        Missing optional fields fall back to their defaults.

        Raises:
            ValueError: if profile_id is present but not an integer.
        """
        match_id = data.get("match_id")
        raw_profile = data.get("profile_id")
        try:
            profile_id = int(raw_profile) if raw_profile is not None else 0
        except (TypeError, ValueError) as e:
            raise ValueError(f"match {match_id} has invalid profile_id {raw_profile!r}") from e

        return cls(
            match_id="" if match_id is None else str(match_id),
            profile_id=profile_id,
            started_at=int(_optional_number(data.get("started_at")) or 0),
            ended_at=int(_optional_number(data.get("ended_at")) or 0),
            ladder=str(data.get("ladder") or DEFAULT_LADDER),
            map=str(data.get("map") or "Unknown"),
            civ=data.get("civ"),
            won=_optional_bool(data.get("won")),
            rating_before=_optional_number(data.get("rating_before")),
            rating_after=_optional_number(data.get("rating_after")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def ensure_records(matches: Any) -> list[MatchRecord]:
    """Accept MatchRecord objects or plain match dicts and return records."""
    if not matches:
        return []
    return [m if isinstance(m, MatchRecord) else MatchRecord.from_dict(m) for m in matches]


# ---------------------------------------------------------------------------
# Per-account statistics
# ---------------------------------------------------------------------------


@dataclass
class TiltEvent:
    """A losing streak or a fast rating drop."""

    type: str  # "loss_streak", "elo_drop"
    from_match: str
    to_match: str
    losses: int
    elo_drop: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self.type),
            "fromMatch": self.from_match,
            "toMatch": self.to_match,
            "losses": self.losses,
            "eloDrop": self.elo_drop,
        }


def _window_keys(windows: tuple[int, ...]) -> dict[str, None]:
    return {f"g{n}": None for n in windows}


@dataclass
class StatsBundle:
    """Volume, rating averages, spread, deltas and tilt for a match sequence."""

    volume: dict[str, int] = field(default_factory=lambda: {"week": 0, "month": 0})
    rolling_avg: dict[str, float | None] = field(
        default_factory=lambda: _window_keys(ROLLING_WINDOWS)
    )
    percentiles: dict[str, int | None] = field(
        default_factory=lambda: {f"p{p}": None for p in PERCENTILES}
    )
    delta: dict[str, int | None] = field(default_factory=lambda: _window_keys(DELTA_WINDOWS))
    tilt: list[TiltEvent] = field(default_factory=list)

    @classmethod
    def empty(cls) -> StatsBundle:
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "volume": dict(self.volume),
            "rollingAvg": dict(self.rolling_avg),
            "percentiles": dict(self.percentiles),
            "delta": dict(self.delta),
            "tilt": [event.to_dict() for event in self.tilt],
        }


@dataclass
class ConsolidatedStats:
    """Per-account bundles plus one bundle over every account's matches."""

    by_account: dict[Any, StatsBundle]
    consolidated: StatsBundle

    def to_dict(self) -> dict[str, Any]:
        return {
            "byAccount": {
                str(account): bundle.to_dict() for account, bundle in self.by_account.items()
            },
            "consolidated": self.consolidated.to_dict(),
        }


@dataclass
class EloCycle:
    """Games and days spent climbing from one rating threshold to the next."""

    elo_from: int
    elo_to: int
    games_in_cycle: int
    days_in_cycle: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Progress & correlation
# ---------------------------------------------------------------------------


@dataclass
class PeriodProgress:
    """Rating progress inside a time window."""

    games: int = 0
    elo_change: int = 0
    win_rate: float = 0
    avg_elo: int | None = None
    start_elo: float | None = None
    end_elo: float | None = None
    games_per_day: float | None = None
    elo_per_game: float | None = None
    elo_per_day: float | None = None
    total_days: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.games == 0:
            for key in ("games_per_day", "elo_per_game", "elo_per_day", "total_days"):
                data.pop(key)
        return data


@dataclass
class WeeklyStats:
    week_start: int
    games: int
    elo_change: float
    win_rate: float
    efficiency: float


@dataclass
class EfficiencyBracket:
    bracket: str
    avg_games: float = 0
    avg_efficiency: float = 0
    avg_win_rate: float = 0
    sample_size: int = 0


@dataclass
class CorrelationReport:
    """Whether playing more weeks lines up with gaining more rating."""

    correlation_coefficient: float | None
    analysis: str
    recommendation: str
    efficiency_brackets: list[EfficiencyBracket] = field(default_factory=list)
    total_weeks_analyzed: int | None = None
    weekly_stats: list[WeeklyStats] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.total_weeks_analyzed is None:
            data.pop("total_weeks_analyzed")
        return data


# ---------------------------------------------------------------------------
# Play patterns
# ---------------------------------------------------------------------------


@dataclass
class SlotStats:
    """Aggregate for one weekday or one hour of the day."""

    games: int = 0
    win_rate: int = 0
    avg_elo_change: float = 0


@dataclass
class Insight:
    type: str  # "pattern", "positive", "info", "performance"
    icon: str
    message: str


@dataclass
class PatternReport:
    weekday_distribution: dict[str, SlotStats] = field(default_factory=dict)
    hour_distribution: dict[int, SlotStats] = field(default_factory=dict)
    peak_day: str | None = None
    peak_hour: int | None = None
    consistency_score: int = 0
    best_day: str | None = None
    insights: list[Insight] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Timeline
# ---------------------------------------------------------------------------


@dataclass
class TimelinePoint:
    bucket: str  # ISO date of the bucket start (UTC)
    avg_elo: int
    last_elo: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

"""
Ladderwatch - Constants

Time units, statistics windows and thresholds shared by the tracker modules.
"""

from enum import StrEnum

SECONDS_PER_HOUR = 60 * 60
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR
SECONDS_PER_WEEK = 7 * SECONDS_PER_DAY

DEFAULT_LADDER = "rm_1v1"


class TiltType(StrEnum):
    """Kind of tilt episode found in a match sequence."""

    LOSS_STREAK = "loss_streak"
    ELO_DROP = "elo_drop"


class Granularity(StrEnum):
    """Bucket size for rating timelines."""

    DAY = "day"
    WEEK = "week"


# Per-account statistics windows (number of most recent matches)
ROLLING_WINDOWS: tuple[int, ...] = (10, 20, 30, 50, 100)
DELTA_WINDOWS: tuple[int, ...] = (10, 20, 30)
PERCENTILE_SAMPLE = 200
PERCENTILES: tuple[int, ...] = (25, 50, 75)

VOLUME_WEEK_DAYS = 7
VOLUME_MONTH_DAYS = 30

# Tilt detection
TILT_MIN_LOSSES = 3
TILT_ELO_DROP = 40
TILT_WINDOW = 10

# Rating thresholds for cycle detection
CYCLE_THRESHOLDS: tuple[int, ...] = (1700, 1800, 1900, 2000)

# Volume vs progress correlation
CORRELATION_MIN_MATCHES = 10
CORRELATION_MIN_WEEKS = 3

# (min games, max games, label) per week
VOLUME_BRACKETS: tuple[tuple[int, float, str], ...] = (
    (0, 5, "Few games (0-5/week)"),
    (6, 15, "Moderate (6-15/week)"),
    (16, 25, "Very active (16-25/week)"),
    (26, float("inf"), "Extremely active (26+/week)"),
)

WEEKDAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

# Player history progress windows (days)
HISTORY_PERIODS: dict[str, int] = {
    "lastWeek": 7,
    "lastMonth": 30,
    "lastQuarter": 90,
}

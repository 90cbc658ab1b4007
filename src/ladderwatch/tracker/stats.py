"""Per-account rating statistics and roster-wide consolidation.

Every function here is pure: it takes a match collection, sorts its own copy
by end time and returns a freshly built result. Missing ratings or results
are left out of the aggregate they would feed instead of failing the call.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping, Sequence

from ladderwatch.core.config import TrackerConfig
from ladderwatch.core.constants import (
    DELTA_WINDOWS,
    PERCENTILE_SAMPLE,
    PERCENTILES,
    ROLLING_WINDOWS,
    SECONDS_PER_DAY,
    TILT_ELO_DROP,
    TILT_MIN_LOSSES,
    TILT_WINDOW,
    VOLUME_MONTH_DAYS,
    VOLUME_WEEK_DAYS,
    TiltType,
)
from ladderwatch.core.utils import is_finite, round_half_up, sort_by_ended_at
from ladderwatch.tracker.models import (
    ConsolidatedStats,
    MatchRecord,
    StatsBundle,
    TiltEvent,
    ensure_records,
)

logger = logging.getLogger(__name__)


def compute_per_account_stats(
    matches: Iterable[MatchRecord],
    now: int | None = None,
    config: TrackerConfig | None = None,
) -> StatsBundle:
    """Compute the statistics bundle for one account's matches.

    Args:
        matches: Match records in any order
        now: Reference epoch seconds for the volume windows (defaults to
            the current time)
        config: Tilt thresholds; module defaults when omitted

    Returns:
        StatsBundle; the empty bundle when there are no matches
    """
    records = sort_by_ended_at(ensure_records(matches))
    if not records:
        return StatsBundle.empty()

    if now is None:
        now = int(time.time())

    week_ago = now - VOLUME_WEEK_DAYS * SECONDS_PER_DAY
    month_ago = now - VOLUME_MONTH_DAYS * SECONDS_PER_DAY
    volume = {
        "week": sum(1 for m in records if (m.ended_at or 0) >= week_ago),
        "month": sum(1 for m in records if (m.ended_at or 0) >= month_ago),
    }

    bundle = StatsBundle(
        volume=volume,
        rolling_avg={f"g{n}": rolling_average(records, n) for n in ROLLING_WINDOWS},
        percentiles=rating_percentiles(records),
        delta={f"g{n}": rating_delta(records, n) for n in DELTA_WINDOWS},
        tilt=_detect_tilt(records, config),
    )
    logger.debug(
        "Computed stats over %d matches (%d tilt events)", len(records), len(bundle.tilt)
    )
    return bundle


def compute_consolidated_stats(
    matches_by_account: Mapping[object, Iterable[MatchRecord]],
    now: int | None = None,
    config: TrackerConfig | None = None,
) -> ConsolidatedStats:
    """Compute per-account bundles and one bundle over the union of all matches.

    The consolidated bundle treats every account's matches as a single
    timeline; accounts are not weighted against each other.
    """
    if now is None:
        now = int(time.time())

    all_matches: list[MatchRecord] = []
    by_account: dict[object, StatsBundle] = {}
    for account_id, matches in matches_by_account.items():
        records = ensure_records(matches)
        all_matches.extend(records)
        by_account[account_id] = compute_per_account_stats(records, now=now, config=config)

    return ConsolidatedStats(
        by_account=by_account,
        consolidated=compute_per_account_stats(all_matches, now=now, config=config),
    )


def _detect_tilt(records: Sequence[MatchRecord], config: TrackerConfig | None) -> list[TiltEvent]:
    if config is None:
        return detect_tilt_streaks(records)
    return detect_tilt_streaks(
        records,
        min_losses=config.tilt_min_losses,
        elo_drop=config.tilt_elo_drop,
        window=config.tilt_window,
    )


# ---------------------------------------------------------------------------
# Windowed aggregates
# ---------------------------------------------------------------------------


def rolling_average(sorted_matches: Sequence[MatchRecord], n: int) -> float | None:
    """Mean rating_after over the last n matches, skipping missing ratings."""
    ratings = [m.rating_after for m in sorted_matches[-n:] if is_finite(m.rating_after)]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


def rating_delta(sorted_matches: Sequence[MatchRecord], n: int) -> int | None:
    """Latest rating_after minus the rating_after of the first of the last n matches."""
    if len(sorted_matches) < n:
        return None
    current = sorted_matches[-1].rating_after
    earlier = sorted_matches[-n].rating_after
    if not (is_finite(current) and is_finite(earlier)):
        return None
    return round_half_up(current - earlier)


def percentile(sorted_values: Sequence[float], pct: float) -> float:
    """Linearly interpolated percentile of an ascending, non-empty sequence."""
    index = (pct / 100) * (len(sorted_values) - 1)
    lower = int(index)
    upper = min(lower + 1, len(sorted_values) - 1)
    weight = index - lower
    if weight == 0:
        return sorted_values[lower]
    return sorted_values[lower] * (1 - weight) + sorted_values[upper] * weight


def rating_percentiles(
    sorted_matches: Sequence[MatchRecord], sample: int = PERCENTILE_SAMPLE
) -> dict[str, int | None]:
    """p25/p50/p75 of rating_after over the most recent `sample` matches."""
    ratings = sorted(
        m.rating_after for m in sorted_matches[-sample:] if is_finite(m.rating_after)
    )
    if not ratings:
        return {f"p{p}": None for p in PERCENTILES}
    return {f"p{p}": round_half_up(percentile(ratings, p)) for p in PERCENTILES}


# ---------------------------------------------------------------------------
# Tilt detection
# ---------------------------------------------------------------------------


def detect_tilt_streaks(
    sorted_matches: Sequence[MatchRecord],
    min_losses: int = TILT_MIN_LOSSES,
    elo_drop: float = TILT_ELO_DROP,
    window: int = TILT_WINDOW,
) -> list[TiltEvent]:
    """Find losing streaks and fast rating drops in a chronological sequence.

    Loss streaks come first in the result, followed by elo drops. The two
    passes are independent, so one episode can be reported by both.
    """
    return _loss_streaks(sorted_matches, min_losses) + _elo_drops(
        sorted_matches, elo_drop, window
    )


def _loss_streaks(matches: Sequence[MatchRecord], min_losses: int) -> list[TiltEvent]:
    events: list[TiltEvent] = []
    streak: list[MatchRecord] = []

    def flush() -> None:
        if len(streak) >= min_losses:
            events.append(
                TiltEvent(
                    type=TiltType.LOSS_STREAK,
                    from_match=streak[0].match_id,
                    to_match=streak[-1].match_id,
                    losses=len(streak),
                    elo_drop=_streak_elo_drop(streak),
                )
            )

    for match in matches:
        if match.won is False:
            streak.append(match)
            continue
        flush()
        streak.clear()
    flush()

    return events


def _streak_elo_drop(streak: Sequence[MatchRecord]) -> int:
    first, last = streak[0], streak[-1]
    if is_finite(first.rating_before) and is_finite(last.rating_after):
        return round_half_up(first.rating_before - last.rating_after)
    return 0


def _elo_drops(
    matches: Sequence[MatchRecord], threshold: float, window: int
) -> list[TiltEvent]:
    events: list[TiltEvent] = []

    for i, start in enumerate(matches):
        if not is_finite(start.rating_after):
            continue
        for j in range(i + 1, min(i + window, len(matches))):
            end = matches[j]
            if not is_finite(end.rating_after):
                continue
            drop = start.rating_after - end.rating_after
            if drop >= threshold:
                events.append(
                    TiltEvent(
                        type=TiltType.ELO_DROP,
                        from_match=start.match_id,
                        to_match=end.match_id,
                        losses=sum(1 for m in matches[i : j + 1] if m.won is False),
                        elo_drop=round_half_up(drop),
                    )
                )
                break

    return events

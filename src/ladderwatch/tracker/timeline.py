"""Consolidated rating timeline bucketed by day or week."""

from __future__ import annotations

import time
from collections.abc import Iterable
from datetime import UTC, datetime

from ladderwatch.core.constants import SECONDS_PER_DAY, SECONDS_PER_WEEK, Granularity
from ladderwatch.core.utils import is_finite, round_half_up
from ladderwatch.tracker.models import MatchRecord, TimelinePoint, ensure_records


def build_timeline(
    matches: Iterable[MatchRecord],
    granularity: str = Granularity.DAY,
    days: int = 90,
    now: int | None = None,
) -> list[TimelinePoint]:
    """Average and closing rating per bucket over the last `days` days.

    Buckets are aligned on epoch multiples of the bucket size and labelled
    with the UTC date of their start. Matches without a rating are skipped.

    Raises:
        ValueError: for an unknown granularity or a non-positive day count.
    """
    try:
        granularity = Granularity(granularity)
    except ValueError:
        raise ValueError('granularity must be "day" or "week"') from None
    if not is_finite(days) or days <= 0:
        raise ValueError("days must be a positive number")

    if now is None:
        now = int(time.time())
    since = now - days * SECONDS_PER_DAY
    size = SECONDS_PER_DAY if granularity is Granularity.DAY else SECONDS_PER_WEEK

    # bucket start -> (ratings, last ended_at, last rating)
    buckets: dict[int, tuple[list[float], int, float]] = {}
    for match in ensure_records(matches):
        if not match.is_finished or match.ended_at < since or not is_finite(match.rating_after):
            continue
        start = (match.ended_at // size) * size
        ratings, last_ts, last_rating = buckets.get(start, ([], 0, match.rating_after))
        ratings.append(match.rating_after)
        if match.ended_at > last_ts:
            last_ts, last_rating = match.ended_at, match.rating_after
        buckets[start] = (ratings, last_ts, last_rating)

    return [
        TimelinePoint(
            bucket=datetime.fromtimestamp(start, UTC).date().isoformat(),
            avg_elo=round_half_up(sum(ratings) / len(ratings)),
            last_elo=last_rating,
        )
        for start, (ratings, _, last_rating) in sorted(buckets.items())
    ]

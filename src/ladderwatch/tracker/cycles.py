"""Elo cycle detection: how long it took to climb between rating thresholds."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from ladderwatch.core.constants import CYCLE_THRESHOLDS, SECONDS_PER_DAY
from ladderwatch.core.utils import is_finite, sort_by_ended_at
from ladderwatch.tracker.models import EloCycle, MatchRecord, ensure_records

logger = logging.getLogger(__name__)


def compute_cycles(
    matches: Iterable[MatchRecord], thresholds: Sequence[int] = CYCLE_THRESHOLDS
) -> list[EloCycle]:
    """Find the climb from each threshold to the next one.

    For every adjacent pair (lo, hi) the cycle starts at the first match
    finishing at or above lo and ends at the first later match finishing at
    or above hi. Pairs without both crossings are skipped. Cycles are
    computed independently and may share matches.
    """
    records = sort_by_ended_at(ensure_records(matches))
    if not records:
        return []

    cycles: list[EloCycle] = []
    for lo, hi in zip(thresholds, thresholds[1:]):
        start = _first_at_or_above(records, lo, 0)
        if start is None:
            continue
        end = _first_at_or_above(records, hi, start + 1)
        if end is None:
            continue

        elapsed = records[end].ended_at - records[start].ended_at
        cycles.append(
            EloCycle(
                elo_from=lo,
                elo_to=hi,
                games_in_cycle=end - start + 1,
                days_in_cycle=math.ceil(elapsed / SECONDS_PER_DAY),
            )
        )

    logger.debug("Found %d elo cycles over %d matches", len(cycles), len(records))
    return cycles


def _first_at_or_above(records: Sequence[MatchRecord], rating: float, begin: int) -> int | None:
    for idx in range(begin, len(records)):
        value = records[idx].rating_after
        if is_finite(value) and value >= rating:
            return idx
    return None

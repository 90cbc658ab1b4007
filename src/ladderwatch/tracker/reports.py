"""
Roster and player reports assembled from the statistics engine.

These builders produce the JSON-ready payloads served to the community
site: roster volume, the roster summary and a single player's history.
They take already-loaded matches and perform no I/O.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from datetime import tzinfo
from typing import Any

from ladderwatch.core.config import TrackerConfig
from ladderwatch.core.constants import HISTORY_PERIODS, SECONDS_PER_DAY
from ladderwatch.core.utils import PerformanceMonitor, sort_by_ended_at
from ladderwatch.tracker.models import MatchRecord, ensure_records
from ladderwatch.tracker.patterns import analyze_game_patterns
from ladderwatch.tracker.progress import (
    calculate_period_progress,
    calculate_volume_progress_correlation,
)
from ladderwatch.tracker.roster import NicknameCache, TrackedAccount, group_by_account
from ladderwatch.tracker.stats import compute_consolidated_stats, compute_per_account_stats

logger = logging.getLogger(__name__)

SORT_ORDERS = ("asc", "desc")


def build_volume_report(
    accounts: Sequence[TrackedAccount],
    matches: Iterable[MatchRecord],
    now: int | None = None,
) -> dict[str, Any]:
    """Games played in the last week/month per account and for the roster."""
    records = ensure_records(matches)
    grouped = group_by_account(accounts, records)
    now = int(time.time()) if now is None else now

    by_account = []
    for account in accounts:
        volume = compute_per_account_stats(grouped[account.id], now=now).volume
        by_account.append({"profile_id": account.id, **volume})

    consolidated = compute_per_account_stats(records, now=now).volume
    return {"byAccount": by_account, "consolidated": dict(consolidated)}


def build_summary(
    accounts: Sequence[TrackedAccount],
    matches: Iterable[MatchRecord],
    now: int | None = None,
    nicknames: NicknameCache | None = None,
    config: TrackerConfig | None = None,
) -> dict[str, Any]:
    """Full statistics per tracked account plus the consolidated roster bundle.

    Accounts are reported in roster order. When a NicknameCache is given each
    entry also carries a ``player`` block with the resolved nickname.
    """
    with PerformanceMonitor("roster summary") as monitor:
        grouped = group_by_account(accounts, matches)
        stats = compute_consolidated_stats(grouped, now=now, config=config)

        by_account = []
        for account in accounts:
            bundle = stats.by_account[account.id]
            entry: dict[str, Any] = {"profile_id": account.id, **bundle.to_dict()}
            if nicknames is not None:
                entry["player"] = {"nick": nicknames.lookup(account)}
            by_account.append(entry)

    return {
        "byAccount": by_account,
        "consolidated": stats.consolidated.to_dict(),
        "meta": {
            "processingTime": round(monitor.elapsed_ms),
            "includeDetails": nicknames is not None,
            "accountsProcessed": len(by_account),
        },
    }


def build_player_history(
    profile_id: int,
    matches: Iterable[MatchRecord],
    from_ts: int | None = None,
    to_ts: int | None = None,
    limit: int | None = None,
    sort: str = "desc",
    now: int | None = None,
    tz: tzinfo | None = None,
    player: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """One player's matches with stats, period progress, correlation and patterns.

    ``limit`` keeps the most recent matches; ``sort`` only affects the order
    of the returned match list, every analysis runs chronologically.

    Raises:
        ValueError: for an unknown sort order or a non-positive limit.
    """
    if sort not in SORT_ORDERS:
        raise ValueError(f"sort must be one of {SORT_ORDERS}, got {sort!r}")
    if limit is not None and limit <= 0:
        raise ValueError("limit must be a positive integer")

    now = int(time.time()) if now is None else now
    selected = [
        m
        for m in sort_by_ended_at(ensure_records(matches), reverse=True)
        if m.profile_id == profile_id
        and (from_ts is None or m.ended_at >= from_ts)
        and (to_ts is None or m.ended_at <= to_ts)
    ]
    if limit is not None:
        selected = selected[:limit]

    chronological = list(reversed(selected))
    progress = {
        name: calculate_period_progress(chronological, now - days * SECONDS_PER_DAY, now).to_dict()
        for name, days in HISTORY_PERIODS.items()
    }
    progress["overall"] = calculate_period_progress(chronological).to_dict()
    correlation = calculate_volume_progress_correlation(chronological)

    logger.debug("Built history for profile %s over %d matches", profile_id, len(selected))

    return {
        "profile_id": profile_id,
        "player": player,
        "total_matches": len(selected),
        "matches": [m.to_dict() for m in (chronological if sort == "asc" else selected)],
        "stats": compute_per_account_stats(chronological, now=now).to_dict(),
        "progress": progress,
        "volume_progress_correlation": correlation.to_dict(),
        "game_patterns": analyze_game_patterns(chronological, tz=tz).to_dict(),
        "period": {"from": from_ts, "to": to_ts, "limit": limit, "sort": sort},
    }

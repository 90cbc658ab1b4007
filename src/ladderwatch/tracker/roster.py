"""Tracked roster accounts and the match-set helpers built around them."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ladderwatch.core.config import CacheConfig
from ladderwatch.core.constants import DEFAULT_LADDER
from ladderwatch.core.utils import sort_by_ended_at
from ladderwatch.infra.cache import TTLCache
from ladderwatch.tracker.models import MatchRecord, ensure_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackedAccount:
    """A community member's ladder account."""

    id: int
    steam: str
    nick: str | None = None


def parse_roster(entries: Iterable[Mapping[str, Any]]) -> list[TrackedAccount]:
    """Turn raw roster entries into accounts.

    Entries without both an id and a steam id are dropped, as are entries
    whose id is not numeric.
    """
    accounts = []
    for entry in entries:
        if not entry or not entry.get("id") or not entry.get("steam"):
            continue
        try:
            account_id = int(entry["id"])
        except (TypeError, ValueError):
            logger.warning("Skipping roster entry with non-numeric id %r", entry.get("id"))
            continue
        accounts.append(
            TrackedAccount(id=account_id, steam=str(entry["steam"]), nick=entry.get("nick") or None)
        )
    return accounts


def filter_matches(
    matches: Iterable[MatchRecord],
    ladder: str | None = DEFAULT_LADDER,
    from_ts: int | None = None,
    to_ts: int | None = None,
) -> list[MatchRecord]:
    """Keep matches of one ladder inside an inclusive time window, newest first.

    Pass ladder=None to keep every ladder.
    """
    kept = [
        m
        for m in ensure_records(matches)
        if (ladder is None or m.ladder == ladder)
        and (from_ts is None or (m.ended_at or 0) >= from_ts)
        and (to_ts is None or (m.ended_at or 0) <= to_ts)
    ]
    return sort_by_ended_at(kept, reverse=True)


def group_by_account(
    accounts: Iterable[TrackedAccount], matches: Iterable[MatchRecord]
) -> dict[int, list[MatchRecord]]:
    """Split matches per tracked account; untracked profiles are dropped."""
    grouped: dict[int, list[MatchRecord]] = {account.id: [] for account in accounts}
    for match in ensure_records(matches):
        if match.profile_id in grouped:
            grouped[match.profile_id].append(match)
    return grouped


class NicknameCache:
    """profile_id -> nickname lookups with expiry.

    Wraps an injected TTLCache so callers control lifetime and sharing;
    roster nicknames take precedence over fetched aliases.
    """

    def __init__(
        self,
        cache: TTLCache | None = None,
        fetch: Callable[[int], str | None] | None = None,
        config: CacheConfig | None = None,
    ) -> None:
        if cache is None:
            config = config or CacheConfig()
            cache = TTLCache(
                ttl_seconds=config.nickname_ttl_seconds, max_entries=config.max_entries
            )
        self._cache = cache
        self._fetch = fetch

    def remember(self, profile_id: int, nickname: str) -> None:
        self._cache.set(profile_id, nickname)

    def lookup(self, account: TrackedAccount | int) -> str:
        """Resolve a nickname, falling back to "Unknown"."""
        if isinstance(account, TrackedAccount):
            if account.nick:
                return account.nick
            profile_id = account.id
        else:
            profile_id = account

        cached = self._cache.get(profile_id)
        if cached:
            return cached

        if self._fetch is not None:
            try:
                fetched = self._fetch(profile_id)
            except Exception as e:
                logger.warning("Nickname lookup failed for profile %s: %s", profile_id, e)
                fetched = None
            if fetched:
                self._cache.set(profile_id, fetched)
                return fetched

        return "Unknown"

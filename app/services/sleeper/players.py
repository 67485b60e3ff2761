from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from typing import Dict, Hashable, List, Optional, Tuple

from app.schemas.player import Freshness, NormalizedPlayer, OwnershipSnapshot
from app.services.cache import TTLCache, key_tuple
from app.services.sleeper.client import SleeperAPIError, SleeperClient
from app.services.sleeper.fallback import POSITIONS, fallback_players, fallback_trending
from app.services.sleeper.parsers import attach_stats, parse_players_payload

logger = logging.getLogger(__name__)

ALL_POSITIONS = "ALL"
DEFAULT_LIMIT = 200
TRENDING_LIMIT = 10
MAX_TREND_CHANGE = 20.0

# Engagement figures shown on the landing page; Sleeper does not publish them.
ACTIVE_LEAGUES_ESTIMATE = 250_000
WEEKLY_UPDATES_ESTIMATE = 50_000


@dataclass(frozen=True)
class DirectoryResult:
    players: List[NormalizedPlayer]
    position: str
    season: str
    freshness: Freshness          # live | cached | fallback
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.freshness == "fallback"


def resolve_position(position: Optional[str]) -> str:
    """Normalized position filter; anything outside POSITIONS and "ALL" is a ValueError."""
    p = (position or "").strip().upper() or ALL_POSITIONS
    if p != ALL_POSITIONS and p not in POSITIONS:
        raise ValueError(f"Unknown position {position!r}; expected one of {', '.join([*POSITIONS, ALL_POSITIONS])}")
    return p


class PlayerDirectory:
    """
    Loads the NFL player universe from Sleeper, normalizes it and keeps one
    cached view per (position, season).

    Upstream failures never escape load_all(): callers get the fallback board
    with freshness="fallback" instead, and the cache is left as it was.
    """

    def __init__(
        self,
        client: SleeperClient,
        cache: TTLCache,
        *,
        season: str,
        ttl_seconds: float = 10 * 60,
        rng: Optional[random.Random] = None,
        fake_mode: bool = False,
        coalesce: bool = False,
    ):
        self.client = client
        self.cache = cache
        self.season = season
        self.ttl_seconds = ttl_seconds
        self.rng = rng or random.Random()
        self.fake_mode = fake_mode
        self.coalesce = coalesce
        self._key_locks: Dict[Hashable, threading.Lock] = {}
        self._key_locks_guard = threading.Lock()

    # ------------------------------------------------------------
    # directory
    # ------------------------------------------------------------

    def cache_key(self, position: Optional[str]) -> Tuple[str, str]:
        return key_tuple(resolve_position(position), self.season)

    def load_directory(self, position: Optional[str] = None, force_refresh: bool = False) -> DirectoryResult:
        pos = resolve_position(position)
        key = self.cache_key(pos)

        if self.fake_mode:
            return DirectoryResult(fallback_players(pos), pos, self.season, "fallback", "fake mode")

        if not force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                return DirectoryResult(list(cached), pos, self.season, "cached")

        if not self.coalesce:
            return self._fetch(pos, key)

        with self._lock_for(key):
            # another thread may have filled the entry while we waited
            if not force_refresh:
                cached = self.cache.get(key)
                if cached is not None:
                    return DirectoryResult(list(cached), pos, self.season, "cached")
            return self._fetch(pos, key)

    def load_all(self, position: Optional[str] = None, force_refresh: bool = False) -> List[NormalizedPlayer]:
        return self.load_directory(position, force_refresh).players

    def _fetch(self, pos: str, key: Tuple[str, str]) -> DirectoryResult:
        try:
            payload = self.client.get_players()
            players = parse_players_payload(payload, position=pos, rng=self.rng)
        except SleeperAPIError as e:
            logger.warning("Sleeper players fetch failed (position=%s): %s; serving fallback board", pos, e)
            return DirectoryResult(fallback_players(pos), pos, self.season, "fallback", str(e))

        # the cache keeps its own immutable copy
        self.cache.put(key, tuple(players), self.ttl_seconds)
        logger.info("Loaded %d players from Sleeper (position=%s, season=%s)", len(players), pos, self.season)
        return DirectoryResult(players, pos, self.season, "live")

    def _lock_for(self, key: Hashable) -> threading.Lock:
        with self._key_locks_guard:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock

    # ------------------------------------------------------------
    # derived views
    # ------------------------------------------------------------

    def search_players(self, term: str, position: Optional[str] = None, limit: int = DEFAULT_LIMIT) -> List[NormalizedPlayer]:
        q = (term or "").strip().lower()
        players = self.load_all(position)
        if not q:
            return players[:limit]
        return [
            p for p in players
            if q in p.full_name.lower()
            or q in p.first_name.lower()
            or q in p.last_name.lower()
            or (p.team is not None and q in p.team.lower())
        ][:limit]

    def players_by_team(self, team: str, limit: int = DEFAULT_LIMIT) -> List[NormalizedPlayer]:
        abbr = (team or "").strip().upper()
        return [p for p in self.load_all() if p.team == abbr][:limit]

    def player_stats(
        self,
        position: Optional[str] = None,
        week: Optional[int] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> List[NormalizedPlayer]:
        players = self.load_all(position)[:limit]
        if not week:
            return players
        try:
            stats = self.client.get_week_stats(self.season, week)
        except SleeperAPIError as e:
            logger.info("Stats not available for week %s: %s", week, e)
            return players
        return attach_stats(players, stats)

    def trending_players(self, limit: int = TRENDING_LIMIT) -> List[NormalizedPlayer]:
        """
        Most added / dropped players over the last day. Ownership change is the
        add (or drop) count scaled to a percentage and capped at 20.
        """
        directory = self.load_directory()
        if directory.degraded:
            # Sleeper ids never match the placeholder board
            return fallback_trending()

        try:
            adds = self.client.get_trending("add")[:limit]
            drops = self.client.get_trending("drop")[:limit]
        except SleeperAPIError as e:
            logger.warning("Sleeper trending fetch failed: %s; serving fallback trending list", e)
            return fallback_trending()

        add_counts = {t["player_id"]: t["count"] for t in adds}
        drop_counts = {t["player_id"]: t["count"] for t in drops}

        out: List[NormalizedPlayer] = []
        for p in directory.players:
            if p.id in add_counts:
                change = min(add_counts[p.id] / 100, MAX_TREND_CHANGE)
            elif p.id in drop_counts:
                change = -min(drop_counts[p.id] / 100, MAX_TREND_CHANGE)
            else:
                continue
            ownership = OwnershipSnapshot(percent_owned=p.ownership.percent_owned, percent_change=change)
            # never mutate what the cache holds
            out.append(p.model_copy(update={"ownership": ownership}))
        return out

    def league_summary(self) -> dict:
        result = self.load_directory()
        return {
            "total_players": len(result.players),
            "active_leagues": ACTIVE_LEAGUES_ESTIMATE,
            "weekly_updates": WEEKLY_UPDATES_ESTIMATE,
            "freshness": result.freshness,
        }

    # ------------------------------------------------------------
    # cache admin
    # ------------------------------------------------------------

    def invalidate_all(self) -> None:
        self.cache.invalidate_all()
        logger.info("Player directory cache cleared")

    def cache_status(self) -> Dict[str, dict]:
        return self.cache.status()

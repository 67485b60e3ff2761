from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

import pytest

from app.schemas.player import NormalizedPlayer, OwnershipSnapshot
from app.services.cache import TTLCache
from app.services.ranking.metrics import MetricsCalculator
from app.services.sleeper.client import SleeperAPIError
from app.services.sleeper.players import PlayerDirectory

SEASON = "2025"


def raw_player(
    player_id: str,
    full_name: Optional[str],
    position: Optional[str],
    *,
    rank: Optional[int] = None,
    team: Optional[str] = "BUF",
    active: bool = True,
    sport: str = "nfl",
    injury: Optional[str] = None,
    fantasy_positions: Optional[List[str]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    first, _, last = (full_name or "").partition(" ")
    node = {
        "player_id": player_id,
        "full_name": full_name,
        "first_name": first or None,
        "last_name": last or None,
        "team": team,
        "position": position,
        "fantasy_positions": fantasy_positions if fantasy_positions is not None else ([position] if position else None),
        "age": 26,
        "years_exp": 4,
        "injury_status": injury,
        "status": "Active" if active else "Inactive",
        "search_rank": rank,
        "sport": sport,
        "active": active,
    }
    node.update(extra)
    return node


def sample_players() -> Dict[str, Dict[str, Any]]:
    players = [
        raw_player("4984", "Josh Allen", "QB", rank=3, team="BUF"),
        raw_player("4046", "Patrick Mahomes", "QB", rank=8, team="KC"),
        raw_player("4034", "Christian McCaffrey", "RB", rank=1, team="SF", injury="Questionable"),
        raw_player("9509", "Bijan Robinson", "RB", rank=5, team="ATL"),
        raw_player("3321", "Tyreek Hill", "WR", rank=2, team="MIA"),
        raw_player("6794", "Justin Jefferson", "WR", rank=2, team="MIN"),
        raw_player("4866", "Saquon Barkley", "RB", rank=None, team="PHI"),
        raw_player("5012", "Mark Andrews", "TE", rank=60, team="BAL"),
        raw_player("8150", "Taysom Hill", "TE", rank=140, team="NO", fantasy_positions=["TE", "QB"]),
        raw_player("1001", "Retired Guy", "WR", rank=4, active=False),
        raw_player("1002", "Hockey Player", "C", rank=1, sport="nhl"),
        raw_player("1003", None, "WR", rank=7),
        raw_player("1004", "No Position", None, rank=9),
        raw_player("1005", "Bad Rank", "WR", search_rank="not-a-number"),
    ]
    out = {p["player_id"]: p for p in players}
    # Sleeper ships team defenses without full_name
    out["BUF"] = raw_player("BUF", None, "DEF", rank=250, first_name="Buffalo", last_name="Bills")
    return out


class FakeSleeperClient:
    def __init__(
        self,
        players: Optional[Dict[str, Any]] = None,
        *,
        adds: Optional[List[dict]] = None,
        drops: Optional[List[dict]] = None,
        stats: Optional[Dict[str, Dict[str, float]]] = None,
        fail: bool = False,
    ):
        self.players = sample_players() if players is None else players
        self.adds = adds or []
        self.drops = drops or []
        self.stats = stats
        self.fail = fail
        self.player_calls = 0
        self.trending_calls = 0
        self.stats_calls = 0

    def _maybe_fail(self):
        if self.fail:
            raise SleeperAPIError("Sleeper error 500 on https://api.sleeper.app/v1/players/nfl :: boom", status_code=500)

    def get_players(self, sport: str = "nfl"):
        self.player_calls += 1
        self._maybe_fail()
        return self.players

    def get_trending(self, kind: str = "add", **_):
        self.trending_calls += 1
        self._maybe_fail()
        return list(self.adds if kind == "add" else self.drops)

    def get_week_stats(self, season: str, week: int, **_):
        self.stats_calls += 1
        if self.stats is None:
            raise SleeperAPIError("Sleeper error 404 on stats", status_code=404)
        return self.stats


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache(default_ttl_seconds=600, clock=clock)


@pytest.fixture
def client() -> FakeSleeperClient:
    return FakeSleeperClient()


@pytest.fixture
def directory(client, cache) -> PlayerDirectory:
    return PlayerDirectory(client, cache, season=SEASON, ttl_seconds=600, rng=random.Random(0))


@pytest.fixture
def calc() -> MetricsCalculator:
    return MetricsCalculator(random.Random(42))


def make_player(position="RB", rank=10, owned=50.0, change=0.0, injury=None, **kw) -> NormalizedPlayer:
    return NormalizedPlayer(
        id=kw.pop("id", "p1"),
        full_name=kw.pop("full_name", "Test Player"),
        position=position,
        search_rank=rank,
        injury_status=injury,
        ownership=OwnershipSnapshot(percent_owned=owned, percent_change=change),
        **kw,
    )

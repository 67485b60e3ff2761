"""
Placeholder data served when Sleeper is unreachable, so the UI never renders
an empty board. Everything here is deterministic: same input, same list.
"""
from __future__ import annotations

import random
from typing import Dict, List, Optional

from app.schemas.player import NormalizedPlayer, OwnershipSnapshot

FALLBACK_SIZE = 200
_FALLBACK_SEED = 20240901

POSITIONS: Dict[str, str] = {
    "QB": "QB",
    "RB": "RB",
    "WR": "WR",
    "TE": "TE",
    "K": "K",
    "DEF": "D/ST",
}

NFL_TEAMS: Dict[str, Dict[str, str]] = {
    "ARI": {"abbrev": "ARI", "name": "Cardinals", "location": "Arizona"},
    "ATL": {"abbrev": "ATL", "name": "Falcons", "location": "Atlanta"},
    "BAL": {"abbrev": "BAL", "name": "Ravens", "location": "Baltimore"},
    "BUF": {"abbrev": "BUF", "name": "Bills", "location": "Buffalo"},
    "CAR": {"abbrev": "CAR", "name": "Panthers", "location": "Carolina"},
    "CHI": {"abbrev": "CHI", "name": "Bears", "location": "Chicago"},
    "CIN": {"abbrev": "CIN", "name": "Bengals", "location": "Cincinnati"},
    "CLE": {"abbrev": "CLE", "name": "Browns", "location": "Cleveland"},
    "DAL": {"abbrev": "DAL", "name": "Cowboys", "location": "Dallas"},
    "DEN": {"abbrev": "DEN", "name": "Broncos", "location": "Denver"},
    "DET": {"abbrev": "DET", "name": "Lions", "location": "Detroit"},
    "GB": {"abbrev": "GB", "name": "Packers", "location": "Green Bay"},
    "HOU": {"abbrev": "HOU", "name": "Texans", "location": "Houston"},
    "IND": {"abbrev": "IND", "name": "Colts", "location": "Indianapolis"},
    "JAX": {"abbrev": "JAX", "name": "Jaguars", "location": "Jacksonville"},
    "KC": {"abbrev": "KC", "name": "Chiefs", "location": "Kansas City"},
    "LV": {"abbrev": "LV", "name": "Raiders", "location": "Las Vegas"},
    "LAC": {"abbrev": "LAC", "name": "Chargers", "location": "Los Angeles"},
    "LAR": {"abbrev": "LAR", "name": "Rams", "location": "Los Angeles"},
    "MIA": {"abbrev": "MIA", "name": "Dolphins", "location": "Miami"},
    "MIN": {"abbrev": "MIN", "name": "Vikings", "location": "Minnesota"},
    "NE": {"abbrev": "NE", "name": "Patriots", "location": "New England"},
    "NO": {"abbrev": "NO", "name": "Saints", "location": "New Orleans"},
    "NYG": {"abbrev": "NYG", "name": "Giants", "location": "New York"},
    "NYJ": {"abbrev": "NYJ", "name": "Jets", "location": "New York"},
    "PHI": {"abbrev": "PHI", "name": "Eagles", "location": "Philadelphia"},
    "PIT": {"abbrev": "PIT", "name": "Steelers", "location": "Pittsburgh"},
    "SF": {"abbrev": "SF", "name": "49ers", "location": "San Francisco"},
    "SEA": {"abbrev": "SEA", "name": "Seahawks", "location": "Seattle"},
    "TB": {"abbrev": "TB", "name": "Buccaneers", "location": "Tampa Bay"},
    "TEN": {"abbrev": "TEN", "name": "Titans", "location": "Tennessee"},
    "WAS": {"abbrev": "WAS", "name": "Commanders", "location": "Washington"},
}

# Pinned to ranks 1..3 of the fallback board
ANCHOR_PLAYERS: List[NormalizedPlayer] = [
    NormalizedPlayer(
        id="josh_allen", full_name="Josh Allen", first_name="Josh", last_name="Allen",
        team="BUF", position="QB", fantasy_positions=["QB"], age=27, years_exp=6,
        search_rank=1, depth_chart_order=1,
        ownership=OwnershipSnapshot(percent_owned=99.8, percent_change=0.1),
    ),
    NormalizedPlayer(
        id="christian_mccaffrey", full_name="Christian McCaffrey", first_name="Christian", last_name="McCaffrey",
        team="SF", position="RB", fantasy_positions=["RB"], age=27, years_exp=7,
        search_rank=2, depth_chart_order=1,
        ownership=OwnershipSnapshot(percent_owned=99.9, percent_change=0.0),
    ),
    NormalizedPlayer(
        id="tyreek_hill", full_name="Tyreek Hill", first_name="Tyreek", last_name="Hill",
        team="MIA", position="WR", fantasy_positions=["WR"], age=29, years_exp=8,
        search_rank=3, depth_chart_order=1,
        ownership=OwnershipSnapshot(percent_owned=99.5, percent_change=0.2),
    ),
]

_TRENDING_FALLBACK: List[NormalizedPlayer] = [
    NormalizedPlayer(
        id="101", full_name="Gus Edwards", first_name="Gus", last_name="Edwards",
        team="BAL", position="RB", fantasy_positions=["RB"], age=28, years_exp=6,
        search_rank=150, depth_chart_order=2,
        ownership=OwnershipSnapshot(percent_owned=45.2, percent_change=15.8),
    ),
    NormalizedPlayer(
        id="102", full_name="Elijah Moore", first_name="Elijah", last_name="Moore",
        team="CLE", position="WR", fantasy_positions=["WR"], age=24, years_exp=3,
        search_rank=200, depth_chart_order=3,
        ownership=OwnershipSnapshot(percent_owned=23.1, percent_change=12.4),
    ),
]


def _build_pool() -> List[NormalizedPlayer]:
    rng = random.Random(_FALLBACK_SEED)
    positions = list(POSITIONS)
    teams = list(NFL_TEAMS)
    pool: List[NormalizedPlayer] = []
    for i in range(1, FALLBACK_SIZE + 1):
        position = positions[(i - 1) % len(positions)]
        pool.append(
            NormalizedPlayer(
                id=str(i),
                full_name=f"Player {i}",
                first_name="Player",
                last_name=str(i),
                team=teams[rng.randrange(len(teams))],
                position=position,
                fantasy_positions=[position],
                age=20 + rng.randrange(15),
                years_exp=rng.randrange(15),
                injury_status="Questionable" if rng.random() > 0.9 else None,
                search_rank=i,
                depth_chart_order=rng.randrange(3) + 1,
                ownership=OwnershipSnapshot(
                    percent_owned=min(100.0, max(0.0, 100 - i * 0.5 + rng.random() * 20)),
                    percent_change=(rng.random() - 0.5) * 20,
                ),
            )
        )
    for idx, anchor in enumerate(ANCHOR_PLAYERS):
        pool[idx] = anchor
    return pool


_POOL: List[NormalizedPlayer] = _build_pool()


def fallback_players(position: Optional[str] = None) -> List[NormalizedPlayer]:
    """The fixed 200-player board, narrowed to `position` when one is given."""
    if not position or position == "ALL":
        return list(_POOL)
    return [p for p in _POOL if p.position == position or position in p.fantasy_positions]


def fallback_trending() -> List[NormalizedPlayer]:
    return list(_TRENDING_FALLBACK)

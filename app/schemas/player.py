from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

Freshness = Literal["live", "cached", "fallback"]


class SleeperPlayer(BaseModel):
    """Raw record as Sleeper returns it from /players/nfl (only the fields we use)."""
    model_config = ConfigDict(extra="ignore")

    player_id: Optional[str] = None
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    team: Optional[str] = None            # None for free agents
    position: Optional[str] = None
    fantasy_positions: Optional[List[str]] = None
    age: Optional[int] = None
    years_exp: Optional[int] = None
    injury_status: Optional[str] = None   # "Questionable", "Out", ...
    status: Optional[str] = None
    search_rank: Optional[int] = None     # lower = more notable
    depth_chart_order: Optional[int] = None
    sport: Optional[str] = None
    active: Optional[bool] = None
    ownership: Optional[Dict[str, Any]] = None  # not sent by Sleeper; honored when present


class OwnershipSnapshot(BaseModel):
    percent_owned: float = Field(..., ge=0.0, le=100.0)
    percent_change: float = 0.0


class NormalizedPlayer(BaseModel):
    id: str
    full_name: str = Field(..., min_length=1)
    first_name: str = ""
    last_name: str = ""
    team: Optional[str] = None
    position: str = Field(..., min_length=1)
    fantasy_positions: List[str] = []
    age: Optional[int] = None
    years_exp: Optional[int] = None
    injury_status: Optional[str] = None
    is_active: bool = True
    search_rank: Optional[int] = None
    depth_chart_order: Optional[int] = None
    ownership: OwnershipSnapshot
    stats: Optional[Dict[str, float]] = None

    model_config = ConfigDict(frozen=True)


class PlayerDirectoryResponse(BaseModel):
    items: List[NormalizedPlayer]
    position: str
    season: str
    freshness: Freshness
    total: int
    error: Optional[str] = None


class LeagueSummary(BaseModel):
    total_players: int
    active_leagues: int
    weekly_updates: int
    freshness: Freshness

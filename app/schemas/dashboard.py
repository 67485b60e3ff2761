from __future__ import annotations
from datetime import datetime
from typing import List, Literal
from pydantic import BaseModel

from app.schemas.player import Freshness


class InjuryReportItem(BaseModel):
    player_id: str
    player_name: str
    team: str
    position: str
    status: str
    injury_type: str
    weekly_impact: int
    return_timeline: str


class OwnershipTrendItem(BaseModel):
    player_id: str
    player_name: str
    position: str
    team: str
    percent_owned: float
    percent_started: float
    add_drop_trend: float
    trend: str


class InjuryReport(BaseModel):
    freshness: Freshness
    items: List[InjuryReportItem]


class AllowedPoints(BaseModel):
    qb: float
    rb: float
    wr: float
    te: float


class TeamMatchup(BaseModel):
    team: str
    opponent: str           # "vs MIA" / "@ BUF"
    difficulty: Literal["Easy", "Medium", "Hard"]
    projected_points: float
    defensive_rank: int     # 1 = toughest defense
    allowed_points: AllowedPoints


class PlayerNewsItem(BaseModel):
    player_id: str
    headline: str
    summary: str
    impact: Literal["High", "Medium", "Low"]
    timestamp: datetime
    source: str = "Sleeper"


class ByeWeek(BaseModel):
    week: int
    teams: List[str]

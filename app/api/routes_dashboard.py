# app/api/routes_dashboard.py
from __future__ import annotations

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.deps import get_calculator, get_directory, get_position
from app.schemas.dashboard import ByeWeek, InjuryReport, OwnershipTrendItem, PlayerNewsItem, TeamMatchup
from app.services.dashboard import (
    NEWS_LIMIT,
    bye_weeks,
    current_week,
    injury_report,
    ownership_trends,
    player_news,
    positional_matchups,
)
from app.services.ranking.metrics import MetricsCalculator
from app.services.sleeper.players import PlayerDirectory

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/injuries", response_model=InjuryReport)
def injuries(directory: PlayerDirectory = Depends(get_directory)):
    result = directory.load_directory()
    return InjuryReport(freshness=result.freshness, items=injury_report(result.players))


@router.get("/ownership", response_model=List[OwnershipTrendItem])
def ownership(
    directory: PlayerDirectory = Depends(get_directory),
    calc: MetricsCalculator = Depends(get_calculator),
):
    return ownership_trends(directory.trending_players(), calc)


@router.get("/matchups", response_model=List[TeamMatchup], summary="Per-team matchup outlook for a position")
def matchups(
    position: Annotated[str, Depends(get_position)],
    directory: PlayerDirectory = Depends(get_directory),
    calc: MetricsCalculator = Depends(get_calculator),
):
    return positional_matchups(directory.load_all(position), calc.rng, position)


@router.get("/news", response_model=List[PlayerNewsItem], summary="Latest player news")
def news(
    player_id: Optional[str] = None,
    limit: Annotated[int, Query(ge=1, le=NEWS_LIMIT)] = NEWS_LIMIT,
    directory: PlayerDirectory = Depends(get_directory),
    calc: MetricsCalculator = Depends(get_calculator),
):
    week = current_week(season=int(directory.season))
    items = player_news(directory.load_all(), week, calc.rng, player_id=player_id, limit=limit)
    if player_id is not None and not items:
        raise HTTPException(status_code=404, detail=f"No player with id={player_id}")
    return items


@router.get("/byes", response_model=List[ByeWeek])
def byes():
    return bye_weeks()

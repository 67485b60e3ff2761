# app/api/routes_players.py

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Response

from app.deps import get_directory, get_position
from app.schemas.player import LeagueSummary, NormalizedPlayer, PlayerDirectoryResponse
from app.services.sleeper.players import DirectoryResult, PlayerDirectory

router = APIRouter(prefix="/players", tags=["players"])

PositionQ = Annotated[str, Depends(get_position)]


def _stamp(response: Response, result: DirectoryResult) -> None:
    response.headers["X-Cache"] = "HIT" if result.freshness == "cached" else "MISS"
    response.headers["X-Data-Freshness"] = result.freshness


# ------------------------------------------------------------
# STATIC ROUTES FIRST (avoid collisions with dynamic paths)
# ------------------------------------------------------------

@router.get(
    "",
    response_model=PlayerDirectoryResponse,
    summary="Player directory",
    description=(
        "Active NFL players sorted by Sleeper search rank. Served from a 10 minute cache "
        "unless force_refresh is set. freshness=fallback means Sleeper was unreachable "
        "and the board is placeholder data."
    ),
)
def list_players(
    response: Response,
    position: PositionQ,
    force_refresh: bool = False,
    limit: Annotated[Optional[int], Query(ge=1, le=5000)] = None,
    directory: PlayerDirectory = Depends(get_directory),
):
    result = directory.load_directory(position, force_refresh=force_refresh)
    _stamp(response, result)
    items = result.players[:limit] if limit else result.players
    return PlayerDirectoryResponse(
        items=items,
        position=result.position,
        season=result.season,
        freshness=result.freshness,
        total=len(result.players),
        error=result.error,
    )


@router.get("/search", response_model=List[NormalizedPlayer], summary="Search players by name or team")
def search_players_route(
    q: Annotated[str, Query(min_length=1, description="Free-text search (name/team)")],
    position: PositionQ,
    limit: Annotated[int, Query(ge=1, le=200)] = 200,
    directory: PlayerDirectory = Depends(get_directory),
):
    return directory.search_players(q, position=position, limit=limit)


@router.get("/trending", response_model=List[NormalizedPlayer], summary="Most added / dropped players")
def trending_players_route(
    limit: Annotated[int, Query(ge=1, le=25)] = 10,
    directory: PlayerDirectory = Depends(get_directory),
):
    return directory.trending_players(limit=limit)


@router.get("/stats", response_model=List[NormalizedPlayer], summary="Top players with weekly stat lines")
def player_stats_route(
    position: PositionQ,
    week: Annotated[Optional[int], Query(ge=1, le=18)] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 200,
    directory: PlayerDirectory = Depends(get_directory),
):
    return directory.player_stats(position=position, week=week, limit=limit)


@router.get("/summary", response_model=LeagueSummary)
def league_summary_route(directory: PlayerDirectory = Depends(get_directory)):
    return directory.league_summary()


@router.get("/cache", tags=["debug"])
def cache_status_route(directory: PlayerDirectory = Depends(get_directory)):
    return directory.cache_status()


@router.delete("/cache", tags=["debug"])
def cache_clear_route(directory: PlayerDirectory = Depends(get_directory)):
    directory.invalidate_all()
    return {"ok": True}


# ------------------------------------------------------------
# DYNAMIC
# ------------------------------------------------------------

@router.get("/team/{team}", response_model=List[NormalizedPlayer], summary="Players on an NFL team")
def players_by_team_route(
    team: str,
    limit: Annotated[int, Query(ge=1, le=200)] = 200,
    directory: PlayerDirectory = Depends(get_directory),
):
    return directory.players_by_team(team, limit=limit)

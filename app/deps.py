from typing import Annotated, Optional

from fastapi import HTTPException, Query, Request, status

from app.services.ranking.metrics import MetricsCalculator
from app.services.sleeper.players import PlayerDirectory, resolve_position


def get_directory(request: Request) -> PlayerDirectory:
    """The application-scoped directory built in main.lifespan (tests swap in their own)."""
    directory = getattr(request.app.state, "directory", None)
    if directory is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Player directory not initialised")
    return directory


def get_calculator(request: Request) -> MetricsCalculator:
    calc = getattr(request.app.state, "calculator", None)
    if calc is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Metrics calculator not initialised")
    return calc


def get_position(
    position: Annotated[Optional[str], Query(description="QB | RB | WR | TE | K | DEF | ALL")] = None,
) -> str:
    # each accepted value is one cache entry, so the set stays closed
    try:
        return resolve_position(position)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

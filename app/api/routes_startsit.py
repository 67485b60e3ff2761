# app/api/routes_startsit.py
from __future__ import annotations

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_calculator, get_directory, get_position
from app.schemas.startsit import StartSitNoteIn, StartSitNoteOut, StartSitResponse
from app.services import notes as notes_svc
from app.services.dashboard import current_week
from app.services.ranking.metrics import MetricsCalculator, ScoringFormat
from app.services.sleeper.players import PlayerDirectory
from app.services.startsit import build_recommendations

router = APIRouter(prefix="/startsit", tags=["startsit"])

DEFAULT_BOARD_SIZE = 200


@router.get("", response_model=StartSitResponse)
def start_sit_board(
    response: Response,
    position: Annotated[str, Depends(get_position)],
    week: Annotated[Optional[int], Query(ge=1, le=18)] = None,
    season: Annotated[Optional[int], Query(ge=2000)] = None,
    scoring: Annotated[ScoringFormat, Query(description="standard | half_ppr | ppr")] = "ppr",
    limit: Annotated[int, Query(ge=1, le=500)] = DEFAULT_BOARD_SIZE,
    db: Session = Depends(get_db),
    directory: PlayerDirectory = Depends(get_directory),
    calc: MetricsCalculator = Depends(get_calculator),
):
    """
    Start/sit advice for the top `limit` players. Admin notes for the same
    week/season override the calculated projection, matchup, risk and verdict.
    """
    # notes are keyed to the same season the directory serves
    season = season or int(directory.season)
    week = week or current_week(season=season)

    result = directory.load_directory(position)
    response.headers["X-Cache"] = "HIT" if result.freshness == "cached" else "MISS"
    response.headers["X-Data-Freshness"] = result.freshness

    notes = notes_svc.list_notes(db, week, season)
    items = build_recommendations(result.players[:limit], notes, calc, scoring)
    return StartSitResponse(week=week, season=season, scoring_format=scoring, freshness=result.freshness, items=items)


@router.get("/notes", response_model=List[StartSitNoteOut])
def list_notes_route(
    week: Annotated[int, Query(ge=1, le=18)],
    season: Annotated[int, Query(ge=2000)],
    db: Session = Depends(get_db),
):
    return notes_svc.list_notes(db, week, season)


@router.put("/notes", response_model=StartSitNoteOut)
def upsert_note_route(payload: StartSitNoteIn, db: Session = Depends(get_db)):
    return notes_svc.upsert_note(db, payload)


@router.delete("/notes/{note_id}")
def delete_note_route(note_id: int, db: Session = Depends(get_db)):
    if not notes_svc.delete_note(db, note_id):
        raise HTTPException(status_code=404, detail=f"No start/sit note with id={note_id}")
    return {"ok": True}

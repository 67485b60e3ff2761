from __future__ import annotations
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import StartSitNote
from app.schemas.startsit import StartSitNoteIn


def list_notes(db: Session, week: int, season: int) -> List[StartSitNote]:
    stmt = select(StartSitNote).where(StartSitNote.week == week, StartSitNote.season == season)
    return list(db.scalars(stmt))


def get_note(db: Session, note_id: int) -> Optional[StartSitNote]:
    return db.get(StartSitNote, note_id)


def upsert_note(db: Session, payload: StartSitNoteIn) -> StartSitNote:
    """One note per (player, week, season); a second write replaces the first."""
    stmt = select(StartSitNote).where(
        StartSitNote.player_id == payload.player_id,
        StartSitNote.week == payload.week,
        StartSitNote.season == payload.season,
    )
    note = db.scalars(stmt).first()
    if note is None:
        note = StartSitNote(player_id=payload.player_id, week=payload.week, season=payload.season)
        db.add(note)
    for field, value in payload.model_dump(exclude={"player_id", "week", "season"}).items():
        setattr(note, field, value)
    db.flush()
    return note


def delete_note(db: Session, note_id: int) -> bool:
    note = db.get(StartSitNote, note_id)
    if note is None:
        return False
    db.delete(note)
    db.flush()
    return True

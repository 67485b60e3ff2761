from __future__ import annotations
import re
from typing import Dict, Iterable, List, Optional

from app.db.models import StartSitNote
from app.schemas.player import NormalizedPlayer
from app.schemas.startsit import StartSitRecommendation
from app.services.ranking.metrics import MetricsCalculator, ScoringFormat


def name_slug(full_name: str) -> str:
    # "Christian McCaffrey" -> "christian_mccaffrey"
    return re.sub(r"\s+", "_", full_name.strip().lower())


def _index_notes(notes: Iterable[StartSitNote]) -> Dict[str, StartSitNote]:
    return {n.player_id: n for n in notes}


def _note_for(player: NormalizedPlayer, notes: Dict[str, StartSitNote]) -> Optional[StartSitNote]:
    return notes.get(player.id) or notes.get(name_slug(player.full_name))


def build_recommendation(
    player: NormalizedPlayer,
    calc: MetricsCalculator,
    note: Optional[StartSitNote] = None,
    scoring_format: ScoringFormat = "ppr",
) -> StartSitRecommendation:
    projection = calc.projected_points(player, scoring_format)
    difficulty = calc.matchup_difficulty(player)
    risk = calc.risk_level(player)
    # range comes from the calculated projection, not the override
    band = calc.projection_range(projection, player)

    if note is not None:
        if note.projection_override is not None:
            projection = note.projection_override
        difficulty = note.difficulty_override or difficulty
        risk = note.risk_level_override or risk

    recommendation = (note and note.recommendation_override) or calc.recommendation(player, projection, difficulty)
    confidence = (note and note.confidence_override) or calc.confidence(difficulty, risk)
    reasoning = (note and note.reasoning_override) or calc.reasoning(player, difficulty, risk)

    return StartSitRecommendation(
        player=player,
        recommendation=recommendation,
        confidence=confidence,
        reasoning=list(reasoning),
        projected_points=projection,
        matchup_difficulty=difficulty,
        risk_level=risk,
        trend=calc.trend(player),
        ceiling=band["ceiling"],
        floor=band["floor"],
        custom_note=note.custom_note if note is not None else None,
        has_overrides=note is not None,
    )


def build_recommendations(
    players: Iterable[NormalizedPlayer],
    notes: Iterable[StartSitNote],
    calc: MetricsCalculator,
    scoring_format: ScoringFormat = "ppr",
) -> List[StartSitRecommendation]:
    """One row per player, highest projection first."""
    by_player = _index_notes(notes)
    recs = [build_recommendation(p, calc, _note_for(p, by_player), scoring_format) for p in players]
    recs.sort(key=lambda r: r.projected_points, reverse=True)
    return recs

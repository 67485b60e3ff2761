from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.player import Freshness, NormalizedPlayer


class StartSitNoteIn(BaseModel):
    player_id: str = Field(..., min_length=1)
    week: int = Field(..., ge=1, le=18)
    season: int = Field(..., ge=2000)
    custom_note: Optional[str] = None
    recommendation_override: Optional[Literal["start", "sit", "flex"]] = None
    confidence_override: Optional[Literal["high", "medium", "low"]] = None
    projection_override: Optional[float] = Field(default=None, ge=0.0)
    difficulty_override: Optional[Literal["Easy", "Medium", "Hard"]] = None
    risk_level_override: Optional[Literal["Low", "Medium", "High"]] = None
    reasoning_override: Optional[List[str]] = None


class StartSitNoteOut(StartSitNoteIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


class StartSitRecommendation(BaseModel):
    player: NormalizedPlayer
    recommendation: Literal["start", "sit", "flex"]
    confidence: Literal["high", "medium", "low"]
    reasoning: List[str]
    projected_points: float
    matchup_difficulty: Literal["Easy", "Medium", "Hard"]
    risk_level: Literal["Low", "Medium", "High"]
    trend: Literal["up", "down", "neutral"]
    ceiling: float
    floor: float
    custom_note: Optional[str] = None
    has_overrides: bool = False


class StartSitResponse(BaseModel):
    week: int
    season: int
    scoring_format: str
    freshness: Freshness
    items: List[StartSitRecommendation]

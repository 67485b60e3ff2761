# app/services/ranking/metrics.py
from __future__ import annotations

import random
from typing import Dict, List, Literal, Optional, Tuple

from app.schemas.player import NormalizedPlayer

ScoringFormat = Literal["standard", "half_ppr", "ppr"]
Difficulty = Literal["Easy", "Medium", "Hard"]
Risk = Literal["Low", "Medium", "High"]
Trend = Literal["up", "down", "neutral"]
Recommendation = Literal["start", "sit", "flex"]
Confidence = Literal["high", "medium", "low"]


# ========= Projection config =========

POSITION_BASELINE: Dict[str, float] = {
    "QB": 18.0,
    "RB": 12.0,
    "WR": 10.0,
    "TE": 8.0,
    "K": 7.0,
    "DEF": 8.0,
}
DEFAULT_BASELINE = 8.0

# rank bonus = max(0, (N - search_rank) / K)
RANK_CURVE: Dict[str, Tuple[float, float]] = {
    "QB": (100.0, 10.0),
    "RB": (100.0, 10.0),
    "WR": (100.0, 10.0),
    "TE": (60.0, 6.0),
    "K": (40.0, 8.0),
    "DEF": (40.0, 8.0),
}
DEFAULT_RANK_CURVE = (100.0, 10.0)

# reception-heavy positions gain under PPR-style scoring
FORMAT_BONUS: Dict[str, Dict[str, float]] = {
    "standard": {},
    "half_ppr": {"RB": 0.75, "WR": 1.0, "TE": 0.75},
    "ppr": {"RB": 1.5, "WR": 2.0, "TE": 1.5},
}

UNKNOWN_OWNERSHIP = 50.0
OWNERSHIP_DIVISOR = 25.0
VARIANCE_SPREAD = 4.0   # uniform in [-2, 2]

TREND_THRESHOLD = 2.0

HIGH_RISK_STATUSES = {"Out", "Doubtful", "IR", "PUP", "Sus"}

# projection needed for start / flex
START_SIT_THRESHOLDS: Dict[str, Tuple[float, float]] = {
    "QB": (16.0, 12.0),
    "RB": (12.0, 8.0),
    "WR": (10.0, 7.0),
    "TE": (8.0, 5.0),
    "K": (6.0, 4.0),
    "DEF": (7.0, 5.0),
}

CONTEXT_FACTORS: List[str] = [
    "Indoor dome game eliminates weather concerns",
    "Clear weather conditions expected",
    "Potential for high-scoring affair",
    "Game script likely favorable for passing",
    "Ground game expected to be featured",
    "Revenge game narrative adds motivation",
]


def _rank(player: NormalizedPlayer) -> Optional[int]:
    return player.search_rank if player.search_rank else None


class MetricsCalculator:
    """
    Presentation-only estimates derived from a NormalizedPlayer.

    Only projected_points() and reasoning() draw from the RNG; seed it to make
    them reproducible. Everything else is a pure function of its inputs.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    # ---------- projections ----------

    def rank_bonus(self, player: NormalizedPlayer) -> float:
        rank = _rank(player)
        if rank is None:
            return 0.0
        n, k = RANK_CURVE.get(player.position, DEFAULT_RANK_CURVE)
        return max(0.0, (n - rank) / k)

    def base_projection(self, player: NormalizedPlayer, scoring_format: ScoringFormat = "ppr") -> float:
        """Deterministic part of the weekly projection (everything but variance)."""
        baseline = POSITION_BASELINE.get(player.position, DEFAULT_BASELINE)
        owned = player.ownership.percent_owned if player.ownership else UNKNOWN_OWNERSHIP
        ownership_bonus = owned / OWNERSHIP_DIVISOR
        format_bonus = FORMAT_BONUS.get(scoring_format, {}).get(player.position, 0.0)
        return baseline + self.rank_bonus(player) + ownership_bonus + format_bonus

    def projected_points(self, player: NormalizedPlayer, scoring_format: ScoringFormat = "ppr") -> float:
        """
        Weekly point estimate. Carries a random swing of +/-2 points to mimic
        week-to-week volatility, so treat it as an estimate, not a stable value.
        """
        variance = (self.rng.random() - 0.5) * VARIANCE_SPREAD
        return round(self.base_projection(player, scoring_format) + variance, 1)

    def projection_range(self, projection: float, player: NormalizedPlayer) -> Dict[str, float]:
        spread = 8.0 if player.position == "QB" else 6.0
        return {
            "ceiling": round(projection + spread, 1),
            "floor": round(max(0.0, projection - spread), 1),
        }

    # ---------- classifications ----------

    def matchup_difficulty(self, player: NormalizedPlayer) -> Difficulty:
        status = player.injury_status
        if status in ("Out", "Doubtful"):
            return "Hard"
        if status == "Questionable":
            return "Medium"
        rank = _rank(player)
        if rank is not None and rank <= 30:
            return "Easy"
        if rank is not None and rank <= 80:
            return "Medium"
        return "Hard"

    def risk_level(self, player: NormalizedPlayer) -> Risk:
        status = player.injury_status
        if status in HIGH_RISK_STATUSES:
            return "High"
        if status == "Questionable":
            return "Medium"
        rank = _rank(player)
        if rank is not None and rank <= 20:
            return "Low"
        if rank is not None and rank <= 50:
            return "Medium"
        return "High"

    def trend(self, player: NormalizedPlayer) -> Trend:
        change = player.ownership.percent_change if player.ownership else 0.0
        if change > TREND_THRESHOLD:
            return "up"
        if change < -TREND_THRESHOLD:
            return "down"
        return "neutral"

    # ---------- start / sit ----------

    def recommendation(self, player: NormalizedPlayer, projection: float, difficulty: Difficulty) -> Recommendation:
        if player.injury_status in ("Out", "Doubtful"):
            return "sit"
        thresholds = START_SIT_THRESHOLDS.get(player.position)
        if thresholds is None:
            return "sit"
        start, flex = thresholds
        if projection >= start and difficulty != "Hard":
            return "start"
        if projection >= flex:
            return "flex"
        return "sit"

    def confidence(self, difficulty: Difficulty, risk: Risk) -> Confidence:
        if risk == "High" or difficulty == "Hard":
            return "low"
        if risk == "Low" and difficulty == "Easy":
            return "high"
        return "medium"

    def reasoning(self, player: NormalizedPlayer, difficulty: Difficulty, risk: Risk) -> List[str]:
        reasons: List[str] = []

        if difficulty == "Easy":
            reasons.append("Favorable matchup expected")
        elif difficulty == "Hard":
            reasons.append("Tough defensive matchup")

        if player.injury_status:
            reasons.append(f"Injury concern: {player.injury_status}")

        rank = _rank(player)
        if rank is not None and rank <= 10:
            reasons.append("Elite player with consistent volume")
        elif rank is not None and rank <= 30:
            reasons.append("Reliable starter with good opportunity")
        elif rank is not None and rank > 80:
            reasons.append("Limited role and opportunity")

        if self.rng.random() > 0.5:
            reasons.append(self.rng.choice(CONTEXT_FACTORS))

        if risk == "High":
            reasons.append("High variance play with boom/bust potential")
        elif risk == "Low":
            reasons.append("Safe floor with consistent production")

        return reasons[:3]

from __future__ import annotations
import logging
import random
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from app.schemas.player import NormalizedPlayer, OwnershipSnapshot, SleeperPlayer

logger = logging.getLogger(__name__)

MISSING_RANK = 9999
LEAGUE_SPORT = "nfl"


# =========================
# small coercion helpers
# =========================

def _to_float(x: Any) -> Optional[float]:
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, (int, float)):
        return float(x)
    if isinstance(x, str):
        s = x.strip().rstrip("%")
        try:
            return float(s)
        except ValueError:
            return None
    return None


def parse_percent_owned(raw: Any) -> Optional[float]:
    """
    percent_owned can arrive in a few shapes:
      - {"value": "97"} or {"value": "97%"}
      - "97" (string) or 97 (number)
      - nested: {"percent_owned": "97"}
    Returns float clamped to 0..100 or None.
    """
    if isinstance(raw, dict):
        if "value" in raw:
            raw = raw.get("value")
        elif "percent_owned" in raw:
            raw = raw.get("percent_owned")
    v = _to_float(raw)
    if v is None:
        return None
    return min(100.0, max(0.0, v))


def full_name_of(raw: SleeperPlayer) -> str:
    name = (raw.full_name or "").strip()
    if name:
        return name
    first = (raw.first_name or "").strip()
    last = (raw.last_name or "").strip()
    return f"{first} {last}".strip()


def synthetic_ownership(rng: random.Random) -> OwnershipSnapshot:
    # Sleeper has no league-agnostic ownership feed
    return OwnershipSnapshot(
        percent_owned=rng.random() * 100,
        percent_change=(rng.random() - 0.5) * 20,
    )


def ownership_of(raw: SleeperPlayer, rng: random.Random) -> OwnershipSnapshot:
    block = raw.ownership
    if isinstance(block, dict):
        owned = parse_percent_owned(block.get("percent_owned"))
        if owned is not None:
            change = _to_float(block.get("percent_change"))
            return OwnershipSnapshot(percent_owned=owned, percent_change=change or 0.0)
    return synthetic_ownership(rng)


# =========================
# record filtering / normalization
# =========================

def matches_position(raw: SleeperPlayer, position: Optional[str]) -> bool:
    if not position or position == "ALL":
        return True
    return raw.position == position or position in (raw.fantasy_positions or [])


def normalize_player(raw: SleeperPlayer, rng: random.Random) -> Optional[NormalizedPlayer]:
    """SleeperPlayer -> NormalizedPlayer, or None when name/position end up empty."""
    full_name = full_name_of(raw)
    position = (raw.position or "").strip()
    if not full_name or not position or not raw.player_id:
        return None
    return NormalizedPlayer(
        id=str(raw.player_id),
        full_name=full_name,
        first_name=raw.first_name or "",
        last_name=raw.last_name or "",
        team=raw.team or None,
        position=position,
        fantasy_positions=list(raw.fantasy_positions or []),
        age=raw.age,
        years_exp=raw.years_exp,
        injury_status=raw.injury_status or None,
        is_active=bool(raw.active) and raw.status == "Active",
        search_rank=raw.search_rank,
        depth_chart_order=raw.depth_chart_order,
        ownership=ownership_of(raw, rng),
    )


def directory_sort_key(p: NormalizedPlayer):
    rank = p.search_rank or MISSING_RANK
    return (rank, p.full_name.casefold())


def parse_players_payload(
    payload: Dict[str, Any],
    *,
    position: Optional[str],
    rng: random.Random,
) -> List[NormalizedPlayer]:
    """
    Bulk /players/nfl dict -> sorted directory view.
    Inactive, non-NFL, malformed and nameless/positionless records are dropped.
    """
    out: List[NormalizedPlayer] = []
    dropped = 0
    for player_id, node in payload.items():
        if not isinstance(node, dict):
            dropped += 1
            continue
        try:
            raw = SleeperPlayer.model_validate({"player_id": player_id, **node})
        except ValidationError:
            dropped += 1
            continue

        if not raw.active or (raw.sport or "").lower() != LEAGUE_SPORT:
            continue
        if not matches_position(raw, position):
            continue

        player = normalize_player(raw, rng)
        if player is None:
            dropped += 1
            continue
        out.append(player)

    if dropped:
        logger.debug("Dropped %d malformed player records", dropped)
    out.sort(key=directory_sort_key)
    return out


def attach_stats(players: Iterable[NormalizedPlayer], stats: Dict[str, Any]) -> List[NormalizedPlayer]:
    """Copies of `players` with that week's stat line attached where Sleeper has one."""
    out: List[NormalizedPlayer] = []
    for p in players:
        line = stats.get(p.id)
        if isinstance(line, dict):
            values = {k: v for k, v in ((k, _to_float(v)) for k, v in line.items()) if v is not None}
            out.append(p.model_copy(update={"stats": values}))
        else:
            out.append(p)
    return out

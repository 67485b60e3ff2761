from __future__ import annotations
import random
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional

from app.schemas.dashboard import (
    AllowedPoints,
    ByeWeek,
    InjuryReportItem,
    OwnershipTrendItem,
    PlayerNewsItem,
    TeamMatchup,
)
from app.schemas.player import NormalizedPlayer
from app.services.ranking.metrics import MetricsCalculator
from app.services.sleeper.fallback import NFL_TEAMS

FREE_AGENT = "FA"
STARTED_SHARE = 0.7   # rough share of rostered players who are started

INJURY_IMPACT = {"Out": 100, "Doubtful": 75, "Questionable": 40}
RETURN_TIMELINE = {"Out": "2-4 weeks", "Doubtful": "1-2 weeks", "Questionable": "Day-to-day"}
INJURY_TYPES = ("ankle", "knee", "shoulder", "hamstring")

# Sleeper has no schedule endpoint; a handful of known pairings, the rest are TBD
OPPONENTS = {
    "BUF": "vs MIA",
    "MIA": "@ BUF",
    "KC": "vs LV",
    "LV": "@ KC",
    "SF": "vs SEA",
    "SEA": "@ SF",
}
UNKNOWN_OPPONENT = "vs TBD"
TEAM_BASE_POINTS = {"QB": 20.0, "RB": 15.0, "WR": 12.0}
DEFAULT_TEAM_BASE_POINTS = 8.0

BYE_WEEKS = [
    (12, ["LAC", "TB"]),
    (13, ["BUF", "NYJ"]),
    (14, ["SF", "SEA"]),
    (15, ["KC", "LV"]),
    (16, ["DAL", "NYG"]),
    (17, ["MIA", "NE"]),
]

NEWS_LIMIT = 20
NEWS_SAMPLE_RATE = 0.2   # share of healthy players that get a generic item
NEWS_WINDOW = timedelta(hours=24)
GENERIC_HEADLINES = (
    "{name} expected to see increased role",
    "{name} trending up in fantasy rankings",
    "{name} drawing favorable matchup this week",
    "{name} practice report: Full participation",
)


def current_week(today: Optional[date] = None, season: Optional[int] = None) -> int:
    """Regular-season week, counted from September 1st and clamped to 1..18."""
    today = today or date.today()
    start = date(season or today.year, 9, 1)
    weeks = (today - start).days // 7
    return max(1, min(18, weeks + 1))


# =========================
# injuries / ownership
# =========================

def injury_type(status: Optional[str]) -> str:
    if not status:
        return "Unknown"
    lowered = status.lower()
    for body_part in INJURY_TYPES:
        if body_part in lowered:
            return body_part.capitalize()
    return "General"


def injury_report(players: Iterable[NormalizedPlayer]) -> List[InjuryReportItem]:
    rows = [
        InjuryReportItem(
            player_id=p.id,
            player_name=p.full_name,
            team=p.team or FREE_AGENT,
            position=p.position,
            status=p.injury_status,
            injury_type=injury_type(p.injury_status),
            weekly_impact=INJURY_IMPACT.get(p.injury_status, 10),
            return_timeline=RETURN_TIMELINE.get(p.injury_status, "Monitor"),
        )
        for p in players
        if p.injury_status and p.injury_status != "Healthy"
    ]
    rows.sort(key=lambda r: r.weekly_impact, reverse=True)
    return rows


def ownership_trends(players: Iterable[NormalizedPlayer], calc: MetricsCalculator) -> List[OwnershipTrendItem]:
    return [
        OwnershipTrendItem(
            player_id=p.id,
            player_name=p.full_name,
            position=p.position,
            team=p.team or FREE_AGENT,
            percent_owned=p.ownership.percent_owned,
            percent_started=round(p.ownership.percent_owned * STARTED_SHARE, 1),
            add_drop_trend=p.ownership.percent_change,
            trend=calc.trend(p),
        )
        for p in players
    ]


# =========================
# matchups
# =========================

def opponent_of(team: str) -> str:
    return OPPONENTS.get(team, UNKNOWN_OPPONENT)


def team_difficulty(team: str, opponent: str) -> str:
    bucket = (ord(team[0]) + ord(opponent[0])) % 3
    return ("Easy", "Medium", "Hard")[bucket]


def positional_matchups(
    players: Iterable[NormalizedPlayer],
    rng: random.Random,
    position: Optional[str] = None,
) -> List[TeamMatchup]:
    """
    One row per NFL team that has a player in `players`, easiest defenses
    last. Defensive rank, projected points and allowed points are estimates
    drawn from `rng` until a schedule feed exists.
    """
    base = TEAM_BASE_POINTS.get(position or "", DEFAULT_TEAM_BASE_POINTS)
    rows = {}
    for p in players:
        if not p.team or p.team in rows:
            continue
        opponent = opponent_of(p.team)
        rows[p.team] = TeamMatchup(
            team=p.team,
            opponent=opponent,
            difficulty=team_difficulty(p.team, opponent),
            defensive_rank=rng.randint(1, 32),
            projected_points=round(base + (rng.random() - 0.5) * 6, 1),
            allowed_points=AllowedPoints(
                qb=round(18 + rng.random() * 8, 1),
                rb=round(12 + rng.random() * 6, 1),
                wr=round(10 + rng.random() * 5, 1),
                te=round(7 + rng.random() * 4, 1),
            ),
        )
    return sorted(rows.values(), key=lambda r: r.defensive_rank)


# =========================
# news / byes
# =========================

def news_impact(player: NormalizedPlayer) -> str:
    if player.injury_status in ("Out", "Doubtful"):
        return "High"
    if player.injury_status == "Questionable":
        return "Medium"
    if player.search_rank and player.search_rank <= 50:
        return "Medium"
    return "Low"


def _headline(player: NormalizedPlayer, week: int, rng: random.Random) -> str:
    if player.injury_status:
        return f"{player.full_name} listed as {player.injury_status} for Week {week}"
    return rng.choice(GENERIC_HEADLINES).format(name=player.full_name)


def _summary(player: NormalizedPlayer) -> str:
    if player.injury_status:
        return (
            f"{player.full_name} has been dealing with an injury and is currently listed as "
            f"{player.injury_status}. Monitor practice participation throughout the week for "
            "the latest updates on availability."
        )
    team_name = NFL_TEAMS.get(player.team or "", {}).get("name", "team")
    return (
        f"{player.full_name} continues to be a key player for the {team_name}. Fantasy managers "
        "should monitor usage and matchup for optimal lineup decisions."
    )


def player_news(
    players: Iterable[NormalizedPlayer],
    week: int,
    rng: random.Random,
    *,
    player_id: Optional[str] = None,
    now: Optional[datetime] = None,
    limit: int = NEWS_LIMIT,
) -> List[PlayerNewsItem]:
    """
    Newest-first news items: every injured player plus a random sample of the
    rest. Asking for one `player_id` always yields that player's item.
    """
    now = now or datetime.now(timezone.utc)
    if player_id is not None:
        selected = [p for p in players if p.id == player_id]
    else:
        selected = [p for p in players if p.injury_status or rng.random() < NEWS_SAMPLE_RATE]

    items = [
        PlayerNewsItem(
            player_id=p.id,
            headline=_headline(p, week, rng),
            summary=_summary(p),
            impact=news_impact(p),
            timestamp=now - NEWS_WINDOW * rng.random(),
        )
        for p in selected
    ]
    items.sort(key=lambda n: n.timestamp, reverse=True)
    return items[:limit]


def bye_weeks() -> List[ByeWeek]:
    return [ByeWeek(week=week, teams=list(teams)) for week, teams in BYE_WEEKS]

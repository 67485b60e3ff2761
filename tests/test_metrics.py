import random

import pytest

from app.services.ranking.metrics import MetricsCalculator
from tests.conftest import make_player


@pytest.mark.parametrize(
    "change, expected",
    [
        (2.0, "neutral"),
        (-2.0, "neutral"),
        (0.0, "neutral"),
        (2.01, "up"),
        (15.8, "up"),
        (-2.01, "down"),
        (-20.0, "down"),
    ],
)
def test_trend_thresholds(calc, change, expected):
    assert calc.trend(make_player(change=change)) == expected


def test_base_projection_formula(calc):
    # RB baseline 12 + (100-10)/10 + 50/25 + ppr 1.5
    assert calc.base_projection(make_player("RB", rank=10, owned=50.0), "ppr") == pytest.approx(24.5)
    assert calc.base_projection(make_player("RB", rank=10, owned=50.0), "half_ppr") == pytest.approx(23.75)
    assert calc.base_projection(make_player("RB", rank=10, owned=50.0), "standard") == pytest.approx(23.0)
    # QB gets no reception bonus
    assert calc.base_projection(make_player("QB", rank=1, owned=100.0), "ppr") == pytest.approx(18 + 9.9 + 4)


def test_missing_rank_gets_no_rank_bonus(calc):
    assert calc.rank_bonus(make_player(rank=None)) == 0.0
    assert calc.rank_bonus(make_player(rank=150)) == 0.0


def test_unknown_position_uses_defaults(calc):
    p = make_player("LB", rank=50, owned=25.0)
    assert calc.base_projection(p, "ppr") == pytest.approx(8 + 5 + 1)


@pytest.mark.parametrize("position", ["QB", "RB", "WR", "TE", "K", "DEF"])
@pytest.mark.parametrize("fmt", ["standard", "half_ppr", "ppr"])
def test_rank_bonus_is_monotonic(calc, position, fmt):
    top = calc.base_projection(make_player(position, rank=1), fmt)
    deep = calc.base_projection(make_player(position, rank=150), fmt)
    assert top >= deep


def test_projected_points_within_variance_band():
    calc = MetricsCalculator()
    p = make_player("WR", rank=20, owned=80.0)
    base = calc.base_projection(p, "ppr")
    for _ in range(200):
        assert base - 2.05 <= calc.projected_points(p, "ppr") <= base + 2.05


def test_projected_points_reproducible_with_seed():
    p = make_player("TE", rank=5)
    a = MetricsCalculator(random.Random(7))
    b = MetricsCalculator(random.Random(7))
    assert [a.projected_points(p) for _ in range(5)] == [b.projected_points(p) for _ in range(5)]


@pytest.mark.parametrize(
    "injury, rank, expected",
    [
        ("Out", 1, "Hard"),
        ("Doubtful", 1, "Hard"),
        ("Questionable", 1, "Medium"),
        (None, 30, "Easy"),
        (None, 31, "Medium"),
        (None, 80, "Medium"),
        (None, 81, "Hard"),
        (None, None, "Hard"),
    ],
)
def test_matchup_difficulty(calc, injury, rank, expected):
    assert calc.matchup_difficulty(make_player(rank=rank, injury=injury)) == expected


@pytest.mark.parametrize(
    "injury, rank, expected",
    [
        ("Out", 1, "High"),
        ("Doubtful", 1, "High"),
        ("IR", 1, "High"),
        ("Questionable", 1, "Medium"),
        (None, 20, "Low"),
        (None, 21, "Medium"),
        (None, 50, "Medium"),
        (None, 51, "High"),
        (None, None, "High"),
    ],
)
def test_risk_level(calc, injury, rank, expected):
    assert calc.risk_level(make_player(rank=rank, injury=injury)) == expected


def test_projection_range(calc):
    assert calc.projection_range(20.0, make_player("QB")) == {"ceiling": 28.0, "floor": 12.0}
    assert calc.projection_range(4.0, make_player("WR")) == {"ceiling": 10.0, "floor": 0.0}


def test_recommendation_rules(calc):
    rb = make_player("RB")
    assert calc.recommendation(rb, 12.0, "Easy") == "start"
    assert calc.recommendation(rb, 12.0, "Hard") == "flex"
    assert calc.recommendation(rb, 7.9, "Easy") == "sit"
    assert calc.recommendation(make_player("RB", injury="Out"), 30.0, "Easy") == "sit"
    assert calc.recommendation(make_player("LB"), 30.0, "Easy") == "sit"


def test_confidence(calc):
    assert calc.confidence("Easy", "Low") == "high"
    assert calc.confidence("Medium", "Low") == "medium"
    assert calc.confidence("Easy", "High") == "low"
    assert calc.confidence("Hard", "Low") == "low"


def test_reasoning_is_capped_at_three(calc):
    p = make_player(rank=5, injury="Questionable")
    for _ in range(20):
        reasons = calc.reasoning(p, "Hard", "High")
        assert 1 <= len(reasons) <= 3
        assert reasons[0] == "Tough defensive matchup"
        assert reasons[1] == "Injury concern: Questionable"

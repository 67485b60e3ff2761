import random
import threading
import time

import pytest

from app.services.cache import TTLCache
from app.services.sleeper.fallback import FALLBACK_SIZE
from app.services.sleeper.players import PlayerDirectory, resolve_position
from tests.conftest import SEASON, FakeSleeperClient, raw_player


@pytest.mark.parametrize("position", [None, "ALL", "QB", "RB", "WR", "TE", "K", "DEF"])
def test_every_view_has_name_and_position(directory, position):
    for p in directory.load_all(position):
        assert p.full_name
        assert p.position


def test_second_call_within_ttl_hits_cache(directory, client, clock):
    first = directory.load_directory("QB")
    clock.advance(300)
    second = directory.load_directory("QB")

    assert client.player_calls == 1
    assert first.freshness == "live"
    assert second.freshness == "cached"
    assert second.players == first.players


def test_expired_entry_triggers_new_fetch(directory, client, clock):
    directory.load_all("QB")
    clock.advance(600)
    directory.load_all("QB")
    assert client.player_calls == 2


def test_force_refresh_always_calls_upstream(directory, client):
    directory.load_all("QB")
    directory.load_all("QB", True)
    directory.load_all("QB", force_refresh=True)
    assert client.player_calls == 3


def test_position_is_case_insensitive_and_shares_cache(directory, client):
    directory.load_all("qb")
    directory.load_all(" QB ")
    assert client.player_calls == 1
    assert resolve_position(None) == resolve_position("") == "ALL"


@pytest.mark.parametrize("position", ["junk", "FLEX", "QBX", "D/ST"])
def test_unknown_position_is_rejected_before_any_fetch(directory, client, cache, position):
    with pytest.raises(ValueError, match="Unknown position"):
        directory.load_directory(position)
    assert client.player_calls == 0
    assert len(cache) == 0


def test_callers_cannot_mutate_cached_view(directory, client):
    directory.load_all("QB").clear()
    directory.load_directory("QB").players.append(None)

    again = directory.load_directory("QB")

    assert again.freshness == "cached"
    assert [p.full_name for p in again.players] == ["Josh Allen", "Patrick Mahomes", "Taysom Hill"]
    assert client.player_calls == 1


def test_positions_get_independent_entries_and_invalidate_all_clears_both(directory, client, cache):
    directory.load_all("RB")
    directory.load_all("WR")

    assert client.player_calls == 2
    assert cache.get(("RB", SEASON)) is not None
    assert cache.get(("WR", SEASON)) is not None

    directory.invalidate_all()

    assert cache.get(("RB", SEASON)) is None
    assert cache.get(("WR", SEASON)) is None
    directory.load_all("RB")
    assert client.player_calls == 3


def test_upstream_500_returns_fallback_board(cache):
    client = FakeSleeperClient(fail=True)
    directory = PlayerDirectory(client, cache, season=SEASON, rng=random.Random(0))

    result = directory.load_directory("ALL")

    assert result.freshness == "fallback"
    assert result.degraded
    assert "500" in result.error
    assert len(result.players) == FALLBACK_SIZE
    assert [p.full_name for p in result.players[:3]] == ["Josh Allen", "Christian McCaffrey", "Tyreek Hill"]
    assert len(cache) == 0


def test_failed_refresh_leaves_existing_entry_untouched(directory, client, cache):
    good = directory.load_all("QB")
    client.fail = True

    degraded = directory.load_directory("QB", force_refresh=True)

    assert degraded.freshness == "fallback"
    assert list(cache.get(("QB", SEASON))) == good
    assert directory.load_directory("QB").freshness == "cached"


def test_failure_is_retried_only_on_next_call(cache):
    client = FakeSleeperClient(fail=True)
    directory = PlayerDirectory(client, cache, season=SEASON, rng=random.Random(0))

    directory.load_all()
    assert client.player_calls == 1
    directory.load_all()
    assert client.player_calls == 2


def test_inactive_player_absent_from_every_view(directory):
    for position in ("ALL", "WR", "QB", "RB"):
        assert "Retired Guy" not in [p.full_name for p in directory.load_all(position)]


def test_fake_mode_never_touches_network(cache):
    client = FakeSleeperClient()
    directory = PlayerDirectory(client, cache, season=SEASON, fake_mode=True)

    result = directory.load_directory("RB")

    assert result.freshness == "fallback"
    assert client.player_calls == 0
    assert all(p.position == "RB" for p in result.players)


def test_search_matches_name_and_team(directory):
    assert [p.full_name for p in directory.search_players("hill")] == ["Tyreek Hill", "Taysom Hill"]
    assert [p.full_name for p in directory.search_players("kc")] == ["Patrick Mahomes"]
    assert [p.full_name for p in directory.search_players("HILL", position="TE")] == ["Taysom Hill"]
    assert len(directory.search_players("", limit=2)) == 2


def test_players_by_team(directory):
    assert [p.full_name for p in directory.players_by_team("buf")] == ["Josh Allen", "Buffalo Bills"]


def test_player_stats_enriches_copies(cache):
    client = FakeSleeperClient(stats={"4984": {"pts_ppr": 27.4}})
    directory = PlayerDirectory(client, cache, season=SEASON, rng=random.Random(0))

    players = directory.player_stats("QB", week=3, limit=2)

    assert [p.full_name for p in players] == ["Josh Allen", "Patrick Mahomes"]
    assert players[0].stats == {"pts_ppr": 27.4}
    assert directory.load_all("QB")[0].stats is None


def test_player_stats_without_stats_feed_returns_plain_players(directory, client):
    players = directory.player_stats("QB", week=3)
    assert client.stats_calls == 1
    assert all(p.stats is None for p in players)


def test_trending_players_scale_counts_and_do_not_mutate_cache(cache):
    client = FakeSleeperClient(
        adds=[{"player_id": "9509", "count": 850}, {"player_id": "4866", "count": 5000}],
        drops=[{"player_id": "5012", "count": 420}, {"player_id": "unknown", "count": 9}],
    )
    directory = PlayerDirectory(client, cache, season=SEASON, rng=random.Random(0))
    before = {p.id: p.ownership for p in directory.load_all()}

    trending = {p.id: p.ownership.percent_change for p in directory.trending_players()}

    assert trending == {"9509": 8.5, "4866": 20.0, "5012": -4.2}
    after = {p.id: p.ownership for p in directory.load_all()}
    assert after == before


def test_trending_falls_back_when_upstream_fails(cache):
    directory = PlayerDirectory(FakeSleeperClient(fail=True), cache, season=SEASON)
    assert [p.full_name for p in directory.trending_players()] == ["Gus Edwards", "Elijah Moore"]


def test_league_summary(directory):
    summary = directory.league_summary()
    assert summary == {
        "total_players": 10,
        "active_leagues": 250_000,
        "weekly_updates": 50_000,
        "freshness": "live",
    }


class _SlowClient(FakeSleeperClient):
    def get_players(self, sport="nfl"):
        time.sleep(0.05)
        return super().get_players(sport)


def test_coalescing_allows_one_fetch_per_key():
    client = _SlowClient(players={"1": raw_player("1", "Only Guy", "QB", rank=1)})
    directory = PlayerDirectory(client, TTLCache(), season=SEASON, coalesce=True)

    threads = [threading.Thread(target=directory.load_all, args=("QB",)) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert client.player_calls == 1


class _PlayersDownClient(FakeSleeperClient):
    def get_players(self, sport="nfl"):
        self.fail = True
        try:
            return super().get_players(sport)
        finally:
            self.fail = False


def test_trending_uses_fallback_list_when_directory_is_degraded(cache):
    # fallback ids "1".."200" would otherwise collide with real Sleeper ids
    client = _PlayersDownClient(adds=[{"player_id": "1", "count": 900}], drops=[{"player_id": "2", "count": 300}])
    directory = PlayerDirectory(client, cache, season=SEASON)

    trending = directory.trending_players()

    assert client.trending_calls == 0
    assert [p.full_name for p in trending] == ["Gus Edwards", "Elijah Moore"]

"""
Tests for signal aggregation and the deep-signal builder.
"""

from unittest.mock import AsyncMock

import pytest

from lobbyscout.core.enums import PlayerRole, RankedQueue
from lobbyscout.core.riot_api.data_manager import RiotDataManager
from lobbyscout.core.riot_api.errors import RateLimitError
from lobbyscout.core.riot_api.models import (
    ChampionMasteryDTO,
    LeagueEntryDTO,
    MatchParticipantDTO,
)
from lobbyscout.features.player_insights import (
    DeepSignals,
    InsightConfig,
    SignalBuilder,
    build_cheap_signals,
)
from lobbyscout.features.player_insights.signals import (
    PERFECT_KDA,
    PlayedMatch,
    aggregate_averages,
    aggregate_recent,
    build_pools,
    compute_kda,
    compute_streak,
)

from tests.helpers import FakeClock, make_match, make_participant, make_settings

PUUID = "test-puuid"
NOW = 1_700_000_000


def played(win=True, champion_id=103, position="MIDDLE", duration=1800, **stats):
    participant = MatchParticipantDTO.model_validate(
        make_participant(
            PUUID, win=win, championId=champion_id, teamPosition=position, **stats
        )
    )
    return PlayedMatch(participant, duration)


def league_entry(queue, wins, losses, **extra):
    return LeagueEntryDTO.model_validate(
        {
            "queueType": queue,
            "tier": "GOLD",
            "rank": "I",
            "leaguePoints": 10,
            "wins": wins,
            "losses": losses,
            **extra,
        }
    )


def mastery(champion_id, points, level=5):
    return ChampionMasteryDTO(
        champion_id=champion_id, champion_points=points, champion_level=level
    )


class TestCheapSignals:
    """Test cases for build_cheap_signals."""

    def test_solo_queue_preferred(self):
        signals = build_cheap_signals(
            120,
            [
                league_entry("RANKED_FLEX_SR", 5, 5),
                league_entry("RANKED_SOLO_5x5", 30, 20, hotStreak=True),
            ],
            None,
        )

        assert signals.summoner_level == 120
        assert signals.ranked.queue == RankedQueue.SOLO
        assert signals.ranked.wins == 30
        assert signals.ranked.hot_streak is True
        assert signals.mastery is None

    def test_flex_fallback_and_unranked(self):
        flex = build_cheap_signals(50, [league_entry("RANKED_FLEX_SR", 5, 7)], [])
        unranked = build_cheap_signals(50, [], [])

        assert flex.ranked.queue == RankedQueue.FLEX
        assert flex.ranked.losses == 7
        assert unranked.ranked is None
        assert unranked.mastery.top == ()

    def test_masteries_sorted_and_current_champion_resolved(self):
        masteries = [mastery(i, i * 1000) for i in range(1, 8)]

        signals = build_cheap_signals(
            None, [], masteries, current_champion_id=2
        )

        assert [m.champion_id for m in signals.mastery.top] == [7, 6, 5, 4, 3]
        assert signals.mastery.current_champion.points == 2000
        assert signals.current_champion_id == 2

    def test_unknown_current_champion_mastery(self):
        signals = build_cheap_signals(None, [], [mastery(1, 100)], current_champion_id=99)

        assert signals.mastery.current_champion is None


class TestAggregation:
    """Test cases for pure deep-signal aggregation helpers."""

    @pytest.mark.parametrize(
        "kills,deaths,assists,expected",
        [
            (5, 2, 7, 6.0),
            (3, 0, 4, PERFECT_KDA),
            (0, 0, 0, None),
            (0, 4, 0, 0.0),
        ],
    )
    def test_compute_kda(self, kills, deaths, assists, expected):
        assert compute_kda(kills, deaths, assists) == expected

    def test_streak_counts_from_newest(self):
        matches = [played(False), played(False), played(False), played(True), played(False)]

        streak = compute_streak(matches)

        assert streak.type == "L"
        assert streak.count == 3

    def test_streak_empty(self):
        streak = compute_streak([])

        assert (streak.type, streak.count) == ("W", 0)

    def test_pools_sorted_by_games_with_stable_ties(self):
        matches = [
            played(True, champion_id=1, position="TOP"),
            played(False, champion_id=2, position="JUNGLE"),
            played(True, champion_id=2, position="JUNGLE"),
            played(True, champion_id=3, position=""),
        ]

        champ_pool, role_pool, champ_map = build_pools(matches)

        assert [(e.champion_id, e.games) for e in champ_pool] == [(2, 2), (1, 1), (3, 1)]
        assert champ_pool[0].winrate == 0.5
        assert role_pool[0].role == PlayerRole.JUNGLE
        assert {e.role for e in role_pool} == {
            PlayerRole.TOP,
            PlayerRole.JUNGLE,
            PlayerRole.UNKNOWN,
        }
        assert champ_map[2] == (2, 1)

    def test_averages_use_time_played(self):
        matches = [
            played(kills=4, deaths=2, assists=6, totalMinionsKilled=200,
                   neutralMinionsKilled=0, visionScore=30, timePlayed=1200),
            played(kills=2, deaths=2, assists=2, totalMinionsKilled=100,
                   neutralMinionsKilled=0, visionScore=30, timePlayed=1800),
        ]

        avg = aggregate_averages(matches)

        assert avg.kda == pytest.approx(14 / 4)
        assert avg.deaths == 2
        assert avg.cs_per_min == pytest.approx(300 / 50)
        assert avg.vision_per_min == pytest.approx(60 / 50)

    def test_averages_empty(self):
        avg = aggregate_averages([])

        assert avg.kda is None
        assert avg.cs_per_min is None

    def test_aggregate_recent(self):
        matches = [
            played(True, champion_id=103),
            played(True, champion_id=103),
            played(False, champion_id=7),
        ]

        deep = aggregate_recent(matches, window=10, current_champion_id=103)

        assert deep.recent.window == 10
        assert deep.recent.matches == 3
        assert deep.recent.wins == 2
        assert deep.recent.winrate == pytest.approx(2 / 3)
        assert deep.recent.streak.count == 2
        assert deep.champ_recent.games == 2
        assert deep.champ_recent.winrate == 1.0

    def test_aggregate_recent_champion_not_played(self):
        deep = aggregate_recent([played()], window=10, current_champion_id=1)

        assert deep.champ_recent is None
        assert aggregate_recent([], window=10) == DeepSignals()


@pytest.fixture
def data_manager():
    return AsyncMock(spec=RiotDataManager)


@pytest.fixture
def builder(data_manager, cache, settings):
    return SignalBuilder(
        data_manager,
        cache,
        settings=settings,
        config=InsightConfig(),
        clock=FakeClock(NOW),
    )


class TestSignalBuilder:
    """Test cases for SignalBuilder."""

    async def test_feature_disabled_skips_match_history(self, data_manager, cache):
        builder = SignalBuilder(
            data_manager,
            cache,
            settings=make_settings(feature_match_history=False),
            config=InsightConfig(),
        )

        assert await builder.build_deep_signals(PUUID) == DeepSignals()
        data_manager.get_match_ids.assert_not_called()

    async def test_builds_recent_from_ranked_window(self, builder, data_manager):
        data_manager.get_match_ids.return_value = ["LA2_3", "LA2_2", "LA2_1"]
        data_manager.get_match.side_effect = lambda match_id, platform: make_match(
            match_id,
            make_participant(PUUID, win=match_id != "LA2_1"),
            make_participant("other-puuid"),
        )

        deep = await builder.build_deep_signals(PUUID, current_champion_id=103)

        assert deep.recent.matches == 3
        assert deep.recent.wins == 2
        assert deep.champ_recent.games == 3
        kwargs = data_manager.get_match_ids.await_args.kwargs
        assert kwargs["type"] == "ranked"
        assert kwargs["count"] == 100
        assert kwargs["platform"] == "la2"
        # 7 days back, rounded down to a 15 minute bucket
        assert kwargs["start_time"] == 1_699_394_400

    async def test_skips_short_failed_and_foreign_matches(self, builder, data_manager):
        data_manager.get_match_ids.return_value = ["OK", "REMAKE", "BROKEN", "OTHER"]

        async def get_match(match_id, platform):
            if match_id == "BROKEN":
                raise RateLimitError("Rate limited", status_code=429)
            if match_id == "REMAKE":
                return make_match(match_id, make_participant(PUUID), duration=200)
            if match_id == "OTHER":
                return make_match(match_id, make_participant("someone-else"))
            return make_match(match_id, make_participant(PUUID))

        data_manager.get_match.side_effect = get_match

        deep = await builder.build_deep_signals(PUUID)

        assert deep.recent.matches == 1

    async def test_caps_match_details(self, builder, data_manager):
        data_manager.get_match_ids.return_value = [f"LA2_{i}" for i in range(30)]
        data_manager.get_match.side_effect = lambda match_id, platform: make_match(
            match_id, make_participant(PUUID)
        )

        deep = await builder.build_deep_signals(PUUID)

        assert deep.recent.matches == 10
        assert data_manager.get_match.await_count == 10

    async def test_failure_degrades_to_empty(self, builder, data_manager):
        data_manager.get_match_ids.side_effect = RateLimitError(
            "Rate limited", status_code=429
        )

        first = await builder.build_deep_signals(PUUID)
        second = await builder.build_deep_signals(PUUID)

        assert first == DeepSignals()
        assert second == DeepSignals()
        assert data_manager.get_match_ids.await_count == 2

    async def test_success_is_cached(self, builder, data_manager):
        data_manager.get_match_ids.return_value = ["LA2_1"]
        data_manager.get_match.side_effect = lambda match_id, platform: make_match(
            match_id, make_participant(PUUID)
        )

        first = await builder.build_deep_signals(PUUID, platform="LA2")
        second = await builder.build_deep_signals(PUUID, platform="la2")

        assert first is second
        data_manager.get_match_ids.assert_awaited_once()

    async def test_build_player_signals_merges_tiers(self, builder, data_manager):
        data_manager.get_match_ids.return_value = ["LA2_1"]
        data_manager.get_match.side_effect = lambda match_id, platform: make_match(
            match_id, make_participant(PUUID)
        )

        signals = await builder.build_player_signals(
            PUUID,
            summoner_level=200,
            entries=[league_entry("RANKED_SOLO_5x5", 10, 10)],
            masteries=[mastery(103, 50_000)],
            current_champion_id=103,
        )

        assert signals.summoner_level == 200
        assert signals.ranked.wins == 10
        assert signals.mastery.current_champion.points == 50_000
        assert signals.recent.matches == 1
        assert signals.champ_recent.champion_id == 103
        assert signals.current_role == PlayerRole.UNKNOWN

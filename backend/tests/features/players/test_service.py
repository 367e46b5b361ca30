"""
Tests for the player summary service.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from lobbyscout.core.enums import PlayerRole
from lobbyscout.core.riot_api.data_manager import RiotDataManager
from lobbyscout.core.riot_api.errors import (
    AuthenticationError,
    NotFoundError,
    RiotAPIError,
)
from lobbyscout.core.riot_api.models import (
    AccountDTO,
    ChampionMasteryDTO,
    LeagueEntryDTO,
    SummonerDTO,
)
from lobbyscout.features.player_insights import (
    ChampionRecentStats,
    ChampionStatsService,
    DeepSignals,
    InsightConfig,
    InsightKind,
    PlayerSignals,
    SignalBuilder,
)
from lobbyscout.features.player_insights.champion_stats import ChampionStatsNote
from lobbyscout.features.player_insights.schemas import RecentSignals, StreakSignals
from lobbyscout.features.players import CardRequest, PlayerSummaryService

PUUID = "test-puuid-123"


@pytest.fixture
def data_manager():
    manager = AsyncMock(spec=RiotDataManager)
    manager.get_summoner_by_puuid.return_value = SummonerDTO(
        puuid=PUUID, profile_icon_id=29, summoner_level=35
    )
    manager.get_account_by_puuid.return_value = AccountDTO(
        puuid=PUUID, game_name="TestPlayer", tag_line="LAS"
    )
    manager.get_league_entries.return_value = [
        LeagueEntryDTO(
            queue_type="RANKED_FLEX_SR", tier="SILVER", rank="I",
            league_points=0, wins=3, losses=4,
        ),
        LeagueEntryDTO(
            queue_type="RANKED_SOLO_5x5", tier="GOLD", rank="II",
            league_points=55, wins=60, losses=20,
        ),
    ]
    manager.get_champion_masteries.return_value = [
        ChampionMasteryDTO(champion_id=i, champion_level=5, champion_points=i * 1000)
        for i in range(1, 6)
    ]
    return manager


RECENT = RecentSignals(
    window=10,
    matches=8,
    wins=6,
    losses=2,
    winrate=0.75,
    streak=StreakSignals(type="W", count=3),
)


@pytest.fixture
def signal_builder():
    builder = AsyncMock(spec=SignalBuilder)
    builder.build_player_signals.return_value = PlayerSignals(summoner_level=35)
    builder.build_deep_signals.return_value = DeepSignals(recent=RECENT)
    return builder


@pytest.fixture
def champion_stats():
    stats = AsyncMock(spec=ChampionStatsService)
    stats.get_champion_recent_stats.side_effect = (
        lambda puuid, champion_id, platform: ChampionRecentStats(
            champion_id=champion_id,
            total_ranked_games=40,
            games_with_champ=12,
            wins=8,
            losses=4,
            winrate_with_champ=8 / 12,
            sample_size_ok=True,
        )
    )
    return stats


@pytest.fixture
def service(data_manager, signal_builder, champion_stats):
    return PlayerSummaryService(
        data_manager, signal_builder, InsightConfig(), champion_stats=champion_stats
    )


def lobby(*puuids, champion_id=3):
    return [
        CardRequest(puuid=p, champion_id=champion_id, team_id=100 if i < 5 else 200)
        for i, p in enumerate(puuids)
    ]


class TestPlayerSummaryService:
    """Test cases for PlayerSummaryService."""

    async def test_summary(self, service, data_manager):
        summary = await service.get_player_summary(PUUID, "la2")

        assert summary.riot_id == "TestPlayer#LAS"
        assert summary.summoner_level == 35
        assert summary.profile_icon_id == 29
        assert summary.solo_queue.tier == "GOLD"
        assert summary.flex_queue.tier == "SILVER"
        assert [m.champion_id for m in summary.top_masteries] == [5, 4, 3]
        data_manager.get_league_entries.assert_awaited_once_with(PUUID, "la2")

    async def test_summary_serializes_camel_case(self, service):
        payload = (await service.get_player_summary(PUUID)).model_dump(by_alias=True)

        assert payload["riotId"] == "TestPlayer#LAS"
        assert payload["soloQueue"]["tier"] == "GOLD"

    async def test_errors_propagate(self, service, data_manager):
        data_manager.get_summoner_by_puuid.side_effect = NotFoundError(
            "Resource not found", status_code=404
        )

        with pytest.raises(NotFoundError):
            await service.get_player_summary(PUUID)

    async def test_insights_card(self, service, signal_builder):
        card = await service.get_player_insights(
            PUUID, "la2", current_champion_id=103, current_role=PlayerRole.JUNGLE
        )

        assert card.summary.riot_id == "TestPlayer#LAS"
        assert len(card.insights.insights) == 6
        assert card.insights.get(InsightKind.SMURF).score > 0
        kwargs = signal_builder.build_player_signals.await_args.kwargs
        assert kwargs["current_champion_id"] == 103
        assert kwargs["current_role"] == PlayerRole.JUNGLE
        assert kwargs["platform"] == "la2"

    async def test_account_without_riot_id(self, service, data_manager):
        data_manager.get_account_by_puuid.return_value = AccountDTO.model_validate(
            {"puuid": PUUID}
        )

        summary = await service.get_player_summary(PUUID)

        assert summary.riot_id == ""
        assert summary.puuid == PUUID


class TestLobbyCards:
    """Test cases for PlayerSummaryService.get_player_cards."""

    async def test_builds_cards_in_parallel(self, service, data_manager, signal_builder):
        in_flight = 0
        peak = 0

        async def get_summoner(puuid, platform):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return SummonerDTO(puuid=puuid, profile_icon_id=7, summoner_level=90)

        data_manager.get_summoner_by_puuid.side_effect = get_summoner

        result = await service.get_player_cards(lobby("a", "b", "c"), "la2")

        assert peak == 3
        assert [card.puuid for card in result.players] == ["a", "b", "c"]
        assert result.warning is None
        card = result.players[0]
        assert card.degraded is False
        assert card.team_id == 100
        assert card.riot_id == "TestPlayer#LAS"
        assert card.summoner_level == 90
        assert card.ranked.queue_type == "RANKED_SOLO_5x5"
        assert card.mastery.champion_points == 3000
        assert card.insights.get(InsightKind.SMURF).sample.recent_matches == 8
        signal_builder.build_deep_signals.assert_any_await("a", 3, "la2")

    async def test_champion_stats_on_card(self, service, champion_stats):
        result = await service.get_player_cards(lobby("a", champion_id=103), "la2")

        stats = result.players[0].champ_stats
        assert stats.champion_id == 103
        assert stats.games_with_champ == 12
        assert stats.sample_size_ok is True
        champion_stats.get_champion_recent_stats.assert_awaited_once_with("a", 103, "la2")

    async def test_failing_player_degrades_alone(self, service, data_manager):
        async def get_summoner(puuid, platform):
            if puuid == "gone":
                raise NotFoundError("Resource not found", status_code=404)
            return SummonerDTO(puuid=puuid, profile_icon_id=7, summoner_level=90)

        data_manager.get_summoner_by_puuid.side_effect = get_summoner

        result = await service.get_player_cards(lobby("a", "gone", "b"))

        ok_a, gone, ok_b = result.players
        assert not ok_a.degraded and not ok_b.degraded
        assert gone.degraded is True
        assert gone.puuid == "gone"
        assert gone.riot_id == ""
        assert gone.summoner_level == 0
        assert gone.insights is None
        assert gone.champ_stats.note == ChampionStatsNote.FETCH_ERROR
        assert result.warning is None

    async def test_account_and_mastery_failures_are_tolerated(self, service, data_manager):
        data_manager.get_summoner_by_puuid.return_value = SummonerDTO(
            puuid=PUUID, name="OldName", profile_icon_id=29, summoner_level=35
        )
        data_manager.get_account_by_puuid.side_effect = RiotAPIError(
            "Server error", status_code=500
        )
        data_manager.get_champion_masteries.side_effect = RiotAPIError(
            "Server error", status_code=503
        )

        card = (await service.get_player_cards(lobby(PUUID))).players[0]

        assert card.degraded is False
        assert card.riot_id == "OldName"
        assert card.mastery is None
        assert card.ranked.tier == "GOLD"
        assert card.insights is not None

    async def test_account_without_riot_id_uses_empty_name(self, service, data_manager):
        data_manager.get_account_by_puuid.return_value = AccountDTO(puuid=PUUID)

        card = (await service.get_player_cards(lobby(PUUID))).players[0]

        assert card.degraded is False
        assert card.riot_id == ""

    async def test_slow_deep_signals_fall_back_to_cheap(self, service, signal_builder):
        async def slow_deep(puuid, champion_id, platform):
            await asyncio.sleep(1)
            return DeepSignals(recent=RECENT)

        signal_builder.build_deep_signals.side_effect = slow_deep
        service.deep_signals_timeout = 0.01

        card = (await service.get_player_cards(lobby(PUUID))).players[0]

        assert card.degraded is False
        smurf = card.insights.get(InsightKind.SMURF)
        assert smurf.sample.recent_matches is None
        assert smurf.sample.ranked_games == 80

    async def test_slow_champion_stats_time_out(self, service, champion_stats):
        async def slow_stats(puuid, champion_id, platform):
            await asyncio.sleep(1)

        champion_stats.get_champion_recent_stats.side_effect = slow_stats
        service.champ_stats_timeout = 0.01

        card = (await service.get_player_cards(lobby(PUUID, champion_id=7))).players[0]

        assert card.degraded is False
        assert card.champ_stats.champion_id == 7
        assert card.champ_stats.note == ChampionStatsNote.FETCH_ERROR
        assert card.insights is not None

    async def test_without_champion_stats_service(self, data_manager, signal_builder):
        service = PlayerSummaryService(data_manager, signal_builder)

        card = (await service.get_player_cards(lobby(PUUID))).players[0]

        assert card.champ_stats.note == ChampionStatsNote.FEATURE_DISABLED

    async def test_batch_timeout_empties_every_card(self, service, data_manager):
        cancelled = []

        async def hung_summoner(puuid, platform):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(puuid)
                raise

        data_manager.get_summoner_by_puuid.side_effect = hung_summoner
        service.batch_timeout = 0.05

        result = await service.get_player_cards(lobby("a", "b"))

        assert [card.degraded for card in result.players] == [True, True]
        assert [card.puuid for card in result.players] == ["a", "b"]
        assert sorted(cancelled) == ["a", "b"]

    @pytest.mark.parametrize("failing,warned", [(3, False), (4, True)])
    async def test_warning_when_many_cards_degrade(
        self, service, data_manager, failing, warned
    ):
        data_manager.get_summoner_by_puuid.side_effect = AuthenticationError(
            "Forbidden", status_code=403
        )
        puuids = [f"p{i}" for i in range(failing)]

        result = await service.get_player_cards(lobby(*puuids), "la2")

        assert all(card.degraded for card in result.players)
        assert (result.warning is not None) is warned
        if warned:
            assert "LA2" in result.warning

    @pytest.mark.parametrize("count", [0, 11])
    async def test_lobby_size_is_limited(self, service, data_manager, count):
        players = lobby(*[f"p{i}" for i in range(count)])

        with pytest.raises(ValueError):
            await service.get_player_cards(players)

        data_manager.get_summoner_by_puuid.assert_not_called()

    def test_card_request_validation(self):
        request = CardRequest.model_validate(
            {"puuid": "a", "championId": 103, "teamId": 200}
        )

        assert request.champion_id == 103
        with pytest.raises(ValidationError):
            CardRequest(puuid="a", champion_id=1, team_id=300)
        with pytest.raises(ValidationError):
            CardRequest(puuid="", champion_id=1, team_id=100)

    async def test_cards_serialize_camel_case(self, service):
        payload = (await service.get_player_cards(lobby(PUUID))).model_dump(
            by_alias=True
        )

        card = payload["players"][0]
        assert card["teamId"] == 100
        assert card["currentChampionId"] == 3
        assert card["champStats"]["gamesWithChamp"] == 12
        assert "warning" in payload

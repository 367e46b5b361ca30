"""
Tests for the live game service.
"""

from unittest.mock import AsyncMock

import pytest

from lobbyscout.core.riot_api.data_manager import RiotDataManager
from lobbyscout.core.riot_api.errors import (
    AuthenticationError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RiotAPIError,
    RiotErrorCode,
)
from lobbyscout.core.riot_api.models import SpectatorGameDTO
from lobbyscout.features.live_game import LiveGameService, LiveGameUnavailableReason

from tests.helpers import make_settings

PUUID = "test-puuid-123"


@pytest.fixture
def sample_game():
    return SpectatorGameDTO.model_validate(
        {
            "gameId": 987654,
            "gameMode": "CLASSIC",
            "gameStartTime": 1700000000000,
            "participants": [
                {
                    "puuid": PUUID,
                    "teamId": 100,
                    "championId": 103,
                    "spell1Id": 4,
                    "spell2Id": 14,
                    "riotId": "TestPlayer#LAS",
                    "perks": {"perkIds": [8112, 8139], "perkStyle": 8100, "perkSubStyle": 8300},
                },
                {"puuid": "enemy", "teamId": 200, "championId": 7},
            ],
        }
    )


@pytest.fixture
def data_manager():
    return AsyncMock(spec=RiotDataManager)


@pytest.fixture
def service(data_manager, settings):
    return LiveGameService(data_manager, settings)


class TestLiveGameService:
    """Test cases for LiveGameService."""

    async def test_game_split_into_teams(self, service, data_manager, sample_game):
        data_manager.get_active_game.return_value = sample_game

        result = await service.get_live_game(PUUID)

        assert result.available is True
        assert result.game_id == 987654
        assert [p.champion_id for p in result.teams.blue] == [103]
        assert [p.champion_id for p in result.teams.red] == [7]
        blue = result.teams.blue[0]
        assert blue.perk_keystone == 8112
        assert blue.perk_primary_style == 8100
        assert blue.riot_id == "TestPlayer#LAS"
        assert result.teams.red[0].perk_keystone is None

    async def test_spectator_disabled(self, data_manager):
        service = LiveGameService(data_manager, make_settings(feature_spectator=False))

        result = await service.get_live_game(PUUID)

        assert result.available is False
        assert result.reason == LiveGameUnavailableReason.SPECTATOR_DISABLED
        data_manager.get_active_game.assert_not_called()

    @pytest.mark.parametrize(
        "error,reason",
        [
            (NotFoundError("Resource not found", status_code=404), LiveGameUnavailableReason.NOT_IN_GAME),
            (AuthenticationError("Forbidden", status_code=403), LiveGameUnavailableReason.KEY_INVALID),
            (
                RiotAPIError("Unauthorized", status_code=401, code=RiotErrorCode.UNAUTHORIZED),
                LiveGameUnavailableReason.KEY_INVALID,
            ),
            (RateLimitError("Rate limited", status_code=429), LiveGameUnavailableReason.RATE_LIMITED),
            (NetworkError("Network error"), LiveGameUnavailableReason.SPECTATOR_UNAVAILABLE),
            (RiotAPIError("Bad gateway", status_code=502), LiveGameUnavailableReason.SPECTATOR_UNAVAILABLE),
        ],
    )
    async def test_failures_become_reasons(self, service, data_manager, error, reason):
        data_manager.get_active_game.side_effect = error

        result = await service.get_live_game(PUUID)

        assert result.available is False
        assert result.reason == reason
        assert result.teams is None

    async def test_unexpected_errors_propagate(self, service, data_manager):
        data_manager.get_active_game.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await service.get_live_game(PUUID)

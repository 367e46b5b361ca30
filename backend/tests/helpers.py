"""Test doubles shared across test modules."""

from typing import List

from lobbyscout.core.config import Settings
from lobbyscout.core.riot_api.models import MatchDTO


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records delays and returns immediately."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def make_settings(**overrides) -> Settings:
    """Settings isolated from any .env file, with a usable test key."""
    values = {
        "riot_api_key": "RGAPI-test-key",
        "default_platform": "la2",
        "riot_max_retries": 3,
        "feature_match_history": True,
        "feature_spectator": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_participant(puuid: str = "test-puuid", **overrides) -> dict:
    """Match-V5 participant payload with sensible mid-lane defaults."""
    values = {
        "puuid": puuid,
        "championId": 103,
        "teamPosition": "MIDDLE",
        "win": True,
        "kills": 5,
        "deaths": 2,
        "assists": 7,
        "totalMinionsKilled": 180,
        "neutralMinionsKilled": 20,
        "goldEarned": 12000,
        "totalDamageDealtToChampions": 24000,
        "visionScore": 20,
        "timePlayed": 1800,
    }
    values.update(overrides)
    return values


def make_match(match_id: str, *participants: dict, duration: int = 1800) -> MatchDTO:
    """Match-V5 match detail holding the given participant payloads."""
    return MatchDTO.model_validate(
        {
            "metadata": {"matchId": match_id},
            "info": {
                "gameDuration": duration,
                "queueId": 420,
                "participants": list(participants),
            },
        }
    )

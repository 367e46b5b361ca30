"""Riot API endpoint definitions and routing information.

Routing:
    * Account-V1 and Match-V5 are regional (``https://americas.api.riotgames.com``).
    * Summoner, League, Champion-Mastery, Spectator and Status are per platform
      (``https://la2.api.riotgames.com``).
"""

from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from .constants import Platform, QueueType, Region, normalize_platform, platform_to_region


class RiotAPIEndpoints:
    """Riot API endpoint definitions and routing."""

    def __init__(self, default_platform: Union[Platform, str] = Platform.LA2):
        """
        Initialize endpoint configuration.

        :param default_platform: Platform used when a call does not name one
        """
        self.default_platform = normalize_platform(default_platform)

    def _platform(self, platform: Optional[Union[Platform, str]]) -> str:
        return normalize_platform(platform) if platform else self.default_platform

    def get_platform_url(self, platform: Optional[Union[Platform, str]] = None) -> str:
        """Get base URL for platform endpoints."""
        return f"https://{self._platform(platform)}.api.riotgames.com"

    def get_regional_url(self, platform: Optional[Union[Platform, str]] = None) -> str:
        """Get base URL of the regional cluster serving a platform."""
        region: Region = platform_to_region(self._platform(platform))
        return f"https://{region.value}.api.riotgames.com"

    # Account endpoints (Regional)
    def account_by_riot_id(
        self,
        game_name: str,
        tag_line: str,
        platform: Optional[Union[Platform, str]] = None,
    ) -> str:
        """Get account by Riot ID endpoint."""
        base_url = self.get_regional_url(platform)
        return (
            f"{base_url}/riot/account/v1/accounts/by-riot-id/"
            f"{quote(game_name, safe='')}/{quote(tag_line, safe='')}"
        )

    def account_by_puuid(
        self, puuid: str, platform: Optional[Union[Platform, str]] = None
    ) -> str:
        """Get account by PUUID endpoint."""
        base_url = self.get_regional_url(platform)
        return f"{base_url}/riot/account/v1/accounts/by-puuid/{puuid}"

    # Platform endpoints
    def summoner_by_puuid(
        self, puuid: str, platform: Optional[Union[Platform, str]] = None
    ) -> str:
        """Get summoner by PUUID endpoint."""
        return f"{self.get_platform_url(platform)}/lol/summoner/v4/summoners/by-puuid/{puuid}"

    def league_entries_by_puuid(
        self, puuid: str, platform: Optional[Union[Platform, str]] = None
    ) -> str:
        """Get league entries by PUUID endpoint."""
        return f"{self.get_platform_url(platform)}/lol/league/v4/entries/by-puuid/{puuid}"

    def champion_masteries_by_puuid(
        self, puuid: str, platform: Optional[Union[Platform, str]] = None
    ) -> str:
        """Get champion masteries by PUUID endpoint."""
        return (
            f"{self.get_platform_url(platform)}"
            f"/lol/champion-mastery/v4/champion-masteries/by-puuid/{puuid}"
        )

    def active_game_by_puuid(
        self, puuid: str, platform: Optional[Union[Platform, str]] = None
    ) -> str:
        """Get live game by PUUID endpoint."""
        return (
            f"{self.get_platform_url(platform)}"
            f"/lol/spectator/v5/active-games/by-summoner/{puuid}"
        )

    def platform_status(self, platform: Optional[Union[Platform, str]] = None) -> str:
        """Platform status endpoint, used as a cheap API key check."""
        return f"{self.get_platform_url(platform)}/lol/status/v4/platform-data"

    # Match endpoints (Regional)
    def match_ids_by_puuid(
        self, puuid: str, platform: Optional[Union[Platform, str]] = None
    ) -> str:
        """Get match id list by PUUID endpoint (query params built separately)."""
        return f"{self.get_regional_url(platform)}/lol/match/v5/matches/by-puuid/{puuid}/ids"

    def match_by_id(
        self, match_id: str, platform: Optional[Union[Platform, str]] = None
    ) -> str:
        """Get match by ID endpoint."""
        return f"{self.get_regional_url(platform)}/lol/match/v5/matches/{match_id}"


def match_ids_params(
    start: int = 0,
    count: int = 20,
    queue: Optional[Union[int, QueueType]] = None,
    type: Optional[str] = None,
    start_time: Optional[int] = None,
    end_time: Optional[int] = None,
) -> Dict[str, Any]:
    """Build Match-V5 id-list query parameters, omitting unset filters."""
    params: Dict[str, Any] = {"start": start, "count": count}
    if queue is not None:
        params["queue"] = int(queue)
    if type:
        params["type"] = type
    if start_time is not None:
        params["startTime"] = start_time
    if end_time is not None:
        params["endTime"] = end_time
    return params

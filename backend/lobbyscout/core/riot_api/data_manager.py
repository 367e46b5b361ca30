"""
RiotDataManager: cache-first wrappers around the Riot API client.

Simple flow per resource:
1. Check the namespaced cache
2. If found, return the cached DTO
3. If not found, fetch from Riot API on the resource's lane
4. Validate the payload into its DTO
5. Store in cache and return

No business logic lives here. Failures surface as RiotAPIError and are
never cached.
"""

from typing import Any, List, Optional, Type, TypeVar, Union
import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from lobbyscout.core.cache import CacheStore, CacheTTL
from .client import RiotAPIClient
from .constants import Platform, QueueType, normalize_platform
from .endpoints import match_ids_params
from .errors import RiotAPIError, RiotErrorCode
from .models import (
    AccountDTO,
    ChampionMasteryDTO,
    LeagueEntryDTO,
    MatchDTO,
    SpectatorGameDTO,
    SummonerDTO,
)
from .scheduler import Lane

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

PlatformArg = Optional[Union[Platform, str]]


class CacheNamespaces:
    """Cache namespace names, one per resource type."""

    RIOT_ID = "riot_id"
    ACCOUNT_BY_PUUID = "account_by_puuid"
    SUMMONER = "summoner"
    LEAGUE = "league"
    MASTERY = "mastery"
    LIVE_GAME = "live_game"
    MATCH_IDS = "match_ids"
    MATCH = "match"


_league_entries = TypeAdapter(List[LeagueEntryDTO])
_masteries = TypeAdapter(List[ChampionMasteryDTO])
_match_ids = TypeAdapter(List[str])


class RiotDataManager:
    """Typed, cached access to every Riot resource the service consumes."""

    def __init__(self, api_client: RiotAPIClient, cache: CacheStore):
        """Initialize data manager with API client and cache store."""
        self.api_client = api_client
        self.cache = cache
        self.endpoints = api_client.endpoints

    def _platform_key(self, platform: PlatformArg, key: str) -> str:
        resolved = normalize_platform(platform) if platform else self.endpoints.default_platform
        return f"{resolved}:{key}"

    @staticmethod
    def _validate(adapter: Any, payload: Any, url: str) -> Any:
        """Validate a payload, turning shape mismatches into RiotAPIError."""
        try:
            if isinstance(adapter, type) and issubclass(adapter, BaseModel):
                return adapter.model_validate(payload)
            return adapter.validate_python(payload)
        except ValidationError as e:
            logger.warning(
                "Unexpected Riot API payload shape",
                url=url,
                errors=e.error_count(),
            )
            raise RiotAPIError(
                f"Unexpected response shape: {e.error_count()} validation error(s)",
                status_code=502,
                endpoint=url,
                code=RiotErrorCode.UNKNOWN,
            ) from e

    async def _cached_fetch(
        self,
        namespace: str,
        key: str,
        ttl: float,
        url: str,
        adapter: Union[Type[ModelT], TypeAdapter],
        lane: Lane = Lane.INTERACTIVE,
        params: Optional[dict] = None,
    ) -> Any:
        hit = self.cache.get(namespace, key)
        if hit is not None:
            return hit

        payload = await self.api_client.fetch(url, params=params, lane=lane)
        data = self._validate(adapter, payload, url)
        self.cache.set(namespace, key, data, ttl)
        return data

    # ===================
    # Account (regional)
    # ===================

    async def get_account_by_riot_id(
        self, game_name: str, tag_line: str, platform: PlatformArg = None
    ) -> AccountDTO:
        """Resolve a Riot ID to an account; also primes the by-PUUID cache."""
        cache_key = f"{game_name}#{tag_line}".lower()
        hit = self.cache.get(CacheNamespaces.RIOT_ID, cache_key)
        if hit is not None:
            return hit

        url = self.endpoints.account_by_riot_id(game_name, tag_line, platform)
        payload = await self.api_client.fetch(url)
        account: AccountDTO = self._validate(AccountDTO, payload, url)

        self.cache.set(CacheNamespaces.RIOT_ID, cache_key, account, CacheTTL.RIOT_ID)
        self.cache.set(
            CacheNamespaces.ACCOUNT_BY_PUUID,
            account.puuid,
            account,
            CacheTTL.ACCOUNT_BY_PUUID,
        )
        return account

    async def get_account_by_puuid(
        self, puuid: str, platform: PlatformArg = None
    ) -> AccountDTO:
        """Get an account by PUUID; also primes the Riot ID cache."""
        hit = self.cache.get(CacheNamespaces.ACCOUNT_BY_PUUID, puuid)
        if hit is not None:
            return hit

        url = self.endpoints.account_by_puuid(puuid, platform)
        payload = await self.api_client.fetch(url)
        account: AccountDTO = self._validate(AccountDTO, payload, url)

        self.cache.set(
            CacheNamespaces.ACCOUNT_BY_PUUID, puuid, account, CacheTTL.ACCOUNT_BY_PUUID
        )
        if account.game_name and account.tag_line:
            self.cache.set(
                CacheNamespaces.RIOT_ID,
                account.riot_id.lower(),
                account,
                CacheTTL.RIOT_ID,
            )
        return account

    # ===================
    # Platform resources
    # ===================

    async def get_summoner_by_puuid(
        self, puuid: str, platform: PlatformArg = None
    ) -> SummonerDTO:
        """Get summoner profile by PUUID."""
        return await self._cached_fetch(
            CacheNamespaces.SUMMONER,
            self._platform_key(platform, puuid),
            CacheTTL.SUMMONER,
            self.endpoints.summoner_by_puuid(puuid, platform),
            SummonerDTO,
        )

    async def get_league_entries(
        self, puuid: str, platform: PlatformArg = None
    ) -> List[LeagueEntryDTO]:
        """Get ranked league entries by PUUID."""
        return await self._cached_fetch(
            CacheNamespaces.LEAGUE,
            self._platform_key(platform, puuid),
            CacheTTL.LEAGUE,
            self.endpoints.league_entries_by_puuid(puuid, platform),
            _league_entries,
        )

    async def get_champion_masteries(
        self, puuid: str, platform: PlatformArg = None
    ) -> List[ChampionMasteryDTO]:
        """Get champion masteries by PUUID, as returned (highest points first)."""
        return await self._cached_fetch(
            CacheNamespaces.MASTERY,
            self._platform_key(platform, puuid),
            CacheTTL.MASTERY,
            self.endpoints.champion_masteries_by_puuid(puuid, platform),
            _masteries,
        )

    async def get_active_game(
        self, puuid: str, platform: PlatformArg = None
    ) -> SpectatorGameDTO:
        """Get the live game snapshot; NOT_FOUND means not in game."""
        return await self._cached_fetch(
            CacheNamespaces.LIVE_GAME,
            self._platform_key(platform, puuid),
            CacheTTL.LIVE_GAME,
            self.endpoints.active_game_by_puuid(puuid, platform),
            SpectatorGameDTO,
        )

    # ===================
    # Match (regional, bulk lane)
    # ===================

    async def get_match_ids(
        self,
        puuid: str,
        *,
        start: int = 0,
        count: int = 20,
        queue: Optional[Union[int, QueueType]] = None,
        type: Optional[str] = None,
        start_time: Optional[int] = None,
        end_time: Optional[int] = None,
        platform: PlatformArg = None,
    ) -> List[str]:
        """Get match ids by PUUID, newest first."""
        params = match_ids_params(start, count, queue, type, start_time, end_time)
        key = ":".join(
            str(part)
            for part in (puuid, start, count, params.get("queue"), type, start_time, end_time)
        )
        return await self._cached_fetch(
            CacheNamespaces.MATCH_IDS,
            self._platform_key(platform, key),
            CacheTTL.MATCH_IDS,
            self.endpoints.match_ids_by_puuid(puuid, platform),
            _match_ids,
            lane=Lane.BULK,
            params=params,
        )

    async def get_match(self, match_id: str, platform: PlatformArg = None) -> MatchDTO:
        """Get match details by match ID."""
        return await self._cached_fetch(
            CacheNamespaces.MATCH,
            match_id,
            CacheTTL.MATCH_DETAIL,
            self.endpoints.match_by_id(match_id, platform),
            MatchDTO,
            lane=Lane.BULK,
        )

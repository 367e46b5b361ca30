"""
Champion stats derived from Match-V5 history.

Fetches every ranked match from the last 30 days (paginated, capped) and
computes the player's record on one champion. Failures degrade to a
``FETCH_ERROR`` note instead of raising.
"""

import asyncio
import time
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
import structlog

from lobbyscout.core.cache import CacheStore, CacheTTL
from lobbyscout.core.config import Settings, get_global_settings
from lobbyscout.core.riot_api.constants import normalize_platform
from lobbyscout.core.riot_api.data_manager import RiotDataManager
from lobbyscout.core.riot_api.errors import RiotAPIError

logger = structlog.get_logger(__name__)

CHAMP_STATS_NAMESPACE = "champ_stats"
WINDOW_DAYS = 30
WINDOW_LABEL = "30d"
PAGE_SIZE = 100
MAX_MATCH_DETAILS = 200
BATCH_SIZE = 10
MIN_SAMPLE_SIZE = 3


class ChampionStatsNote(str, Enum):
    """Why a champion stats result carries no reliable sample."""

    FEATURE_DISABLED = "FEATURE_DISABLED"
    NO_MATCHES = "NO_MATCHES"
    INSUFFICIENT_SAMPLE = "INSUFFICIENT_SAMPLE"
    NO_CHAMP_GAMES = "NO_CHAMP_GAMES"
    FETCH_ERROR = "FETCH_ERROR"


class ChampionRecentStats(BaseModel):
    """Recent ranked record on one champion."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    champion_id: int
    recent_window: str = WINDOW_LABEL
    total_ranked_games: int = 0
    games_with_champ: int = 0
    wins: int = 0
    losses: int = 0
    winrate_with_champ: Optional[float] = None
    sample_size_ok: bool = False
    note: Optional[ChampionStatsNote] = None


class ChampionStatsService:
    """Computes per-champion winrate over the last 30 days of ranked games."""

    def __init__(
        self,
        data_manager: RiotDataManager,
        cache: CacheStore,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.data_manager = data_manager
        self.cache = cache
        self.settings = settings or get_global_settings()
        self._clock = clock

    async def _fetch_ranked_match_ids(self, puuid: str, platform: str) -> List[str]:
        """Page through ranked match ids in the window, up to MAX_MATCH_DETAILS."""
        start_time = int(self._clock()) - WINDOW_DAYS * 24 * 60 * 60
        match_ids: List[str] = []
        offset = 0

        while len(match_ids) < MAX_MATCH_DETAILS:
            page = await self.data_manager.get_match_ids(
                puuid,
                type="ranked",
                start_time=start_time,
                start=offset,
                count=PAGE_SIZE,
                platform=platform,
            )
            match_ids.extend(page)
            if len(page) < PAGE_SIZE:
                break
            offset += PAGE_SIZE

        return match_ids[:MAX_MATCH_DETAILS]

    async def get_champion_recent_stats(
        self, puuid: str, champion_id: int, platform: Optional[str] = None
    ) -> ChampionRecentStats:
        """
        Get the player's recent ranked record on a champion.

        :param puuid: Player PUUID
        :param champion_id: Champion to filter for
        :param platform: Platform code (default platform if None)
        :returns: ChampionRecentStats; ``note`` explains unreliable samples
        """
        if not self.settings.feature_match_history:
            return ChampionRecentStats(
                champion_id=champion_id, note=ChampionStatsNote.FEATURE_DISABLED
            )

        platform = normalize_platform(platform or self.settings.default_platform)
        cache_key = f"{puuid}:{champion_id}:{WINDOW_LABEL}:{platform}"
        hit = self.cache.get(CHAMP_STATS_NAMESPACE, cache_key)
        if hit is not None:
            return hit

        try:
            match_ids = await self._fetch_ranked_match_ids(puuid, platform)
            if not match_ids:
                result = ChampionRecentStats(
                    champion_id=champion_id, note=ChampionStatsNote.NO_MATCHES
                )
                self.cache.set(CHAMP_STATS_NAMESPACE, cache_key, result, CacheTTL.CHAMP_STATS)
                return result

            games = 0
            wins = 0
            for i in range(0, len(match_ids), BATCH_SIZE):
                batch = match_ids[i : i + BATCH_SIZE]
                results = await asyncio.gather(
                    *(self.data_manager.get_match(mid, platform) for mid in batch),
                    return_exceptions=True,
                )
                for match in results:
                    if isinstance(match, BaseException) or match.info is None:
                        continue
                    participant = match.info.participant(puuid)
                    if participant is not None and participant.champion_id == champion_id:
                        games += 1
                        wins += 1 if participant.win else 0
        except Exception as e:
            detail = e.detail if isinstance(e, RiotAPIError) else str(e)
            logger.warning(
                "Failed to compute champion stats",
                puuid=puuid,
                champion_id=champion_id,
                error=detail,
            )
            return ChampionRecentStats(
                champion_id=champion_id, note=ChampionStatsNote.FETCH_ERROR
            )

        sample_ok = games >= MIN_SAMPLE_SIZE
        note = None
        if not sample_ok:
            note = (
                ChampionStatsNote.INSUFFICIENT_SAMPLE
                if games > 0
                else ChampionStatsNote.NO_CHAMP_GAMES
            )

        result = ChampionRecentStats(
            champion_id=champion_id,
            total_ranked_games=len(match_ids),
            games_with_champ=games,
            wins=wins,
            losses=games - wins,
            winrate_with_champ=wins / games if games else None,
            sample_size_ok=sample_ok,
            note=note,
        )
        self.cache.set(CHAMP_STATS_NAMESPACE, cache_key, result, CacheTTL.CHAMP_STATS)
        return result

"""
Player summary service.

Fetches a player's profile, ranked entries and masteries through the
cached data manager and, for cards, scores insights on top of them.
Single-player calls let RiotAPIError propagate; the lobby batch degrades
each failing player to an empty card instead.
"""

import asyncio
from typing import Awaitable, List, NamedTuple, Optional, Sequence, TypeVar

import structlog

from lobbyscout.core.enums import PlayerRole, RankedQueue
from lobbyscout.core.riot_api.constants import normalize_platform
from lobbyscout.core.riot_api.data_manager import RiotDataManager
from lobbyscout.core.riot_api.errors import RiotAPIError
from lobbyscout.core.riot_api.models import (
    AccountDTO,
    ChampionMasteryDTO,
    LeagueEntryDTO,
    SummonerDTO,
)
from lobbyscout.features.player_insights.champion_stats import (
    ChampionRecentStats,
    ChampionStatsNote,
    ChampionStatsService,
)
from lobbyscout.features.player_insights.config import InsightConfig
from lobbyscout.features.player_insights.schemas import DeepSignals
from lobbyscout.features.player_insights.service import compute_insights
from lobbyscout.features.player_insights.signals import (
    SignalBuilder,
    build_cheap_signals,
    merge_signals,
)
from .schemas import CardRequest, LobbyCard, LobbyCards, PlayerCard, PlayerSummary

logger = structlog.get_logger(__name__)

T = TypeVar("T")

TOP_MASTERIES = 3
MAX_LOBBY_PLAYERS = 10
DEEP_SIGNALS_TIMEOUT_SECONDS = 4.0
CHAMP_STATS_TIMEOUT_SECONDS = 15.0
BATCH_TIMEOUT_SECONDS = 30.0
# More degraded cards than this usually means the API key lost access
DEGRADED_WARNING_THRESHOLD = 3


class Profile(NamedTuple):
    account: AccountDTO
    summoner: SummonerDTO
    entries: List[LeagueEntryDTO]
    masteries: List[ChampionMasteryDTO]


def preferred_entry(entries: Sequence[LeagueEntryDTO]) -> Optional[LeagueEntryDTO]:
    """Solo queue entry, else flex, else None."""
    by_queue = {e.queue_type: e for e in entries}
    return by_queue.get(RankedQueue.SOLO.value) or by_queue.get(RankedQueue.FLEX.value)


class PlayerSummaryService:
    """Service for player summaries, insight cards and lobby cards."""

    def __init__(
        self,
        data_manager: RiotDataManager,
        signal_builder: SignalBuilder,
        insight_config: Optional[InsightConfig] = None,
        champion_stats: Optional[ChampionStatsService] = None,
    ):
        """
        Initialize player summary service.

        :param data_manager: Cached Riot API access
        :type data_manager: RiotDataManager
        :param signal_builder: Builder for cheap and deep signals
        :type signal_builder: SignalBuilder
        :param insight_config: Threshold override for the rules engine
        :type insight_config: Optional[InsightConfig]
        :param champion_stats: Per-champion record for lobby cards
        :type champion_stats: Optional[ChampionStatsService]
        """
        self.data_manager = data_manager
        self.signal_builder = signal_builder
        self.insight_config = insight_config
        self.champion_stats = champion_stats
        self.deep_signals_timeout = DEEP_SIGNALS_TIMEOUT_SECONDS
        self.champ_stats_timeout = CHAMP_STATS_TIMEOUT_SECONDS
        self.batch_timeout = BATCH_TIMEOUT_SECONDS

    async def _fetch_profile(self, puuid: str, platform: Optional[str]) -> Profile:
        summoner = await self.data_manager.get_summoner_by_puuid(puuid, platform)
        account, entries, masteries = await asyncio.gather(
            self.data_manager.get_account_by_puuid(puuid, platform),
            self.data_manager.get_league_entries(puuid, platform),
            self.data_manager.get_champion_masteries(puuid, platform),
        )
        return Profile(account, summoner, entries, masteries)

    @staticmethod
    def _build_summary(profile: Profile) -> PlayerSummary:
        by_queue = {e.queue_type: e for e in profile.entries}
        top = sorted(profile.masteries, key=lambda m: m.champion_points, reverse=True)
        return PlayerSummary(
            puuid=profile.account.puuid,
            riot_id=profile.account.riot_id or "",
            profile_icon_id=profile.summoner.profile_icon_id,
            summoner_level=profile.summoner.summoner_level,
            solo_queue=by_queue.get(RankedQueue.SOLO.value),
            flex_queue=by_queue.get(RankedQueue.FLEX.value),
            top_masteries=top[:TOP_MASTERIES],
        )

    async def get_player_summary(
        self, puuid: str, platform: Optional[str] = None
    ) -> PlayerSummary:
        """
        Get a player's summary.

        :param puuid: Player PUUID
        :param platform: Platform code (default platform if None)
        :returns: PlayerSummary
        :raises RiotAPIError: If any Riot API call fails
        """
        profile = await self._fetch_profile(puuid, platform)
        return self._build_summary(profile)

    async def get_player_insights(
        self,
        puuid: str,
        platform: Optional[str] = None,
        current_champion_id: Optional[int] = None,
        current_role: Optional[PlayerRole] = None,
    ) -> PlayerCard:
        """
        Get a player's summary together with scored insights.

        Deep signals are best-effort; profile failures propagate.

        :param puuid: Player PUUID
        :param platform: Platform code (default platform if None)
        :param current_champion_id: Champion being played right now
        :param current_role: Position being played right now
        :returns: PlayerCard
        :raises RiotAPIError: If a profile call fails
        """
        profile = await self._fetch_profile(puuid, platform)
        signals = await self.signal_builder.build_player_signals(
            puuid,
            profile.summoner.summoner_level,
            profile.entries,
            profile.masteries,
            current_champion_id=current_champion_id,
            current_role=current_role,
            platform=platform,
        )
        insights = compute_insights(signals, self.insight_config)

        logger.info(
            "Player insights computed",
            puuid=puuid,
            smurf_score=insights.summary.smurf.score,
            has_recent=signals.recent is not None,
        )
        return PlayerCard(
            summary=self._build_summary(profile),
            insights=insights,
        )

    # ===================
    # Lobby cards
    # ===================

    @staticmethod
    def _empty_card(request: CardRequest) -> LobbyCard:
        return LobbyCard(
            puuid=request.puuid,
            team_id=request.team_id,
            current_champion_id=request.champion_id,
            champ_stats=ChampionRecentStats(
                champion_id=request.champion_id, note=ChampionStatsNote.FETCH_ERROR
            ),
            degraded=True,
        )

    async def _optional(
        self, lookup: Awaitable[T], puuid: str, resource: str
    ) -> Optional[T]:
        """Await a lookup the card can live without; Riot errors become None."""
        try:
            return await lookup
        except RiotAPIError as e:
            logger.warning(
                "Optional player lookup failed",
                puuid=puuid,
                resource=resource,
                code=e.code.value,
                status=e.status_code,
            )
            return None

    async def _card_champion_stats(
        self, puuid: str, champion_id: int, platform: Optional[str]
    ) -> ChampionRecentStats:
        if self.champion_stats is None:
            return ChampionRecentStats(
                champion_id=champion_id, note=ChampionStatsNote.FEATURE_DISABLED
            )
        try:
            return await asyncio.wait_for(
                self.champion_stats.get_champion_recent_stats(
                    puuid, champion_id, platform
                ),
                timeout=self.champ_stats_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Champion stats timed out",
                puuid=puuid,
                champion_id=champion_id,
                timeout=self.champ_stats_timeout,
            )
            return ChampionRecentStats(
                champion_id=champion_id, note=ChampionStatsNote.FETCH_ERROR
            )

    async def _build_card(
        self, request: CardRequest, platform: Optional[str]
    ) -> LobbyCard:
        """
        Build one lobby card.

        Deep signals and champion stats start first so match fetching
        overlaps the profile calls. Summoner and league entries are
        required; account and masteries are not.
        """
        puuid, champion_id = request.puuid, request.champion_id
        deep_task = asyncio.create_task(
            self.signal_builder.build_deep_signals(puuid, champion_id, platform)
        )
        stats_task = asyncio.create_task(
            self._card_champion_stats(puuid, champion_id, platform)
        )
        try:
            account, summoner, entries, masteries = await asyncio.gather(
                self._optional(
                    self.data_manager.get_account_by_puuid(puuid, platform),
                    puuid,
                    "account",
                ),
                self.data_manager.get_summoner_by_puuid(puuid, platform),
                self.data_manager.get_league_entries(puuid, platform),
                self._optional(
                    self.data_manager.get_champion_masteries(puuid, platform),
                    puuid,
                    "masteries",
                ),
            )
            champ_stats = await stats_task

            try:
                deep = await asyncio.wait_for(
                    deep_task, timeout=self.deep_signals_timeout
                )
            except asyncio.TimeoutError:
                logger.info(
                    "Deep signals timed out, using cheap signals",
                    puuid=puuid,
                    timeout=self.deep_signals_timeout,
                )
                deep = DeepSignals()
        except RiotAPIError as e:
            logger.warning(
                "Lobby card degraded",
                puuid=puuid,
                code=e.code.value,
                status=e.status_code,
                error=e.detail,
            )
            return self._empty_card(request)
        finally:
            for task in (deep_task, stats_task):
                if not task.done():
                    task.cancel()

        cheap = build_cheap_signals(
            summoner.summoner_level, entries, masteries, champion_id
        )
        insights = compute_insights(merge_signals(cheap, deep), self.insight_config)

        riot_id = account.riot_id if account is not None else None
        mastery = next(
            (m for m in masteries or () if m.champion_id == champion_id), None
        )
        return LobbyCard(
            puuid=puuid,
            team_id=request.team_id,
            current_champion_id=champion_id,
            riot_id=riot_id or summoner.name or "",
            summoner_level=summoner.summoner_level,
            profile_icon_id=summoner.profile_icon_id,
            ranked=preferred_entry(entries),
            champ_stats=champ_stats,
            mastery=mastery,
            insights=insights,
        )

    async def get_player_cards(
        self, players: Sequence[CardRequest], platform: Optional[str] = None
    ) -> LobbyCards:
        """
        Build cards for a lobby of up to ten players in parallel.

        Each player degrades on its own to an empty card. The whole batch
        is capped by ``batch_timeout``; when it expires every card is
        empty and in-flight Riot calls are cancelled.

        :param players: Lobby participants, in display order
        :param platform: Platform code (default platform if None)
        :returns: LobbyCards in request order, with a warning when many
            cards are degraded
        :raises ValueError: If players is empty or longer than ten
        """
        if not 1 <= len(players) <= MAX_LOBBY_PLAYERS:
            raise ValueError(
                f"Expected 1 to {MAX_LOBBY_PLAYERS} players, got {len(players)}"
            )

        try:
            results = await asyncio.wait_for(
                asyncio.gather(
                    *(self._build_card(p, platform) for p in players),
                    return_exceptions=True,
                ),
                timeout=self.batch_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Lobby card batch timed out",
                players=len(players),
                timeout=self.batch_timeout,
            )
            results = [None] * len(players)

        cards: List[LobbyCard] = []
        for request, result in zip(players, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Lobby card failed",
                    puuid=request.puuid,
                    error=str(result) or type(result).__name__,
                    error_type=type(result).__name__,
                )
                result = None
            cards.append(self._empty_card(request) if result is None else result)

        degraded = sum(1 for card in cards if card.degraded)
        warning = None
        if degraded > DEGRADED_WARNING_THRESHOLD:
            region = normalize_platform(platform).upper() if platform else "this region"
            warning = (
                f"{degraded} of {len(cards)} players could not be loaded. "
                f"The API key may lack access to {region} or may have expired "
                f"(development keys last 24h)."
            )

        logger.info(
            "Lobby cards built",
            players=len(cards),
            degraded=degraded,
        )
        return LobbyCards(players=cards, warning=warning)

"""
Process-wide service wiring.

One cache, one scheduler, one Riot API client and one data manager are
built at startup and handed to every service, so no module holds hidden
global state and tests can build isolated instances.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from lobbyscout.core.cache import CacheStore
from lobbyscout.core.config import Settings, get_global_settings
from lobbyscout.core.riot_api.client import RiotAPIClient
from lobbyscout.core.riot_api.data_manager import RiotDataManager
from lobbyscout.core.riot_api.scheduler import RequestScheduler
from lobbyscout.features.live_game.service import LiveGameService
from lobbyscout.features.player_insights.champion_stats import ChampionStatsService
from lobbyscout.features.player_insights.config import InsightConfig
from lobbyscout.features.player_insights.signals import SignalBuilder
from lobbyscout.features.players.service import PlayerSummaryService

logger = structlog.get_logger(__name__)


@dataclass
class ServiceContainer:
    """Shared infrastructure plus the services built on it."""

    settings: Settings
    cache: CacheStore
    scheduler: RequestScheduler
    client: RiotAPIClient
    data_manager: RiotDataManager
    signal_builder: SignalBuilder
    champion_stats: ChampionStatsService
    players: PlayerSummaryService
    live_game: LiveGameService

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        insight_config: Optional[InsightConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ServiceContainer":
        """
        Build the container.

        :param settings: Application settings (global settings if None)
        :param insight_config: Rules-engine threshold override
        :param transport: Optional httpx transport, used by tests
        :returns: Wired ServiceContainer
        """
        settings = settings or get_global_settings()
        cache = CacheStore(max_entries=settings.cache_max_entries)
        scheduler = RequestScheduler.from_settings(settings)
        client = RiotAPIClient(
            scheduler=scheduler, settings=settings, transport=transport
        )
        data_manager = RiotDataManager(client, cache)
        signal_builder = SignalBuilder(
            data_manager, cache, settings=settings, config=insight_config
        )
        champion_stats = ChampionStatsService(data_manager, cache, settings=settings)

        logger.info(
            "Service container created",
            platform=settings.default_platform,
            match_history=settings.feature_match_history,
            spectator=settings.feature_spectator,
        )
        return cls(
            settings=settings,
            cache=cache,
            scheduler=scheduler,
            client=client,
            data_manager=data_manager,
            signal_builder=signal_builder,
            champion_stats=champion_stats,
            players=PlayerSummaryService(
                data_manager,
                signal_builder,
                insight_config=insight_config,
                champion_stats=champion_stats,
            ),
            live_game=LiveGameService(data_manager, settings=settings),
        )

    async def aclose(self) -> None:
        """Close the shared HTTP session."""
        await self.client.close()

    async def __aenter__(self) -> "ServiceContainer":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

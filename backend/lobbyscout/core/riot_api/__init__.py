"""
Riot API client package for League of Legends API integration.

This package provides the lane scheduler, the HTTP client with retries and
typed errors, URL routing, response models and cache-first endpoint wrappers.
"""

from .client import RiotAPIClient, KeyStatus, KeyStatusReport
from .constants import Platform, Region, QueueType, platform_to_region
from .data_manager import RiotDataManager, CacheNamespaces
from .endpoints import RiotAPIEndpoints
from .errors import (
    RiotAPIError,
    RiotErrorCode,
    RateLimitError,
    AuthenticationError,
    NotFoundError,
    NetworkError,
)
from .models import (
    AccountDTO,
    SummonerDTO,
    LeagueEntryDTO,
    ChampionMasteryDTO,
    SpectatorGameDTO,
    SpectatorParticipantDTO,
    MatchDTO,
    MatchParticipantDTO,
)
from .scheduler import Lane, LaneConfig, RequestScheduler

__all__ = [
    "RiotAPIClient",
    "KeyStatus",
    "KeyStatusReport",
    "Platform",
    "Region",
    "QueueType",
    "platform_to_region",
    "RiotDataManager",
    "CacheNamespaces",
    "RiotAPIEndpoints",
    "RiotAPIError",
    "RiotErrorCode",
    "RateLimitError",
    "AuthenticationError",
    "NotFoundError",
    "NetworkError",
    "AccountDTO",
    "SummonerDTO",
    "LeagueEntryDTO",
    "ChampionMasteryDTO",
    "SpectatorGameDTO",
    "SpectatorParticipantDTO",
    "MatchDTO",
    "MatchParticipantDTO",
    "Lane",
    "LaneConfig",
    "RequestScheduler",
]

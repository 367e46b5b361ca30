"""
Player insights feature module.

Turns per-player Riot data into scored behavioral insights (SMURF, OTP,
ELO_QUEMADO, LOW_WR, CARRIED, TILTED).
"""

from .config import InsightConfig, get_insight_config
from .schemas import (
    DeepSignals,
    Insight,
    InsightKind,
    InsightSeverity,
    InsightSummary,
    PlayerInsights,
    PlayerSignals,
)
from .service import InsightsEngine, compute_insights, empty_insights
from .signals import SignalBuilder, build_cheap_signals, merge_signals
from .champion_stats import ChampionRecentStats, ChampionStatsService

__all__ = [
    "InsightConfig",
    "get_insight_config",
    "DeepSignals",
    "Insight",
    "InsightKind",
    "InsightSeverity",
    "InsightSummary",
    "PlayerInsights",
    "PlayerSignals",
    "InsightsEngine",
    "compute_insights",
    "empty_insights",
    "SignalBuilder",
    "build_cheap_signals",
    "merge_signals",
    "ChampionRecentStats",
    "ChampionStatsService",
]

"""
Configurable thresholds and point weights for the insights engine.

All magic numbers live here. Defaults are hand-tuned; every value can be
overridden from the environment with the ``INSIGHTS_`` prefix and ``__`` as
nested delimiter, e.g. ``INSIGHTS_SMURF__CONFIRMED_MIN=80``.

Keep in sync with the deep-signal window: "recent" signals cover at most
``match_filter.max_match_details`` games from the last seven days, while
ranked totals from League-V4 cover the whole split.
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger(__name__)


class ConfidenceConfig(BaseModel):
    """Sample sizes that count as full (1.0) confidence."""

    recent_matches_full: int = Field(default=10, gt=0)
    ranked_games_full: int = Field(default=40, gt=0)
    champ_games_full: int = Field(default=8, gt=0)
    mastery_entries_full: int = Field(default=3, gt=0)
    # Minimum recent matches to allow "confirmed" severity
    recent_min_for_confirmed: int = 6


class MatchFilterConfig(BaseModel):
    """Deep-signal window and Match-V5 fetch shape."""

    window_days: int = 7
    # startTime is rounded down to this bucket so repeated builds share cache keys
    start_bucket_seconds: int = 900
    match_id_count: int = 100
    max_match_details: int = 10
    batch_size: int = Field(default=3, gt=0)
    # Shorter games are remakes or aborted games
    min_duration_seconds: int = 600


class SmurfThresholds(BaseModel):
    """SMURF scoring."""

    # Ranked WR (season totals from League-V4)
    ranked_games_min: int = 10
    ranked_wr_base: float = 0.60
    ranked_wr_base_points: float = 35
    ranked_wr_high: float = 0.65
    ranked_wr_high_points: float = 15
    hot_streak_points: float = 10
    fresh_blood_points: float = 5
    # Account level
    level_low: int = 80
    level_low_points: float = 10
    level_very_low: int = 50
    level_very_low_points: float = 15
    # Recent window
    recent_matches_min: int = 5
    recent_wr_high: float = 0.65
    recent_wr_high_points: float = 20
    recent_kda_high: float = 3.5
    recent_kda_points: float = 10
    # Role-aware farming / vision
    cs_per_min_lane: float = 6.5
    cs_per_min_jungle: float = 5.5
    vision_per_min_support: float = 1.2
    role_points: float = 8
    # Champion dominance
    champ_games_min: int = 3
    champ_wr_high: float = 0.70
    champ_dominance_points: float = 15
    champ_pool_top_share_high: float = 0.55
    champ_pool_top_wr_high: float = 0.60
    champ_pool_points: float = 10
    # A losing ranked record is strong evidence against smurfing
    low_wr_penalty_threshold: float = 0.47
    low_wr_penalty_points: float = 40
    # Severity
    confirmed_min: float = 85
    confirmed_confidence_min: float = 0.55
    ranked_games_min_for_confirmed: int = 30
    high_min: float = 70
    medium_min: float = 50


class OtpThresholds(BaseModel):
    """OTP (one-trick) scoring."""

    recent_matches_min: int = 6
    top_share_base: float = 0.65
    top_share_base_points: float = 50
    top_share_high: float = 0.75
    top_share_high_points: float = 15
    mastery_gap_multiplier: float = 2
    mastery_gap_points: float = 15
    wr_split_diff: float = 0.10
    wr_split_points: float = 10
    high_min: float = 75
    medium_min: float = 55
    # "high" is unreachable below this many recent matches
    low_sample_matches_max: int = 5


class EloQuemadoThresholds(BaseModel):
    """ELO_QUEMADO (burned rank) scoring."""

    ranked_games_min_for_label: int = 40
    ranked_games_base: int = 150
    ranked_games_base_points: float = 25
    ranked_games_high: int = 250
    ranked_games_high_points: float = 15
    ranked_wr_low_games_min: int = 60
    ranked_wr_low: float = 0.48
    ranked_wr_low_points: float = 25
    ranked_wr_very_low: float = 0.45
    ranked_wr_very_low_points: float = 15
    recent_matches_min: int = 5
    recent_wr_low: float = 0.42
    recent_wr_low_points: float = 20
    streak_loss_min: int = 4
    streak_loss_points: float = 10
    high_min: float = 75
    medium_min: float = 55


class LowWrThresholds(BaseModel):
    """LOW_WR (low winrate / low performance) scoring."""

    ranked_games_min: int = 15
    ranked_wr_low: float = 0.45
    ranked_wr_low_points: float = 45
    ranked_wr_very_low: float = 0.40
    ranked_wr_very_low_points: float = 15
    recent_matches_min: int = 5
    recent_wr_low: float = 0.40
    recent_wr_low_points: float = 20
    cs_per_min_low_lane: float = 5.2
    vision_per_min_low_support: float = 0.7
    role_points: float = 10
    kda_low: float = 1.5
    kda_low_points: float = 10
    high_min: float = 75
    medium_min: float = 55


class CarriedThresholds(BaseModel):
    """CARRIED (boosted) scoring."""

    ranked_wr_high: float = 0.58
    kda_low: float = 1.4
    recent_matches_min: int = 6
    base_points: float = 65
    high_min: float = 70
    medium_min: float = 50


class TiltedThresholds(BaseModel):
    """TILTED scoring."""

    streak_loss_high: int = 5
    streak_loss_high_points: float = 60
    recent_wr_very_low: float = 0.30
    recent_wr_very_low_matches_min: int = 5
    recent_wr_very_low_points: float = 25
    high_min: float = 70
    medium_min: float = 50


class InsightConfig(BaseSettings):
    """Complete insights-engine configuration."""

    confidence: ConfidenceConfig = Field(default_factory=ConfidenceConfig)
    match_filter: MatchFilterConfig = Field(default_factory=MatchFilterConfig)
    smurf: SmurfThresholds = Field(default_factory=SmurfThresholds)
    otp: OtpThresholds = Field(default_factory=OtpThresholds)
    elo_quemado: EloQuemadoThresholds = Field(default_factory=EloQuemadoThresholds)
    low_wr: LowWrThresholds = Field(default_factory=LowWrThresholds)
    carried: CarriedThresholds = Field(default_factory=CarriedThresholds)
    tilted: TiltedThresholds = Field(default_factory=TiltedThresholds)

    model_config = SettingsConfigDict(
        env_prefix="INSIGHTS_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_insight_config() -> InsightConfig:
    """Get the process-wide insights configuration (environment overrides applied)."""
    config = InsightConfig()
    logger.debug(
        "Insight configuration loaded",
        smurf_confirmed_min=config.smurf.confirmed_min,
        recent_window=config.match_filter.max_match_details,
    )
    return config

"""
Insight engine schemas - pure data, no IO.

Every signal field is optional: ``None`` means "no data", which scorers
treat differently from a present zero (unknown ranked games is not the same
as zero ranked games). All models are frozen.
"""

from enum import Enum
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lobbyscout.core.enums import PlayerRole, RankedQueue


class SchemaModel(BaseModel):
    """Frozen model serialized with camelCase aliases."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )


class InsightKind(str, Enum):
    """Behavioral patterns the engine scores."""

    SMURF = "SMURF"
    OTP = "OTP"
    ELO_QUEMADO = "ELO_QUEMADO"
    LOW_WR = "LOW_WR"
    CARRIED = "CARRIED"
    TILTED = "TILTED"


class InsightSeverity(str, Enum):
    """Severity tiers, lowest first."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CONFIRMED = "confirmed"

    @property
    def is_visible(self) -> bool:
        """Whether the severity is above "low" and shown to users."""
        return self in (
            InsightSeverity.MEDIUM,
            InsightSeverity.HIGH,
            InsightSeverity.CONFIRMED,
        )


# ===================
# Signals (engine input)
# ===================


class RankedSignals(SchemaModel):
    """Season totals for the preferred ranked queue."""

    queue: Optional[RankedQueue] = None
    tier: Optional[str] = None
    rank: Optional[str] = None
    lp: Optional[int] = None
    wins: Optional[int] = None
    losses: Optional[int] = None
    hot_streak: Optional[bool] = None
    fresh_blood: Optional[bool] = None
    veteran: Optional[bool] = None
    inactive: Optional[bool] = None


class StreakSignals(SchemaModel):
    """Current streak counted from the newest match backwards."""

    type: Literal["W", "L"]
    count: int = Field(ge=0)


class ChampPoolEntry(SchemaModel):
    """Games and winrate on one champion within the recent window."""

    champion_id: int
    games: int
    winrate: float


class RolePoolEntry(SchemaModel):
    """Games in one role within the recent window."""

    role: PlayerRole
    games: int


class AverageStats(SchemaModel):
    """Per-match and per-minute averages; None when not computable."""

    kda: Optional[float] = None
    deaths: Optional[float] = None
    cs_per_min: Optional[float] = None
    gold_per_min: Optional[float] = None
    damage_per_min: Optional[float] = None
    vision_per_min: Optional[float] = None


class RecentSignals(SchemaModel):
    """Aggregate over the recent ranked match window."""

    window: int
    matches: int
    wins: int
    losses: int
    winrate: float
    streak: StreakSignals
    champ_pool: Tuple[ChampPoolEntry, ...] = ()
    role_pool: Tuple[RolePoolEntry, ...] = ()
    avg: AverageStats = Field(default_factory=AverageStats)


class ChampRecentSignals(SchemaModel):
    """Recent record on the champion currently being played."""

    champion_id: int
    games: int
    wins: int
    losses: int
    winrate: float


class MasteryEntry(SchemaModel):
    """Mastery points and level on one champion."""

    champion_id: Optional[int] = None
    points: int
    level: int


class MasterySignals(SchemaModel):
    """Top masteries (highest points first) and the current champion's mastery."""

    top: Tuple[MasteryEntry, ...] = ()
    current_champion: Optional[MasteryEntry] = None


class PlayerSignals(SchemaModel):
    """Immutable per-player snapshot fed into the rules engine."""

    # cheap
    summoner_level: Optional[int] = None
    ranked: Optional[RankedSignals] = None
    mastery: Optional[MasterySignals] = None
    # context
    current_champion_id: Optional[int] = None
    current_role: Optional[PlayerRole] = None
    # deep (Match-V5)
    recent: Optional[RecentSignals] = None
    champ_recent: Optional[ChampRecentSignals] = None


class DeepSignals(SchemaModel):
    """Result of the feature-gated match-history aggregation."""

    recent: Optional[RecentSignals] = None
    champ_recent: Optional[ChampRecentSignals] = None


# ===================
# Insights (engine output)
# ===================


class InsightSample(SchemaModel):
    """Sample sizes an insight was computed from."""

    ranked_games: Optional[int] = None
    recent_matches: Optional[int] = None
    champ_matches: Optional[int] = None


class Insight(SchemaModel):
    """One scored behavioral pattern."""

    kind: InsightKind
    score: float = Field(ge=0, le=100)
    confidence: float = Field(ge=0, le=1)
    severity: InsightSeverity
    reasons: Tuple[str, ...] = ()
    sample: InsightSample = Field(default_factory=InsightSample)


class SmurfSummary(SchemaModel):
    """Derived smurf flags."""

    confirmed: bool = False
    probable: bool = False
    score: float = 0


class KindScore(SchemaModel):
    """Raw score of one insight kind."""

    score: float = 0


class InsightSummary(SchemaModel):
    """Compact view of all six kinds."""

    smurf: SmurfSummary = Field(default_factory=SmurfSummary)
    otp: KindScore = Field(default_factory=KindScore)
    elo_quemado: KindScore = Field(default_factory=KindScore)
    low_wr: KindScore = Field(default_factory=KindScore)
    carried: KindScore = Field(default_factory=KindScore)
    tilted: KindScore = Field(default_factory=KindScore)


class PlayerInsights(SchemaModel):
    """Engine output: one insight per kind plus the summary."""

    insights: Tuple[Insight, ...] = ()
    summary: InsightSummary = Field(default_factory=InsightSummary)

    def get(self, kind: InsightKind) -> Optional[Insight]:
        """Return the insight of a kind, if present."""
        return next((i for i in self.insights if i.kind == kind), None)

"""
Base class for insight analyzers.

This module provides the abstract base class that all insight analyzers
inherit from, plus the numeric helpers they share. Analyzers are pure:
no IO, no hidden state, and total over every ``PlayerSignals`` input.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import structlog

from lobbyscout.core.enums import PlayerRole
from ..config import InsightConfig, get_insight_config
from ..schemas import (
    Insight,
    InsightKind,
    InsightSample,
    InsightSeverity,
    PlayerSignals,
)

logger = structlog.get_logger(__name__)


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a value into ``[lo, hi]``; None and NaN collapse to ``lo``."""
    if value is None or math.isnan(value):
        return lo
    return min(hi, max(lo, value))


def safe_div(numerator: float, denominator: float, fallback: float = 0.0) -> float:
    """Divide, returning ``fallback`` on a zero denominator."""
    return fallback if denominator == 0 else numerator / denominator


def pct(value: float) -> int:
    """Ratio as a rounded percentage."""
    return round(value * 100)


def ranked_games(signals: PlayerSignals) -> int:
    """Total ranked games; zero when ranked data is absent."""
    if signals.ranked is None:
        return 0
    return (signals.ranked.wins or 0) + (signals.ranked.losses or 0)


def ranked_winrate(signals: PlayerSignals) -> Optional[float]:
    """Ranked winrate, or None when no ranked games are known."""
    games = ranked_games(signals)
    if games <= 0:
        return None
    return safe_div(signals.ranked.wins or 0, games)


def current_role(signals: PlayerSignals) -> PlayerRole:
    return signals.current_role or PlayerRole.UNKNOWN


@dataclass
class ScoreAccumulator:
    """Running point total plus the reason behind each contribution."""

    score: float = 0.0
    reasons: List[str] = field(default_factory=list)

    def add(self, points: float, reason: str) -> None:
        self.score += points
        self.reasons.append(reason)


class BaseInsightAnalyzer(ABC):
    """
    Abstract base class for insight analyzers.

    Subclasses score one ``InsightKind`` from a ``PlayerSignals`` snapshot
    and return a fully-formed ``Insight``.
    """

    kind: InsightKind
    fallback_reason: str = "No signals detected"

    def __init__(self, config: Optional[InsightConfig] = None):
        self.config = config or get_insight_config()
        self.logger = structlog.get_logger(f"{__name__}.{self.kind.value.lower()}")

    @abstractmethod
    def analyze(self, signals: PlayerSignals) -> Insight:
        """
        Score one behavioral pattern.

        :param signals: Player signal snapshot
        :type signals: PlayerSignals
        :returns: Insight with score, confidence, severity and reasons
        :rtype: Insight
        """

    # ===================
    # Confidence
    # ===================

    def _recent_confidence(self, signals: PlayerSignals) -> float:
        matches = signals.recent.matches if signals.recent else 0
        return clamp(
            safe_div(matches, self.config.confidence.recent_matches_full), 0, 1
        )

    def _ranked_confidence(self, signals: PlayerSignals) -> float:
        return clamp(
            safe_div(ranked_games(signals), self.config.confidence.ranked_games_full),
            0,
            1,
        )

    def _champ_confidence(self, signals: PlayerSignals) -> float:
        games = signals.champ_recent.games if signals.champ_recent else 0
        return clamp(safe_div(games, self.config.confidence.champ_games_full), 0, 1)

    def _mastery_confidence(self, signals: PlayerSignals) -> float:
        entries = len(signals.mastery.top) if signals.mastery else 0
        return clamp(
            safe_div(entries, self.config.confidence.mastery_entries_full), 0, 1
        )

    @staticmethod
    def _weighted_confidence(parts: Iterable[Tuple[float, float]]) -> float:
        """
        Weighted average of ``(confidence, weight)`` pairs.

        Zero-valued confidences still count; zero weights are skipped.
        """
        total_weight = 0.0
        total_value = 0.0
        for value, weight in parts:
            if weight > 0:
                total_weight += weight
                total_value += value * weight
        return clamp(safe_div(total_value, total_weight), 0, 1)

    # ===================
    # Severity
    # ===================

    @staticmethod
    def _severity(
        score: float,
        high_min: float,
        medium_min: float,
        confirmed: bool = False,
    ) -> InsightSeverity:
        """Map a clamped score onto a severity tier."""
        if confirmed:
            return InsightSeverity.CONFIRMED
        if score >= high_min:
            return InsightSeverity.HIGH
        if score >= medium_min:
            return InsightSeverity.MEDIUM
        if score > 0:
            return InsightSeverity.LOW
        return InsightSeverity.NONE

    # ===================
    # Result
    # ===================

    def _create_insight(
        self,
        score: float,
        confidence: float,
        severity: InsightSeverity,
        reasons: List[str],
        sample: InsightSample,
    ) -> Insight:
        """
        Create an Insight with clamped values and a fallback reason.

        :param score: Point total (clamped to 0..100)
        :param confidence: Data-availability ratio (clamped to 0..1)
        :param severity: Severity tier
        :param reasons: Triggered reasons; empty means the fallback reason
        :param sample: Sample sizes the score was computed from
        :returns: Configured Insight
        """
        insight = Insight(
            kind=self.kind,
            score=clamp(score, 0, 100),
            confidence=clamp(confidence, 0, 1),
            severity=severity,
            reasons=tuple(reasons) or (self.fallback_reason,),
            sample=sample,
        )
        self._log_analysis_result(insight)
        return insight

    def _log_analysis_result(self, insight: Insight) -> None:
        self.logger.debug(
            "Insight analysis completed",
            kind=insight.kind.value,
            score=insight.score,
            confidence=round(insight.confidence, 3),
            severity=insight.severity.value,
        )

"""
Player insights rules engine.

Runs one analyzer per insight kind over an immutable ``PlayerSignals``
snapshot, then combines the results:
- SMURF is suppressed whenever LOW_WR or ELO_QUEMADO is visible
- the summary exposes derived smurf flags plus every kind's raw score

Pure: no network, no cache, identical input gives identical output.
"""

from functools import lru_cache
from typing import Dict, List, Optional

import structlog

from .analyzers import (
    BaseInsightAnalyzer,
    CarriedAnalyzer,
    EloQuemadoAnalyzer,
    LowWrAnalyzer,
    OtpAnalyzer,
    SmurfAnalyzer,
    TiltedAnalyzer,
)
from .config import InsightConfig, get_insight_config
from .schemas import (
    Insight,
    InsightKind,
    InsightSeverity,
    InsightSummary,
    KindScore,
    PlayerInsights,
    PlayerSignals,
    SmurfSummary,
)

logger = structlog.get_logger(__name__)

# Kinds whose visibility contradicts a smurf verdict
SMURF_SUPPRESSORS = (InsightKind.LOW_WR, InsightKind.ELO_QUEMADO)


class InsightsEngine:
    """Orchestrates the six insight analyzers in a fixed order."""

    def __init__(self, config: Optional[InsightConfig] = None):
        """
        Initialize the engine.

        :param config: Threshold configuration (process-wide config if None)
        :type config: Optional[InsightConfig]
        """
        self.config = config or get_insight_config()
        self.analyzers: List[BaseInsightAnalyzer] = [
            SmurfAnalyzer(self.config),
            OtpAnalyzer(self.config),
            EloQuemadoAnalyzer(self.config),
            LowWrAnalyzer(self.config),
            CarriedAnalyzer(self.config),
            TiltedAnalyzer(self.config),
        ]

    def compute(self, signals: PlayerSignals) -> PlayerInsights:
        """
        Score every insight kind for one player.

        :param signals: Player signal snapshot; any field may be absent
        :type signals: PlayerSignals
        :returns: Exactly one insight per kind plus the summary
        :rtype: PlayerInsights
        """
        insights = [analyzer.analyze(signals) for analyzer in self.analyzers]
        insights = self._apply_smurf_suppression(insights)
        summary = self._build_summary({i.kind: i for i in insights})

        logger.debug(
            "Insights computed",
            smurf=summary.smurf.score,
            smurf_confirmed=summary.smurf.confirmed,
            visible=[i.kind.value for i in insights if i.severity.is_visible],
        )
        return PlayerInsights(insights=tuple(insights), summary=summary)

    @staticmethod
    def _apply_smurf_suppression(insights: List[Insight]) -> List[Insight]:
        by_kind = {i.kind: i for i in insights}
        suppressed = any(
            by_kind[kind].severity.is_visible
            for kind in SMURF_SUPPRESSORS
            if kind in by_kind
        )
        if not suppressed:
            return insights

        return [
            i.model_copy(update={"score": 0, "severity": InsightSeverity.NONE})
            if i.kind == InsightKind.SMURF
            else i
            for i in insights
        ]

    @staticmethod
    def _build_summary(by_kind: Dict[InsightKind, Insight]) -> InsightSummary:
        def score(kind: InsightKind) -> KindScore:
            insight = by_kind.get(kind)
            return KindScore(score=insight.score if insight else 0)

        smurf = by_kind.get(InsightKind.SMURF)
        return InsightSummary(
            smurf=SmurfSummary(
                confirmed=smurf is not None
                and smurf.severity == InsightSeverity.CONFIRMED,
                probable=smurf is not None
                and smurf.severity in (InsightSeverity.HIGH, InsightSeverity.MEDIUM),
                score=smurf.score if smurf else 0,
            ),
            otp=score(InsightKind.OTP),
            elo_quemado=score(InsightKind.ELO_QUEMADO),
            low_wr=score(InsightKind.LOW_WR),
            carried=score(InsightKind.CARRIED),
            tilted=score(InsightKind.TILTED),
        )


@lru_cache(maxsize=1)
def _default_engine() -> InsightsEngine:
    return InsightsEngine(get_insight_config())


def compute_insights(
    signals: PlayerSignals, config: Optional[InsightConfig] = None
) -> PlayerInsights:
    """
    Compute all insights for a player.

    :param signals: Player signal snapshot
    :param config: Threshold override; process-wide config if None
    :returns: PlayerInsights with one insight per kind
    """
    engine = InsightsEngine(config) if config is not None else _default_engine()
    return engine.compute(signals)


def empty_insights() -> PlayerInsights:
    """Insights for a player with no data: no insights, all scores zero."""
    return PlayerInsights(insights=(), summary=InsightSummary())

"""LOW_WR (low winrate / low performance) analyzer."""

from typing import Optional

from .base_analyzer import (
    BaseInsightAnalyzer,
    ScoreAccumulator,
    clamp,
    current_role,
    pct,
    ranked_games,
    ranked_winrate,
)
from ..schemas import Insight, InsightKind, InsightSample, PlayerSignals
from lobbyscout.core.enums import PlayerRole


class LowWrAnalyzer(BaseInsightAnalyzer):
    """Analyzes low ranked or recent winrate and role-aware shortfalls."""

    kind = InsightKind.LOW_WR
    fallback_reason = "Performance within the normal range"

    def analyze(self, signals: PlayerSignals) -> Insight:
        t = self.config.low_wr
        games = ranked_games(signals)
        winrate = ranked_winrate(signals)
        acc = ScoreAccumulator()

        self._score_ranked(games, winrate, acc)
        self._score_recent(signals, acc)

        score = clamp(acc.score, 0, 100)
        confidence = self._weighted_confidence(
            [
                (self._ranked_confidence(signals), 3),
                (self._recent_confidence(signals), 2),
            ]
        )
        severity = self._severity(score, t.high_min, t.medium_min)

        return self._create_insight(
            score,
            confidence,
            severity,
            acc.reasons,
            InsightSample(
                ranked_games=games,
                recent_matches=signals.recent.matches if signals.recent else None,
            ),
        )

    def _score_ranked(
        self, games: int, winrate: Optional[float], acc: ScoreAccumulator
    ) -> None:
        t = self.config.low_wr
        if games < t.ranked_games_min or winrate is None:
            return
        if winrate <= t.ranked_wr_low:
            acc.add(
                t.ranked_wr_low_points, f"Ranked WR {pct(winrate)}% over {games} games"
            )
        if winrate <= t.ranked_wr_very_low:
            acc.add(t.ranked_wr_very_low_points, f"Very low ranked WR: {pct(winrate)}%")

    def _score_recent(self, signals: PlayerSignals, acc: ScoreAccumulator) -> None:
        t = self.config.low_wr
        recent = signals.recent
        if recent is None or recent.matches < t.recent_matches_min:
            return

        if recent.winrate <= t.recent_wr_low:
            acc.add(
                t.recent_wr_low_points,
                f"Recent WR {pct(recent.winrate)}% over {recent.matches} games",
            )

        role = current_role(signals)
        cs = recent.avg.cs_per_min
        vision = recent.avg.vision_per_min
        if role.is_lane and cs is not None and cs < t.cs_per_min_low_lane:
            acc.add(t.role_points, f"Low CS/min: {cs:.1f} for {role.value}")
        if (
            role == PlayerRole.UTILITY
            and vision is not None
            and vision < t.vision_per_min_low_support
        ):
            acc.add(t.role_points, f"Low vision/min: {vision:.1f} for support")

        if recent.avg.kda is not None and recent.avg.kda <= t.kda_low:
            acc.add(t.kda_low_points, f"Low average KDA: {recent.avg.kda:.1f}")

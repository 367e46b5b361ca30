"""CARRIED (boosted) analyzer: winning without strong individual performance."""

from .base_analyzer import (
    BaseInsightAnalyzer,
    clamp,
    pct,
    ranked_games,
    ranked_winrate,
)
from ..schemas import Insight, InsightKind, InsightSample, PlayerSignals


class CarriedAnalyzer(BaseInsightAnalyzer):
    kind = InsightKind.CARRIED
    fallback_reason = "Performance consistent with winrate"

    def analyze(self, signals: PlayerSignals) -> Insight:
        t = self.config.carried
        games = ranked_games(signals)
        winrate = ranked_winrate(signals)
        recent = signals.recent
        score = 0.0
        reasons = []

        if (
            winrate is not None
            and winrate >= t.ranked_wr_high
            and recent is not None
            and recent.matches >= t.recent_matches_min
            and recent.avg.kda is not None
            and recent.avg.kda <= t.kda_low
        ):
            score = t.base_points
            reasons.append(
                f"Ranked WR {pct(winrate)}% but average KDA "
                f"{recent.avg.kda:.1f} (<= {t.kda_low})"
            )

        score = clamp(score, 0, 100)
        confidence = self._weighted_confidence(
            [
                (self._ranked_confidence(signals), 2),
                (self._recent_confidence(signals), 3),
            ]
        )
        severity = self._severity(score, t.high_min, t.medium_min)

        return self._create_insight(
            score,
            confidence,
            severity,
            reasons,
            InsightSample(
                ranked_games=games,
                recent_matches=recent.matches if recent else None,
            ),
        )

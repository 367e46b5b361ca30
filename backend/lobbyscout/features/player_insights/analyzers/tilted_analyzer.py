"""TILTED analyzer: active losing streak and depressed recent winrate."""

from .base_analyzer import BaseInsightAnalyzer, clamp, pct
from ..schemas import Insight, InsightKind, InsightSample, PlayerSignals


class TiltedAnalyzer(BaseInsightAnalyzer):
    kind = InsightKind.TILTED
    fallback_reason = "No tilt signals"

    def analyze(self, signals: PlayerSignals) -> Insight:
        t = self.config.tilted
        recent = signals.recent
        score = 0.0
        reasons = []

        if recent is not None:
            if recent.streak.type == "L" and recent.streak.count >= t.streak_loss_high:
                score += t.streak_loss_high_points
                reasons.append(f"{recent.streak.count} losses in a row")
            if (
                recent.matches >= t.recent_wr_very_low_matches_min
                and recent.winrate <= t.recent_wr_very_low
            ):
                score += t.recent_wr_very_low_points
                reasons.append(
                    f"Recent WR {pct(recent.winrate)}% over {recent.matches} games"
                )

        score = clamp(score, 0, 100)
        severity = self._severity(score, t.high_min, t.medium_min)

        return self._create_insight(
            score,
            self._recent_confidence(signals),
            severity,
            reasons,
            InsightSample(recent_matches=recent.matches if recent else None),
        )

"""OTP (one-trick) analyzer."""

from .base_analyzer import BaseInsightAnalyzer, clamp, pct, safe_div
from ..schemas import Insight, InsightKind, InsightSample, PlayerSignals

# Effectively unreachable "high" cutoff for low-sample players
_UNREACHABLE_SCORE = 999


class OtpAnalyzer(BaseInsightAnalyzer):
    """Analyzes champion-pool concentration and mastery gaps."""

    kind = InsightKind.OTP
    fallback_reason = "Varied champion pool"

    def analyze(self, signals: PlayerSignals) -> Insight:
        t = self.config.otp
        score = 0.0
        reasons = []

        recent = signals.recent
        if recent is not None and recent.matches >= t.recent_matches_min and recent.champ_pool:
            top = recent.champ_pool[0]
            share = safe_div(top.games, recent.matches)

            if share >= t.top_share_base:
                score += t.top_share_base_points
                reasons.append(f"{pct(share)}% of recent games on a single champion")
            if share >= t.top_share_high:
                score += t.top_share_high_points
                reasons.append(f"Very concentrated pool: {pct(share)}% on one champion")

            diff = top.winrate - recent.winrate
            if recent.winrate > 0 and diff >= t.wr_split_diff:
                score += t.wr_split_points
                reasons.append(
                    f"WR on main ({pct(top.winrate)}%) vs overall "
                    f"({pct(recent.winrate)}%): +{pct(diff)}%"
                )

        mastery = signals.mastery
        if mastery is not None and len(mastery.top) >= 2:
            first, second = mastery.top[0], mastery.top[1]
            if first.points >= second.points * t.mastery_gap_multiplier:
                score += t.mastery_gap_points
                reasons.append(
                    f"Mastery: {first.points / 1000:.0f}k points on main vs "
                    f"{second.points / 1000:.0f}k on second"
                )

        score = clamp(score, 0, 100)
        confidence = self._weighted_confidence(
            [
                (self._recent_confidence(signals), 3),
                (self._mastery_confidence(signals), 1),
            ]
        )

        recent_matches = recent.matches if recent else 0
        high_min = (
            _UNREACHABLE_SCORE if recent_matches < t.low_sample_matches_max else t.high_min
        )
        severity = self._severity(score, high_min, t.medium_min)

        return self._create_insight(
            score,
            confidence,
            severity,
            reasons,
            InsightSample(recent_matches=recent.matches if recent else None),
        )

"""
SMURF analyzer.

Scores an experienced player on a low-visibility account: high ranked
winrate at volume, a young account, hot streak / fresh blood flags, strong
recent form, role-aware farming or vision, and champion dominance.
"""

from typing import Optional

from .base_analyzer import (
    BaseInsightAnalyzer,
    ScoreAccumulator,
    clamp,
    current_role,
    pct,
    ranked_games,
    ranked_winrate,
    safe_div,
)
from ..schemas import Insight, InsightKind, InsightSample, PlayerSignals
from lobbyscout.core.enums import PlayerRole


class SmurfAnalyzer(BaseInsightAnalyzer):
    """Analyzes smurf indicators; the only kind that can reach "confirmed"."""

    kind = InsightKind.SMURF
    fallback_reason = "No smurf signals detected"

    def analyze(self, signals: PlayerSignals) -> Insight:
        t = self.config.smurf
        games = ranked_games(signals)
        winrate = ranked_winrate(signals)
        acc = ScoreAccumulator()

        self._score_ranked(signals, games, winrate, acc)
        self._score_level(signals, acc)
        self._score_recent(signals, acc)
        self._score_champion(signals, acc)

        score = clamp(acc.score, 0, 100)
        confidence = self._weighted_confidence(
            [
                (self._ranked_confidence(signals), 3),
                (self._recent_confidence(signals), 2),
                (self._champ_confidence(signals), 1),
            ]
        )

        # Never confirm from a tiny sample
        recent_matches = signals.recent.matches if signals.recent else 0
        can_confirm = (
            recent_matches >= self.config.confidence.recent_min_for_confirmed
            or games >= t.ranked_games_min_for_confirmed
        )
        confirmed = (
            can_confirm
            and score >= t.confirmed_min
            and confidence >= t.confirmed_confidence_min
        )
        severity = self._severity(score, t.high_min, t.medium_min, confirmed)

        return self._create_insight(
            score,
            confidence,
            severity,
            acc.reasons,
            InsightSample(
                ranked_games=games,
                recent_matches=signals.recent.matches if signals.recent else None,
                champ_matches=signals.champ_recent.games if signals.champ_recent else None,
            ),
        )

    def _score_ranked(
        self,
        signals: PlayerSignals,
        games: int,
        winrate: Optional[float],
        acc: ScoreAccumulator,
    ) -> None:
        t = self.config.smurf
        if games >= t.ranked_games_min and winrate is not None:
            if winrate >= t.ranked_wr_base:
                acc.add(
                    t.ranked_wr_base_points,
                    f"Ranked WR {pct(winrate)}% over {games} games "
                    f"(>= {pct(t.ranked_wr_base)}%)",
                )
            if winrate >= t.ranked_wr_high:
                acc.add(
                    t.ranked_wr_high_points,
                    f"Very high ranked WR: {pct(winrate)}% (>= {pct(t.ranked_wr_high)}%)",
                )
            if winrate < t.low_wr_penalty_threshold:
                acc.add(
                    -t.low_wr_penalty_points,
                    f"Losing ranked record: {pct(winrate)}% WR",
                )

        if signals.ranked and signals.ranked.hot_streak:
            acc.add(t.hot_streak_points, "Active win streak")
        if signals.ranked and signals.ranked.fresh_blood:
            acc.add(t.fresh_blood_points, "Freshly ranked account")

    def _score_level(self, signals: PlayerSignals, acc: ScoreAccumulator) -> None:
        t = self.config.smurf
        level = signals.summoner_level
        if level is None:
            return
        if level <= t.level_very_low:
            acc.add(
                t.level_low_points + t.level_very_low_points,
                f"Level {level} (<= {t.level_very_low}), very new account",
            )
        elif level <= t.level_low:
            acc.add(t.level_low_points, f"Level {level} (<= {t.level_low}), new account")

    def _score_recent(self, signals: PlayerSignals, acc: ScoreAccumulator) -> None:
        t = self.config.smurf
        recent = signals.recent
        if recent is None or recent.matches < t.recent_matches_min:
            return

        if recent.winrate >= t.recent_wr_high:
            acc.add(
                t.recent_wr_high_points,
                f"Recent WR {pct(recent.winrate)}% over {recent.matches} games",
            )
        if recent.avg.kda is not None and recent.avg.kda >= t.recent_kda_high:
            acc.add(
                t.recent_kda_points,
                f"Average KDA {recent.avg.kda:.1f} (>= {t.recent_kda_high})",
            )

        # At most one role bonus
        role = current_role(signals)
        cs = recent.avg.cs_per_min
        vision = recent.avg.vision_per_min
        if role.is_lane and cs is not None and cs >= t.cs_per_min_lane:
            acc.add(t.role_points, f"CS/min {cs:.1f} is high for {role.value}")
        elif role == PlayerRole.JUNGLE and cs is not None and cs >= t.cs_per_min_jungle:
            acc.add(t.role_points, f"CS/min {cs:.1f} is high for JUNGLE")
        elif (
            role == PlayerRole.UTILITY
            and vision is not None
            and vision >= t.vision_per_min_support
        ):
            acc.add(t.role_points, f"Vision/min {vision:.1f} is high for support")

    def _score_champion(self, signals: PlayerSignals, acc: ScoreAccumulator) -> None:
        t = self.config.smurf
        champ = signals.champ_recent
        if (
            champ is not None
            and champ.games >= t.champ_games_min
            and champ.winrate >= t.champ_wr_high
        ):
            acc.add(
                t.champ_dominance_points,
                f"{pct(champ.winrate)}% WR on current champion over {champ.games} games",
            )

        recent = signals.recent
        if recent is not None and recent.champ_pool:
            top = recent.champ_pool[0]
            share = safe_div(top.games, recent.matches)
            if share >= t.champ_pool_top_share_high and top.winrate >= t.champ_pool_top_wr_high:
                acc.add(
                    t.champ_pool_points,
                    f"Pool: {pct(share)}% of games on one champion at {pct(top.winrate)}% WR",
                )

"""
ELO_QUEMADO (burned rank) analyzer.

A high-volume ranked player stuck below 50% winrate. Below the ranked-game
floor the analyzer returns "none" outright, whatever the winrate.
"""

from typing import Optional

from .base_analyzer import (
    BaseInsightAnalyzer,
    ScoreAccumulator,
    clamp,
    pct,
    ranked_games,
    ranked_winrate,
)
from ..schemas import (
    Insight,
    InsightKind,
    InsightSample,
    InsightSeverity,
    PlayerSignals,
)


class EloQuemadoAnalyzer(BaseInsightAnalyzer):
    """Analyzes ranked volume against a sub-50% winrate."""

    kind = InsightKind.ELO_QUEMADO
    fallback_reason = "No burned-MMR signals"

    def analyze(self, signals: PlayerSignals) -> Insight:
        t = self.config.elo_quemado
        games = ranked_games(signals)
        winrate = ranked_winrate(signals)

        if games < t.ranked_games_min_for_label:
            reason = (
                "No ranked games"
                if games == 0
                else f"Only {games} ranked games (min {t.ranked_games_min_for_label})"
            )
            return self._create_insight(
                0,
                self._ranked_confidence(signals),
                InsightSeverity.NONE,
                [reason],
                InsightSample(ranked_games=games),
            )

        acc = ScoreAccumulator()
        self._score_ranked(games, winrate, acc)
        self._score_recent(signals, acc)

        score = clamp(acc.score, 0, 100)
        confidence = self._weighted_confidence(
            [
                (self._ranked_confidence(signals), 4),
                (self._recent_confidence(signals), 1),
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
        t = self.config.elo_quemado
        if games >= t.ranked_games_base:
            acc.add(
                t.ranked_games_base_points,
                f"{games} ranked games played (>= {t.ranked_games_base})",
            )
        if games >= t.ranked_games_high:
            acc.add(
                t.ranked_games_high_points,
                f"Very high volume: {games} games (>= {t.ranked_games_high})",
            )
        if winrate is not None and games >= t.ranked_wr_low_games_min:
            if winrate <= t.ranked_wr_low:
                acc.add(
                    t.ranked_wr_low_points,
                    f"Ranked WR {pct(winrate)}% over {games} games "
                    f"(<= {pct(t.ranked_wr_low)}%)",
                )
            if winrate <= t.ranked_wr_very_low:
                acc.add(
                    t.ranked_wr_very_low_points, f"Very low ranked WR: {pct(winrate)}%"
                )

    def _score_recent(self, signals: PlayerSignals, acc: ScoreAccumulator) -> None:
        t = self.config.elo_quemado
        recent = signals.recent
        if recent is None or recent.matches < t.recent_matches_min:
            return
        if recent.winrate <= t.recent_wr_low:
            acc.add(
                t.recent_wr_low_points,
                f"Recent WR {pct(recent.winrate)}% over {recent.matches} games",
            )
        if recent.streak.type == "L" and recent.streak.count >= t.streak_loss_min:
            acc.add(
                t.streak_loss_points, f"{recent.streak.count} losses in a row"
            )

"""
Signal builder: converts Riot API data into ``PlayerSignals``.

Cheap signals come from Summoner, League and Mastery data the caller
already fetched. Deep signals aggregate recent Match-V5 history; they are
feature-gated and degrade to "no deep signals" on any failure.
"""

import asyncio
import time
from collections import Counter
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

import structlog

from lobbyscout.core.cache import CacheStore, CacheTTL
from lobbyscout.core.config import Settings, get_global_settings
from lobbyscout.core.enums import PlayerRole, RankedQueue
from lobbyscout.core.riot_api.constants import normalize_platform
from lobbyscout.core.riot_api.data_manager import RiotDataManager
from lobbyscout.core.riot_api.models import (
    ChampionMasteryDTO,
    LeagueEntryDTO,
    MatchParticipantDTO,
)
from .config import InsightConfig, get_insight_config
from .schemas import (
    AverageStats,
    ChampPoolEntry,
    ChampRecentSignals,
    DeepSignals,
    MasteryEntry,
    MasterySignals,
    PlayerSignals,
    RankedSignals,
    RecentSignals,
    RolePoolEntry,
    StreakSignals,
)

logger = structlog.get_logger(__name__)

INSIGHT_SIGNALS_NAMESPACE = "insight_signals"
TOP_MASTERIES = 5
# KDA reported for deathless players with at least one takedown
PERFECT_KDA = 99.0


class PlayedMatch(NamedTuple):
    """The target player's participant entry plus the match duration."""

    participant: MatchParticipantDTO
    game_duration: int


# ===================
# Cheap signals
# ===================


def build_cheap_signals(
    summoner_level: Optional[int],
    entries: Sequence[LeagueEntryDTO],
    masteries: Optional[Sequence[ChampionMasteryDTO]],
    current_champion_id: Optional[int] = None,
) -> PlayerSignals:
    """
    Build the cheap signal tier from already-fetched profile data.

    :param summoner_level: Account level, if known
    :param entries: League entries; solo queue preferred, flex as fallback
    :param masteries: Champion masteries, or None when not fetched
    :param current_champion_id: Champion being played right now
    :returns: PlayerSignals without deep fields
    """
    by_queue = {entry.queue_type: entry for entry in entries}
    entry = by_queue.get(RankedQueue.SOLO.value) or by_queue.get(RankedQueue.FLEX.value)

    ranked = None
    if entry is not None:
        ranked = RankedSignals(
            queue=RankedQueue(entry.queue_type),
            tier=entry.tier,
            rank=entry.rank,
            lp=entry.league_points,
            wins=entry.wins,
            losses=entry.losses,
            hot_streak=entry.hot_streak,
            fresh_blood=entry.fresh_blood,
            veteran=entry.veteran,
            inactive=entry.inactive,
        )

    mastery = None
    if masteries is not None:
        ordered = sorted(masteries, key=lambda m: m.champion_points, reverse=True)
        current = None
        if current_champion_id:
            match = next(
                (m for m in ordered if m.champion_id == current_champion_id), None
            )
            if match is not None:
                current = MasteryEntry(
                    points=match.champion_points, level=match.champion_level
                )
        mastery = MasterySignals(
            top=tuple(
                MasteryEntry(
                    champion_id=m.champion_id,
                    points=m.champion_points,
                    level=m.champion_level,
                )
                for m in ordered[:TOP_MASTERIES]
            ),
            current_champion=current,
        )

    return PlayerSignals(
        summoner_level=summoner_level,
        ranked=ranked,
        mastery=mastery,
        current_champion_id=current_champion_id,
    )


def merge_signals(
    cheap: PlayerSignals,
    deep: DeepSignals,
    current_role: Optional[PlayerRole] = None,
) -> PlayerSignals:
    """Attach the deep tier to cheap signals; the role defaults to UNKNOWN."""
    return cheap.model_copy(
        update={
            "current_role": current_role or PlayerRole.UNKNOWN,
            "recent": deep.recent,
            "champ_recent": deep.champ_recent,
        }
    )


# ===================
# Deep signal aggregation (pure)
# ===================


def compute_kda(kills: int, deaths: int, assists: int) -> Optional[float]:
    """(kills + assists) / deaths; PERFECT_KDA when deathless, None with no takedowns."""
    if deaths > 0:
        return (kills + assists) / deaths
    return PERFECT_KDA if kills + assists > 0 else None


def compute_streak(matches: Sequence[PlayedMatch]) -> StreakSignals:
    """Current streak counted from the newest match until the result flips."""
    if not matches:
        return StreakSignals(type="W", count=0)
    newest_win = matches[0].participant.win
    count = 0
    for played in matches:
        if played.participant.win != newest_win:
            break
        count += 1
    return StreakSignals(type="W" if newest_win else "L", count=count)


def build_pools(
    matches: Sequence[PlayedMatch],
) -> Tuple[List[ChampPoolEntry], List[RolePoolEntry], Dict[int, Tuple[int, int]]]:
    """
    Per-champion and per-role distributions, most played first.

    :returns: ``(champ_pool, role_pool, champ_map)`` where ``champ_map`` maps
        champion id to ``(games, wins)``
    """
    champ_map: Dict[int, Tuple[int, int]] = {}
    roles: Counter = Counter()

    for played in matches:
        p = played.participant
        games, wins = champ_map.get(p.champion_id, (0, 0))
        champ_map[p.champion_id] = (games + 1, wins + (1 if p.win else 0))
        roles[PlayerRole.from_position(p.team_position)] += 1

    # sorted() is stable, so ties keep first-seen order
    champ_pool = sorted(
        (
            ChampPoolEntry(champion_id=cid, games=games, winrate=wins / games)
            for cid, (games, wins) in champ_map.items()
        ),
        key=lambda e: e.games,
        reverse=True,
    )
    role_pool = sorted(
        (RolePoolEntry(role=role, games=games) for role, games in roles.items()),
        key=lambda e: e.games,
        reverse=True,
    )
    return champ_pool, role_pool, champ_map


def aggregate_averages(matches: Sequence[PlayedMatch]) -> AverageStats:
    """Per-match deaths and per-minute stats normalized by time actually played."""
    if not matches:
        return AverageStats()

    kills = deaths = assists = 0
    cs = gold = damage = 0
    vision = 0.0
    minutes = 0.0
    for played in matches:
        p = played.participant
        kills += p.kills
        deaths += p.deaths
        assists += p.assists
        cs += p.creep_score
        gold += p.gold_earned
        damage += p.total_damage_dealt_to_champions
        vision += p.vision_score
        seconds = p.time_played if p.time_played is not None else played.game_duration
        minutes += max(1.0, seconds / 60)

    minutes = max(1.0, minutes)
    return AverageStats(
        kda=compute_kda(kills, deaths, assists),
        deaths=deaths / len(matches),
        cs_per_min=cs / minutes,
        gold_per_min=gold / minutes,
        damage_per_min=damage / minutes,
        vision_per_min=vision / minutes,
    )


def resolve_champ_recent(
    current_champion_id: Optional[int], champ_map: Dict[int, Tuple[int, int]]
) -> Optional[ChampRecentSignals]:
    """Recent record on the current champion, if it appears in the window."""
    if current_champion_id is None:
        return None
    games, wins = champ_map.get(current_champion_id, (0, 0))
    if games == 0:
        return None
    return ChampRecentSignals(
        champion_id=current_champion_id,
        games=games,
        wins=wins,
        losses=games - wins,
        winrate=wins / games,
    )


def aggregate_recent(
    matches: Sequence[PlayedMatch],
    window: int,
    current_champion_id: Optional[int] = None,
) -> DeepSignals:
    """
    Aggregate played matches (newest first) into deep signals.

    :param matches: Target player's matches, newest first
    :param window: Configured maximum window size
    :param current_champion_id: Champion to resolve ``champ_recent`` for
    :returns: DeepSignals; empty when there are no matches
    """
    if not matches:
        return DeepSignals()

    wins = sum(1 for m in matches if m.participant.win)
    champ_pool, role_pool, champ_map = build_pools(matches)
    recent = RecentSignals(
        window=window,
        matches=len(matches),
        wins=wins,
        losses=len(matches) - wins,
        winrate=wins / len(matches),
        streak=compute_streak(matches),
        champ_pool=tuple(champ_pool),
        role_pool=tuple(role_pool),
        avg=aggregate_averages(matches),
    )
    return DeepSignals(
        recent=recent,
        champ_recent=resolve_champ_recent(current_champion_id, champ_map),
    )


# ===================
# Signal builder (IO)
# ===================


class SignalBuilder:
    """Builds PlayerSignals, fetching match history for the deep tier."""

    def __init__(
        self,
        data_manager: RiotDataManager,
        cache: CacheStore,
        settings: Optional[Settings] = None,
        config: Optional[InsightConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize signal builder.

        :param data_manager: Cached Riot API access
        :param cache: Cache store holding aggregated signals
        :param settings: Application settings (global settings if None)
        :param config: Insight configuration (process-wide config if None)
        :param clock: Wall clock in epoch seconds, for the match window
        """
        self.data_manager = data_manager
        self.cache = cache
        self.settings = settings or get_global_settings()
        self.config = config or get_insight_config()
        self._clock = clock

    def _window_start(self) -> int:
        """Window start rounded down to a bucket so repeated builds share cache keys."""
        mf = self.config.match_filter
        start = self._clock() - mf.window_days * 24 * 60 * 60
        return int(start // mf.start_bucket_seconds) * mf.start_bucket_seconds

    async def _fetch_played_matches(
        self, puuid: str, match_ids: Sequence[str], platform: str
    ) -> List[PlayedMatch]:
        """Fetch details in sequential batches; failed or filtered matches are skipped."""
        mf = self.config.match_filter
        played: List[PlayedMatch] = []

        for i in range(0, len(match_ids), mf.batch_size):
            batch = match_ids[i : i + mf.batch_size]
            results = await asyncio.gather(
                *(self.data_manager.get_match(mid, platform) for mid in batch),
                return_exceptions=True,
            )
            for match_id, result in zip(batch, results):
                if isinstance(result, BaseException):
                    logger.debug(
                        "Skipping match that failed to load",
                        match_id=match_id,
                        error=str(result) or type(result).__name__,
                    )
                    continue
                info = result.info
                if info is None or info.game_duration < mf.min_duration_seconds:
                    continue
                participant = info.participant(puuid)
                if participant is not None:
                    played.append(PlayedMatch(participant, info.game_duration))

        return played

    async def build_deep_signals(
        self,
        puuid: str,
        current_champion_id: Optional[int] = None,
        platform: Optional[str] = None,
    ) -> DeepSignals:
        """
        Aggregate recent ranked history into deep signals.

        Never raises: a disabled feature, an empty history or any failure
        yields empty DeepSignals.

        :param puuid: Player PUUID
        :param current_champion_id: Champion being played right now
        :param platform: Platform code (default platform if None)
        :returns: DeepSignals
        """
        if not self.settings.feature_match_history:
            return DeepSignals()

        platform = normalize_platform(platform or self.settings.default_platform)
        cache_key = f"{puuid}:{current_champion_id}:{platform}"
        hit = self.cache.get(INSIGHT_SIGNALS_NAMESPACE, cache_key)
        if hit is not None:
            return hit

        mf = self.config.match_filter
        try:
            match_ids = await self.data_manager.get_match_ids(
                puuid,
                type="ranked",
                start_time=self._window_start(),
                count=mf.match_id_count,
                platform=platform,
            )
            if not match_ids:
                return DeepSignals()

            played = await self._fetch_played_matches(
                puuid, match_ids[: mf.max_match_details], platform
            )
            if not played:
                return DeepSignals()

            result = aggregate_recent(played, mf.max_match_details, current_champion_id)
        except Exception as e:
            logger.warning(
                "Failed to build deep signals",
                puuid=puuid,
                platform=platform,
                error=str(e) or type(e).__name__,
                error_type=type(e).__name__,
            )
            return DeepSignals()

        self.cache.set(
            INSIGHT_SIGNALS_NAMESPACE, cache_key, result, CacheTTL.INSIGHT_SIGNALS
        )
        return result

    async def build_player_signals(
        self,
        puuid: str,
        summoner_level: Optional[int],
        entries: Sequence[LeagueEntryDTO],
        masteries: Optional[Sequence[ChampionMasteryDTO]],
        current_champion_id: Optional[int] = None,
        current_role: Optional[PlayerRole] = None,
        platform: Optional[str] = None,
    ) -> PlayerSignals:
        """Merge cheap and deep signal tiers; the role defaults to UNKNOWN."""
        cheap = build_cheap_signals(
            summoner_level, entries, masteries, current_champion_id
        )
        deep = await self.build_deep_signals(puuid, current_champion_id, platform)
        return merge_signals(cheap, deep, current_role)

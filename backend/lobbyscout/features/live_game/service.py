"""
Live game service.

Looks up a player's active game through Spectator-V5 and normalizes it
into blue/red teams. Expected upstream conditions (not in game, bad key,
rate limit, degraded spectator) become an unavailable result with a
reason instead of an error.
"""

from typing import Optional

import structlog

from lobbyscout.core.config import Settings, get_global_settings
from lobbyscout.core.riot_api.data_manager import RiotDataManager
from lobbyscout.core.riot_api.errors import RiotAPIError, RiotErrorCode
from lobbyscout.core.riot_api.models import SpectatorGameDTO
from .schemas import (
    LiveGameResult,
    LiveGameUnavailableReason,
    LiveParticipant,
    LiveTeams,
)

logger = structlog.get_logger(__name__)

BLUE_TEAM_ID = 100


def normalize_live_game(game: SpectatorGameDTO) -> LiveGameResult:
    """Split participants into blue (team 100) and red teams."""
    teams = LiveTeams()
    for p in game.participants:
        perks = p.perks
        participant = LiveParticipant(
            puuid=p.puuid,
            riot_id=p.riot_id,
            champion_id=p.champion_id,
            spell1_id=p.spell1_id,
            spell2_id=p.spell2_id,
            team_id=p.team_id,
            perk_keystone=perks.perk_ids[0] if perks and perks.perk_ids else None,
            perk_primary_style=perks.perk_style if perks else None,
            perk_sub_style=perks.perk_sub_style if perks else None,
        )
        if p.team_id == BLUE_TEAM_ID:
            teams.blue.append(participant)
        else:
            teams.red.append(participant)

    return LiveGameResult(
        available=True,
        game_id=game.game_id,
        game_mode=game.game_mode,
        game_start_time=game.game_start_time,
        teams=teams,
    )


def unavailable_reason(error: RiotAPIError) -> LiveGameUnavailableReason:
    """Map a Spectator-V5 failure onto a caller-facing reason."""
    if error.status_code == 404 or error.code == RiotErrorCode.NOT_FOUND:
        return LiveGameUnavailableReason.NOT_IN_GAME
    if error.code in (RiotErrorCode.KEY_INVALID, RiotErrorCode.UNAUTHORIZED):
        return LiveGameUnavailableReason.KEY_INVALID
    if error.code == RiotErrorCode.RATE_LIMITED:
        return LiveGameUnavailableReason.RATE_LIMITED
    return LiveGameUnavailableReason.SPECTATOR_UNAVAILABLE


class LiveGameService:
    """Service for live game lookups."""

    def __init__(self, data_manager: RiotDataManager, settings: Optional[Settings] = None):
        self.data_manager = data_manager
        self.settings = settings or get_global_settings()

    async def get_live_game(
        self, puuid: str, platform: Optional[str] = None
    ) -> LiveGameResult:
        """
        Get a player's live game.

        :param puuid: Player PUUID
        :param platform: Platform code (default platform if None)
        :returns: LiveGameResult; ``available`` is False with a reason when
            there is no game to show
        """
        if not self.settings.feature_spectator:
            return LiveGameResult(
                available=False, reason=LiveGameUnavailableReason.SPECTATOR_DISABLED
            )

        try:
            game = await self.data_manager.get_active_game(puuid, platform)
        except RiotAPIError as e:
            reason = unavailable_reason(e)
            if reason != LiveGameUnavailableReason.NOT_IN_GAME:
                logger.warning(
                    "Live game lookup failed",
                    puuid=puuid,
                    code=e.code.value,
                    status=e.status_code,
                    reason=reason.value,
                )
            return LiveGameResult(available=False, reason=reason)

        return normalize_live_game(game)

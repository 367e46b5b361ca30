"""Live game schemas."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LiveGameSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class LiveGameUnavailableReason(str, Enum):
    """Why no live game snapshot is available."""

    SPECTATOR_DISABLED = "SPECTATOR_DISABLED"
    NOT_IN_GAME = "NOT_IN_GAME"
    KEY_INVALID = "KEY_INVALID"
    RATE_LIMITED = "RATE_LIMITED"
    SPECTATOR_UNAVAILABLE = "SPECTATOR_UNAVAILABLE"


class LiveParticipant(LiveGameSchema):
    """Normalized live-game participant."""

    puuid: Optional[str] = None
    riot_id: Optional[str] = None
    champion_id: int
    spell1_id: int = 0
    spell2_id: int = 0
    team_id: int
    perk_keystone: Optional[int] = None
    perk_primary_style: Optional[int] = None
    perk_sub_style: Optional[int] = None


class LiveTeams(LiveGameSchema):
    blue: List[LiveParticipant] = Field(default_factory=list)
    red: List[LiveParticipant] = Field(default_factory=list)


class LiveGameResult(LiveGameSchema):
    """Live game snapshot, or the reason there is none."""

    available: bool
    reason: Optional[LiveGameUnavailableReason] = None
    game_id: Optional[int] = None
    game_mode: Optional[str] = None
    game_start_time: Optional[int] = None
    teams: Optional[LiveTeams] = None

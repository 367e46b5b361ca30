"""Player summary and lobby card schemas."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lobbyscout.core.riot_api.models import ChampionMasteryDTO, LeagueEntryDTO
from lobbyscout.features.player_insights.champion_stats import ChampionRecentStats
from lobbyscout.features.player_insights.schemas import PlayerInsights


class PlayerSummary(BaseModel):
    """Profile, ranked entries and top masteries of one player."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    puuid: str
    riot_id: str = ""
    profile_icon_id: int
    summoner_level: int
    solo_queue: Optional[LeagueEntryDTO] = None
    flex_queue: Optional[LeagueEntryDTO] = None
    top_masteries: List[ChampionMasteryDTO] = Field(default_factory=list)


class PlayerCard(BaseModel):
    """Player summary plus scored insights."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    summary: PlayerSummary
    insights: PlayerInsights


class CardRequest(BaseModel):
    """One lobby participant to build a card for."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    puuid: str = Field(..., min_length=1)
    champion_id: int
    team_id: Literal[100, 200]


class LobbyCard(BaseModel):
    """Card-ready data for one lobby participant.

    ``degraded`` marks a card whose profile could not be fetched; such a
    card carries only the request fields and empty champion stats.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    puuid: str
    team_id: int
    current_champion_id: int
    riot_id: str = ""
    summoner_level: int = 0
    profile_icon_id: int = 0
    ranked: Optional[LeagueEntryDTO] = None
    champ_stats: ChampionRecentStats
    mastery: Optional[ChampionMasteryDTO] = None
    insights: Optional[PlayerInsights] = None
    degraded: bool = False


class LobbyCards(BaseModel):
    """Cards for a whole lobby, in request order."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    players: List[LobbyCard]
    warning: Optional[str] = None

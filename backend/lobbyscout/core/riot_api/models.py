"""Pydantic models for Riot API response data.

Only the fields this service reads are declared; unknown fields are ignored.
"""

from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class RiotModel(BaseModel):
    """Base model accepting both camelCase aliases and snake_case names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class AccountDTO(RiotModel):
    """Riot Account information (Account-V1)."""

    puuid: str
    # Riot omits both for some accounts
    game_name: Optional[str] = Field(None, alias="gameName")
    tag_line: Optional[str] = Field(None, alias="tagLine")

    @property
    def riot_id(self) -> Optional[str]:
        """Riot ID in ``gameName#tagLine`` form, or None without a game name."""
        if not self.game_name:
            return None
        if not self.tag_line:
            return self.game_name
        return f"{self.game_name}#{self.tag_line}"


class SummonerDTO(RiotModel):
    """League of Legends Summoner information (Summoner-V4)."""

    id: Optional[str] = None
    puuid: str
    name: Optional[str] = None
    profile_icon_id: int = Field(..., alias="profileIconId")
    summoner_level: int = Field(..., alias="summonerLevel")


class LeagueEntryDTO(RiotModel):
    """League entry information (League-V4)."""

    queue_type: str = Field(..., alias="queueType")
    tier: str
    rank: str
    league_points: int = Field(..., alias="leaguePoints")
    wins: int
    losses: int
    hot_streak: bool = Field(False, alias="hotStreak")
    veteran: bool = False
    fresh_blood: bool = Field(False, alias="freshBlood")
    inactive: bool = False

    @property
    def games(self) -> int:
        """Total ranked games in this queue."""
        return self.wins + self.losses


class ChampionMasteryDTO(RiotModel):
    """Champion mastery entry (Champion-Mastery-V4)."""

    champion_id: int = Field(..., alias="championId")
    champion_level: int = Field(..., alias="championLevel")
    champion_points: int = Field(..., alias="championPoints")


class SpectatorPerksDTO(RiotModel):
    """Rune selection of a live-game participant."""

    perk_ids: List[int] = Field(default_factory=list, alias="perkIds")
    perk_style: Optional[int] = Field(None, alias="perkStyle")
    perk_sub_style: Optional[int] = Field(None, alias="perkSubStyle")


class SpectatorParticipantDTO(RiotModel):
    """Participant of a live game (Spectator-V5)."""

    puuid: Optional[str] = None
    team_id: int = Field(..., alias="teamId")
    champion_id: int = Field(..., alias="championId")
    spell1_id: int = Field(0, alias="spell1Id")
    spell2_id: int = Field(0, alias="spell2Id")
    profile_icon_id: Optional[int] = Field(None, alias="profileIconId")
    riot_id: Optional[str] = Field(None, alias="riotId")
    perks: Optional[SpectatorPerksDTO] = None


class SpectatorGameDTO(RiotModel):
    """Live game snapshot (Spectator-V5)."""

    game_id: int = Field(..., alias="gameId")
    game_type: Optional[str] = Field(None, alias="gameType")
    game_mode: str = Field(..., alias="gameMode")
    game_start_time: int = Field(0, alias="gameStartTime")
    game_length: int = Field(0, alias="gameLength")
    map_id: Optional[int] = Field(None, alias="mapId")
    platform_id: Optional[str] = Field(None, alias="platformId")
    participants: List[SpectatorParticipantDTO]


class MatchParticipantDTO(RiotModel):
    """Per-player statistics of a finished match (Match-V5)."""

    puuid: str
    champion_id: int = Field(..., alias="championId")
    team_position: Optional[str] = Field(None, alias="teamPosition")
    win: bool
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    total_minions_killed: int = Field(0, alias="totalMinionsKilled")
    neutral_minions_killed: int = Field(0, alias="neutralMinionsKilled")
    gold_earned: int = Field(0, alias="goldEarned")
    total_damage_dealt_to_champions: int = Field(
        0, alias="totalDamageDealtToChampions"
    )
    vision_score: float = Field(0.0, alias="visionScore")
    time_played: Optional[int] = Field(None, alias="timePlayed")

    @property
    def creep_score(self) -> int:
        """Lane minions plus neutral monsters."""
        return self.total_minions_killed + self.neutral_minions_killed


class MatchInfoDTO(RiotModel):
    """Match information."""

    game_duration: int = Field(..., alias="gameDuration")
    queue_id: Optional[int] = Field(None, alias="queueId")
    participants: List[MatchParticipantDTO]

    def participant(self, puuid: str) -> Optional[MatchParticipantDTO]:
        """Find the participant entry for a player, if they played this match."""
        return next((p for p in self.participants if p.puuid == puuid), None)


class MatchMetadataDTO(RiotModel):
    """Match metadata."""

    match_id: str = Field(..., alias="matchId")


class MatchDTO(RiotModel):
    """Complete match data."""

    metadata: Optional[MatchMetadataDTO] = None
    info: Optional[MatchInfoDTO] = None

"""Players feature module: summaries, insight cards and lobby cards."""

from .schemas import CardRequest, LobbyCard, LobbyCards, PlayerCard, PlayerSummary
from .service import PlayerSummaryService

__all__ = [
    "CardRequest",
    "LobbyCard",
    "LobbyCards",
    "PlayerCard",
    "PlayerSummary",
    "PlayerSummaryService",
]

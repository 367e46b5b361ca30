"""Live game feature module."""

from .schemas import LiveGameResult, LiveGameUnavailableReason, LiveParticipant
from .service import LiveGameService, normalize_live_game

__all__ = [
    "LiveGameResult",
    "LiveGameUnavailableReason",
    "LiveParticipant",
    "LiveGameService",
    "normalize_live_game",
]

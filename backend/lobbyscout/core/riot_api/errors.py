"""Typed error taxonomy for the Riot API client."""

from enum import Enum
from typing import Optional


class RiotErrorCode(str, Enum):
    """Stable error codes surfaced to callers."""

    NOT_FOUND = "NOT_FOUND"
    NOT_IN_GAME = "NOT_IN_GAME"
    KEY_INVALID = "KEY_INVALID"
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"
    SPECTATOR_UNAVAILABLE = "SPECTATOR_UNAVAILABLE"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN = "UNKNOWN"


class RiotAPIError(Exception):
    """Base exception for Riot API errors with status code tracking."""

    default_code: RiotErrorCode = RiotErrorCode.UNKNOWN

    def __init__(
        self,
        detail: str,
        status_code: int = 0,
        endpoint: str = "",
        code: Optional[RiotErrorCode] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        """
        Initialize RiotAPIError.

        :param detail: Human-readable error detail
        :param status_code: HTTP status code, 0 when no response was received
        :param endpoint: URL of the failing call
        :param code: Error code; defaults to the class's code
        :param retry_after: Seconds the upstream asked us to wait (429 only)
        """
        self.code: RiotErrorCode = code or self.default_code
        self.detail: str = detail
        self.status_code: int = status_code
        self.endpoint: str = endpoint
        self.retry_after: Optional[float] = retry_after
        super().__init__(str(self))

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"[{self.code.value}] {self.detail} ({self.status_code} {self.endpoint})"


class NotFoundError(RiotAPIError):
    """Not found error (404) - resource doesn't exist upstream."""

    default_code = RiotErrorCode.NOT_FOUND


class AuthenticationError(RiotAPIError):
    """Missing, invalid or rejected API key (401/403)."""

    default_code = RiotErrorCode.KEY_INVALID


class RateLimitError(RiotAPIError):
    """Rate limit error (429) after all retries were spent."""

    default_code = RiotErrorCode.RATE_LIMITED


class NetworkError(RiotAPIError):
    """Transport failure or timeout after all retries were spent."""

    default_code = RiotErrorCode.NETWORK_ERROR

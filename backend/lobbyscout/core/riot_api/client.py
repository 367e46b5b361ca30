"""Riot API HTTP client with lane scheduling, retries and a typed error taxonomy."""

import asyncio
import json
import random
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Optional
import httpx
import structlog
from pydantic import BaseModel

from lobbyscout.core.config import Settings, get_global_settings
from .scheduler import Lane, RequestScheduler
from .errors import (
    RiotAPIError,
    RiotErrorCode,
    RateLimitError,
    AuthenticationError,
    NotFoundError,
    NetworkError,
)
from .endpoints import RiotAPIEndpoints

logger = structlog.get_logger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 5
AUTH_RETRY_BASE_SECONDS = 1.0
NETWORK_BACKOFF_BASE_SECONDS = 1.0
KEY_CHECK_TIMEOUT_MS = 8_000
PLACEHOLDER_KEY_PREFIX = "RGAPI-xxxx"


class KeyStatus(str, Enum):
    """Outcome of checking the configured API key."""

    MISSING = "missing"
    ACTIVE = "active"
    EXPIRED = "expired"
    RATE_LIMITED = "rate-limited"
    ERROR = "error"


class KeyStatusReport(BaseModel):
    """API key check result."""

    status: KeyStatus
    message: str


class RiotAPIClient:
    """Riot API client issuing every attempt through the lane scheduler."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        scheduler: Optional[RequestScheduler] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rand: Callable[[], float] = random.random,
    ):
        """
        Initialize Riot API client.

        :param api_key: Riot API key (uses settings if None)
        :param scheduler: Shared lane scheduler (built from settings if None)
        :param settings: Application settings (global settings if None)
        :param transport: Optional httpx transport, used by tests
        :param sleep: Coroutine used for backoff sleeps
        :param rand: Source of uniform [0, 1) values for jitter
        """
        settings = settings or get_global_settings()
        self.api_key = settings.riot_api_key if api_key is None else api_key
        self.scheduler = scheduler or RequestScheduler.from_settings(settings)
        self.endpoints = RiotAPIEndpoints(settings.default_platform)
        self.timeout_ms = settings.riot_request_timeout_ms
        self.max_retries = settings.riot_max_retries

        self._transport = transport
        self._sleep = sleep
        self._rand = rand

        # HTTP session
        self.session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self) -> "RiotAPIClient":
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def start_session(self) -> None:
        """Start the httpx session."""
        if self.session is None or self.session.is_closed:
            async with self._session_lock:
                if self.session is None or self.session.is_closed:
                    headers = {
                        "X-Riot-Token": self.api_key,
                        "User-Agent": "lobby-scout/1.0",
                    }
                    limits = httpx.Limits(
                        max_keepalive_connections=20,
                        max_connections=self.scheduler.global_max_concurrent,
                    )
                    self.session = httpx.AsyncClient(
                        headers=headers,
                        limits=limits,
                        transport=self._transport,
                    )
                    logger.info(
                        "Riot API client session started",
                        api_key_prefix="[REDACTED]" if self.api_key else "None",
                    )

    async def close(self) -> None:
        """Close the httpx session."""
        if self.session and not self.session.is_closed:
            await self.session.aclose()
            logger.info("Riot API client session closed")

    def _jitter(self, base_seconds: float) -> float:
        """Spread a delay uniformly over ``[base, 1.5 * base)``."""
        return base_seconds * (1 + 0.5 * self._rand())

    @staticmethod
    def _parse_retry_after(headers: httpx.Headers) -> int:
        """Read Retry-After seconds, defaulting when absent or malformed."""
        try:
            return int(headers.get("Retry-After", DEFAULT_RETRY_AFTER_SECONDS))
        except (TypeError, ValueError):
            return DEFAULT_RETRY_AFTER_SECONDS

    def _retry_delay_for_status(
        self,
        response: httpx.Response,
        url: str,
        can_retry: bool,
        can_retry_auth: bool,
    ) -> float:
        """
        Classify a non-2xx response.

        :param response: Upstream response
        :param url: Requested URL, for error context
        :param can_retry: Whether attempts remain
        :param can_retry_auth: Whether the single 401/403 retry is still available
        :returns: Seconds to sleep before the next attempt
        :raises RiotAPIError: When the status is final or retries are exhausted
        """
        status = response.status_code

        if status == 429:
            retry_after = self._parse_retry_after(response.headers)
            if can_retry:
                return self._jitter(retry_after)
            raise RateLimitError(
                f"Rate limited, retry after {retry_after}s",
                status_code=status,
                endpoint=url,
                retry_after=retry_after,
            )

        if status == 404:
            raise NotFoundError("Resource not found", status_code=status, endpoint=url)

        if status in (401, 403):
            # Riot occasionally answers a valid key with a spurious 401/403
            if can_retry_auth:
                return self._jitter(AUTH_RETRY_BASE_SECONDS)
            raise AuthenticationError(
                "API key invalid or unauthorized", status_code=status, endpoint=url
            )

        raise RiotAPIError(
            f"Unexpected status {status}",
            status_code=status,
            endpoint=url,
            code=RiotErrorCode.UNKNOWN,
        )

    async def _send(
        self, url: str, params: Optional[Dict[str, Any]], timeout_s: float
    ) -> httpx.Response:
        """Issue one GET; the timeout cancels the in-flight request."""
        if self.session is None:
            raise RiotAPIError("Session not initialized", endpoint=url)
        return await asyncio.wait_for(
            self.session.get(url, params=params, timeout=timeout_s),
            timeout=timeout_s,
        )

    async def fetch(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        max_retries: Optional[int] = None,
        timeout_ms: Optional[int] = None,
        lane: Lane = Lane.INTERACTIVE,
    ) -> Any:
        """
        Fetch a Riot API resource and return its decoded JSON payload.

        Every attempt, retries included, takes one scheduler slot on ``lane``.

        :param url: Absolute resource URL
        :param params: Query parameters
        :param max_retries: Retry budget (settings default if None)
        :param timeout_ms: Per-attempt timeout (settings default if None)
        :param lane: Scheduler lane to run on
        :returns: Decoded JSON payload
        :raises RiotAPIError: Typed failure; see ``RiotErrorCode``
        """
        if not self.api_key:
            raise AuthenticationError(
                "RIOT_API_KEY is not configured", status_code=401, endpoint=url
            )

        retries = self.max_retries if max_retries is None else max_retries
        timeout_s = (self.timeout_ms if timeout_ms is None else timeout_ms) / 1000

        await self.start_session()

        last_error: Optional[BaseException] = None
        auth_retried = False

        for attempt in range(retries + 1):
            try:
                response = await self.scheduler.submit(
                    lane, partial(self._send, url, params, timeout_s)
                )
                logger.debug(
                    "Riot API response",
                    url=url,
                    status=response.status_code,
                    attempt=attempt,
                    lane=lane.value,
                )
                if response.is_success:
                    return response.json()
            except (
                httpx.RequestError,
                asyncio.TimeoutError,
                json.JSONDecodeError,
                UnicodeDecodeError,
            ) as e:
                last_error = e
                if attempt < retries:
                    delay = self._jitter(NETWORK_BACKOFF_BASE_SECONDS * 2**attempt)
                    logger.warning(
                        "Riot API transport failure, retrying",
                        url=url,
                        attempt=attempt,
                        delay=round(delay, 3),
                        error=str(e) or type(e).__name__,
                    )
                    await self._sleep(delay)
                continue

            can_retry = attempt < retries
            delay = self._retry_delay_for_status(
                response, url, can_retry, can_retry and not auth_retried
            )
            if response.status_code in (401, 403):
                auth_retried = True
            logger.warning(
                "Riot API retryable status, retrying",
                url=url,
                status=response.status_code,
                attempt=attempt,
                delay=round(delay, 3),
            )
            await self._sleep(delay)

        detail = (str(last_error) or type(last_error).__name__) if last_error else ""
        raise NetworkError(detail or "Network error", status_code=0, endpoint=url)

    async def check_key_status(self, platform: Optional[str] = None) -> KeyStatusReport:
        """
        Check the configured API key with one cheap platform-status call.

        :param platform: Platform to check (default platform if None)
        :returns: KeyStatusReport describing the key
        """
        if not self.api_key or self.api_key.startswith(PLACEHOLDER_KEY_PREFIX):
            return KeyStatusReport(
                status=KeyStatus.MISSING, message="API key not configured"
            )

        try:
            await self.fetch(
                self.endpoints.platform_status(platform),
                max_retries=0,
                timeout_ms=KEY_CHECK_TIMEOUT_MS,
            )
        except AuthenticationError:
            return KeyStatusReport(
                status=KeyStatus.EXPIRED, message="API key expired or invalid"
            )
        except RateLimitError:
            return KeyStatusReport(
                status=KeyStatus.RATE_LIMITED, message="API key active (rate limited)"
            )
        except NetworkError:
            return KeyStatusReport(
                status=KeyStatus.ERROR,
                message="Could not verify the API key (timeout/network)",
            )
        except RiotAPIError as e:
            return KeyStatusReport(
                status=KeyStatus.ERROR, message=f"API responded {e.status_code}"
            )

        return KeyStatusReport(status=KeyStatus.ACTIVE, message="API key active")

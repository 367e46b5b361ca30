"""Lane-based concurrency scheduler for outbound Riot API calls.

Two lanes share one global ceiling:

* ``interactive`` - single-player lookups a user is waiting on.
* ``bulk`` - match-history backfills that may run in the background.

Each lane caps its own concurrently running work and spaces consecutive
starts by ``min_spacing_ms``. The global ceiling is lower than the sum of
the lane caps, so lanes contend; when a slot frees up the interactive queue
is always served before the bulk queue. Work starts only when dispatched,
never at submission time.
"""

import asyncio
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Deque,
    Dict,
    Optional,
    Set,
    Tuple,
    TypeVar,
)
import structlog

if TYPE_CHECKING:
    from lobbyscout.core.config import Settings

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Lane(str, Enum):
    """Scheduling lanes, listed in dispatch priority order."""

    INTERACTIVE = "interactive"
    BULK = "bulk"


@dataclass(frozen=True)
class LaneConfig:
    """Concurrency cap and minimum start spacing for one lane."""

    max_concurrent: int
    min_spacing_ms: int = 0


_Job = Tuple[Callable[[], Awaitable[Any]], "asyncio.Future[Any]"]


@dataclass
class _LaneState:
    config: LaneConfig
    running: int = 0
    max_observed: int = 0
    last_dispatch: Optional[float] = None
    queue: Deque[_Job] = field(default_factory=deque)


class RequestScheduler:
    """Cooperative asyncio scheduler with per-lane and global concurrency caps."""

    def __init__(
        self,
        lanes: Dict[Lane, LaneConfig],
        global_max_concurrent: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the scheduler.

        :param lanes: Configuration for every lane; missing lanes cannot be used
        :param global_max_concurrent: Cap on running work across all lanes
        :param clock: Monotonic time source in seconds
        :param sleep: Coroutine used to wait out lane spacing
        :raises ValueError: If a cap is not positive
        """
        if global_max_concurrent < 1:
            raise ValueError("global_max_concurrent must be positive")
        for lane, config in lanes.items():
            if config.max_concurrent < 1:
                raise ValueError(f"Lane {lane.value} max_concurrent must be positive")

        self.global_max_concurrent = global_max_concurrent
        self._lanes: Dict[Lane, _LaneState] = {
            lane: _LaneState(config=lanes[lane]) for lane in Lane if lane in lanes
        }
        self._clock = clock
        self._sleep = sleep
        self._total_running = 0
        self._max_observed_total = 0
        self._tasks: Set["asyncio.Task[None]"] = set()

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RequestScheduler":
        """Build a scheduler from application settings."""
        return cls(
            lanes={
                Lane.INTERACTIVE: LaneConfig(
                    settings.interactive_max_concurrent,
                    settings.interactive_min_spacing_ms,
                ),
                Lane.BULK: LaneConfig(
                    settings.bulk_max_concurrent, settings.bulk_min_spacing_ms
                ),
            },
            global_max_concurrent=settings.global_max_concurrent,
        )

    async def submit(self, lane: Lane, work: Callable[[], Awaitable[T]]) -> T:
        """
        Queue work on a lane and wait for its result.

        :param lane: Lane to run the work on
        :param work: Zero-argument coroutine factory, invoked once when dispatched
        :returns: Whatever the work returns
        :raises Exception: Whatever the work raises
        """
        state = self._lane(lane)
        future: "asyncio.Future[T]" = asyncio.get_running_loop().create_future()
        state.queue.append((work, future))
        self._drain()
        return await future

    def running(self, lane: Lane) -> int:
        """Number of work items currently running on a lane."""
        return self._lane(lane).running

    def pending(self, lane: Lane) -> int:
        """Number of work items queued on a lane and not yet dispatched."""
        return len(self._lane(lane).queue)

    def max_observed(self, lane: Lane) -> int:
        """Highest number of simultaneously running items seen on a lane."""
        return self._lane(lane).max_observed

    @property
    def total_running(self) -> int:
        """Number of work items running across all lanes."""
        return self._total_running

    @property
    def max_observed_total(self) -> int:
        """Highest number of simultaneously running items seen across lanes."""
        return self._max_observed_total

    def _lane(self, lane: Lane) -> _LaneState:
        try:
            return self._lanes[lane]
        except KeyError:
            raise ValueError(f"Lane {lane.value} is not configured") from None

    def _next_ready(self) -> Optional[Tuple[Lane, _LaneState]]:
        """First lane, in priority order, with queued work and a free slot."""
        for lane, state in self._lanes.items():
            if state.queue and state.running < state.config.max_concurrent:
                return lane, state
        return None

    def _drain(self) -> None:
        while self._total_running < self.global_max_concurrent:
            ready = self._next_ready()
            if ready is None:
                return
            lane, state = ready
            work, future = state.queue.popleft()
            if future.done():
                # Submitter was cancelled while queued
                continue
            self._dispatch(lane, state, work, future)

    def _dispatch(
        self,
        lane: Lane,
        state: _LaneState,
        work: Callable[[], Awaitable[Any]],
        future: "asyncio.Future[Any]",
    ) -> None:
        now = self._clock()
        spacing = state.config.min_spacing_ms / 1000
        start_at = now
        if state.last_dispatch is not None:
            start_at = max(now, state.last_dispatch + spacing)
        state.last_dispatch = start_at

        state.running += 1
        self._total_running += 1
        state.max_observed = max(state.max_observed, state.running)
        self._max_observed_total = max(self._max_observed_total, self._total_running)

        logger.debug(
            "Dispatching work",
            lane=lane.value,
            delay=round(start_at - now, 4),
            lane_running=state.running,
            total_running=self._total_running,
            lane_pending=len(state.queue),
        )

        task = asyncio.ensure_future(self._run(state, work, future, start_at - now))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(
        self,
        state: _LaneState,
        work: Callable[[], Awaitable[Any]],
        future: "asyncio.Future[Any]",
        delay: float,
    ) -> None:
        try:
            if delay > 0:
                await self._sleep(delay)
            result = await work()
        except asyncio.CancelledError:
            if not future.done():
                future.cancel()
            raise
        except Exception as exc:
            if not future.done():
                future.set_exception(exc)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            state.running -= 1
            self._total_running -= 1
            self._drain()

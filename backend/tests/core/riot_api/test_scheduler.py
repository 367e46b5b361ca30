"""
Tests for the lane scheduler.
"""

import asyncio

import pytest

from lobbyscout.core.riot_api.scheduler import Lane, LaneConfig, RequestScheduler

from tests.helpers import FakeClock, RecordingSleep


async def _settle(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


class TestRequestScheduler:
    """Test cases for RequestScheduler."""

    async def test_submit_returns_work_result(self, scheduler):
        async def work():
            return 42

        assert await scheduler.submit(Lane.INTERACTIVE, work) == 42
        assert scheduler.total_running == 0

    async def test_submit_propagates_work_exception(self, scheduler):
        """Test that the submitter sees the work's exception and slots are released."""

        async def work():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await scheduler.submit(Lane.BULK, work)

        assert scheduler.running(Lane.BULK) == 0
        assert scheduler.total_running == 0

    async def test_concurrency_never_exceeds_caps(self):
        """Test per-lane and global caps under a burst on both lanes."""
        scheduler = RequestScheduler(
            lanes={
                Lane.INTERACTIVE: LaneConfig(max_concurrent=2),
                Lane.BULK: LaneConfig(max_concurrent=2),
            },
            global_max_concurrent=3,
        )

        async def work():
            for _ in range(3):
                await asyncio.sleep(0)

        await asyncio.gather(
            *(scheduler.submit(Lane.INTERACTIVE, work) for _ in range(10)),
            *(scheduler.submit(Lane.BULK, work) for _ in range(10)),
        )

        assert scheduler.max_observed(Lane.INTERACTIVE) <= 2
        assert scheduler.max_observed(Lane.BULK) <= 2
        assert scheduler.max_observed_total == 3
        assert scheduler.total_running == 0

    async def test_interactive_preferred_over_bulk(self):
        """Test that a freed slot goes to queued interactive work first."""
        scheduler = RequestScheduler(
            lanes={
                Lane.INTERACTIVE: LaneConfig(max_concurrent=1),
                Lane.BULK: LaneConfig(max_concurrent=1),
            },
            global_max_concurrent=1,
        )
        gate = asyncio.Event()
        order = []

        def job(name, wait=None):
            async def work():
                order.append(name)
                if wait is not None:
                    await wait.wait()
                return name

            return work

        task_a = asyncio.create_task(scheduler.submit(Lane.BULK, job("A", gate)))
        await _settle()
        task_b = asyncio.create_task(scheduler.submit(Lane.BULK, job("B")))
        task_c = asyncio.create_task(scheduler.submit(Lane.INTERACTIVE, job("C")))
        await _settle()

        assert order == ["A"]
        assert scheduler.pending(Lane.BULK) == 1
        assert scheduler.pending(Lane.INTERACTIVE) == 1

        gate.set()
        results = await asyncio.gather(task_a, task_b, task_c)

        assert results == ["A", "B", "C"]
        assert order == ["A", "C", "B"]

    async def test_lane_fifo(self):
        """Test that work within one lane is dispatched in submission order."""
        scheduler = RequestScheduler(
            lanes={Lane.BULK: LaneConfig(max_concurrent=1)},
            global_max_concurrent=1,
        )
        order = []

        def job(i):
            async def work():
                order.append(i)

            return work

        await asyncio.gather(*(scheduler.submit(Lane.BULK, job(i)) for i in range(5)))

        assert order == [0, 1, 2, 3, 4]

    async def test_min_spacing_between_starts(self):
        """Test that consecutive starts in a lane are spaced by min_spacing_ms."""
        sleep = RecordingSleep()
        scheduler = RequestScheduler(
            lanes={Lane.INTERACTIVE: LaneConfig(max_concurrent=4, min_spacing_ms=100)},
            global_max_concurrent=4,
            clock=FakeClock(),
            sleep=sleep,
        )

        async def work():
            return None

        await asyncio.gather(*(scheduler.submit(Lane.INTERACTIVE, work) for _ in range(3)))

        assert sleep.calls == pytest.approx([0.1, 0.2], abs=0.02)

    async def test_unconfigured_lane_rejected(self):
        scheduler = RequestScheduler(
            lanes={Lane.INTERACTIVE: LaneConfig(max_concurrent=1)},
            global_max_concurrent=1,
        )

        async def work():
            return None

        with pytest.raises(ValueError):
            await scheduler.submit(Lane.BULK, work)

    def test_invalid_caps_rejected(self):
        with pytest.raises(ValueError):
            RequestScheduler(
                lanes={Lane.INTERACTIVE: LaneConfig(max_concurrent=1)},
                global_max_concurrent=0,
            )
        with pytest.raises(ValueError):
            RequestScheduler(
                lanes={Lane.INTERACTIVE: LaneConfig(max_concurrent=0)},
                global_max_concurrent=1,
            )

    def test_from_settings(self, settings):
        scheduler = RequestScheduler.from_settings(settings)
        assert scheduler.global_max_concurrent == 5
        assert scheduler.running(Lane.INTERACTIVE) == 0
        assert scheduler.pending(Lane.BULK) == 0

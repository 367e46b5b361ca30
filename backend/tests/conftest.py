"""Shared fixtures: isolated settings, fake clocks and recorded sleeps."""

import pytest

from lobbyscout.core.cache import CacheStore
from lobbyscout.core.config import Settings
from lobbyscout.core.riot_api.scheduler import Lane, LaneConfig, RequestScheduler

from tests.helpers import FakeClock, RecordingSleep, make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> CacheStore:
    return CacheStore(max_entries=50, clock=clock)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def scheduler() -> RequestScheduler:
    """Scheduler without spacing so wire-level tests run instantly."""
    return RequestScheduler(
        lanes={
            Lane.INTERACTIVE: LaneConfig(max_concurrent=4),
            Lane.BULK: LaneConfig(max_concurrent=2),
        },
        global_max_concurrent=5,
    )

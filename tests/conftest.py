"""Pytest fixtures for testing"""

import pytest

from yield_streamer.api.streamer import YieldStreamer
from yield_streamer.config import Settings
from yield_streamer.domain.constants import RATE_FACTOR, SECONDS_PER_DAY
from yield_streamer.domain.models import RateTier
from yield_streamer.infrastructure.clients.ledger import InMemoryTokenLedger
from yield_streamer.infrastructure.repositories import ScheduleRepository, YieldStateRepository
from yield_streamer.utils.clock import FixedClock

HOUR = 60 * 60
DAY = SECONDS_PER_DAY

# 2023-12-09 00:00:00 in the streamer's shifted time
BASE_DAY = 19_700
BASE_TIMESTAMP = BASE_DAY * DAY

RESERVE_FUNDS = 10**15


def daily_rate(percent: float) -> int:
    """Daily rate in RATE_FACTOR units"""
    return int(RATE_FACTOR * percent) // 100


@pytest.fixture
def three_tiers() -> list[RateTier]:
    """3% on the first 1M, 2% on the next 1M, 1% on the rest"""
    return [
        RateTier(rate=daily_rate(3), cap=1_000_000),
        RateTier(rate=daily_rate(2), cap=1_000_000),
        RateTier(rate=daily_rate(1), cap=0),
    ]


@pytest.fixture
def config() -> Settings:
    """Engine settings isolated from the environment"""
    return Settings(_env_file=None, fee_rate=0, fee_receiver=None, enable_yield_state_auto_initialization=False)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(BASE_TIMESTAMP)


@pytest.fixture
def ledger() -> InMemoryTokenLedger:
    """In-memory ledger with a funded yield reserve"""
    ledger = InMemoryTokenLedger(reserve_account="yield-reserve")
    ledger.mint("yield-reserve", RESERVE_FUNDS)
    return ledger


@pytest.fixture
def schedules() -> ScheduleRepository:
    """Default group paying a flat 40% per day"""
    repo = ScheduleRepository(default_group_id=0)
    repo.add_rate(0, 0, [RateTier(rate=daily_rate(40), cap=0)])
    return repo


@pytest.fixture
def streamer(
    ledger: InMemoryTokenLedger,
    schedules: ScheduleRepository,
    clock: FixedClock,
    config: Settings,
) -> YieldStreamer:
    """Streamer wired to the in-memory ledger's balance hook"""
    streamer = YieldStreamer(
        ledger=ledger,
        schedules=schedules,
        clock=clock,
        states=YieldStateRepository(),
        config=config,
    )
    ledger.add_hook(streamer.after_balance_change)
    return streamer

"""Collaborator providers for the yield streamer"""

from yield_streamer.config import Settings
from yield_streamer.infrastructure.clients.ledger import LedgerClient
from yield_streamer.infrastructure.clients.legacy import LegacyClient
from yield_streamer.infrastructure.repositories import ScheduleRepository, YieldStateRepository
from yield_streamer.utils.clock import SystemClock


def get_ledger_client(config: Settings) -> LedgerClient:
    """Provide token ledger HTTP client instance"""
    return LedgerClient(base_url=config.ledger_api_base, timeout=config.http_timeout_seconds)


def get_legacy_client(config: Settings) -> LegacyClient:
    """Provide legacy accounting client instance"""
    return LegacyClient(base_url=config.legacy_api_base, timeout=config.http_timeout_seconds)


def get_clock(config: Settings) -> SystemClock:
    """Provide wall clock shifted to the product's day boundaries"""
    return SystemClock(negative_time_shift=config.negative_time_shift)


def get_schedule_repository(config: Settings) -> ScheduleRepository:
    return ScheduleRepository(default_group_id=config.default_group_id)


def get_state_repository() -> YieldStateRepository:
    return YieldStateRepository()

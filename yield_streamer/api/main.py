"""Yield streamer factory"""

from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from yield_streamer.api.dependencies import (
    get_clock,
    get_ledger_client,
    get_schedule_repository,
    get_state_repository,
)
from yield_streamer.api.streamer import Clock, YieldStreamer
from yield_streamer.config import Settings, settings
from yield_streamer.infrastructure.clients.ledger import TokenLedger
from yield_streamer.infrastructure.observability.logging import setup_logging


def create_streamer(
    config: Settings | None = None,
    ledger: TokenLedger | None = None,
    clock: Clock | None = None,
) -> YieldStreamer:
    """Create and wire a yield streamer"""
    config = config or settings
    setup_logging(config.log_level)

    streamer = YieldStreamer(
        ledger=ledger or get_ledger_client(config),
        schedules=get_schedule_repository(config),
        clock=clock or get_clock(config),
        states=get_state_repository(),
        config=config,
    )

    # Ledgers that publish balance changes settle yield before each change
    add_hook = getattr(streamer.ledger, "add_hook", None)
    if add_hook is not None:
        add_hook(streamer.after_balance_change)

    return streamer


def render_metrics() -> tuple[bytes, str]:
    """Prometheus exposition payload and its content type"""
    return generate_latest(), CONTENT_TYPE_LATEST

"""Accrual previews - pure projections of a yield state to a point in time"""

from typing import Sequence

from yield_streamer.domain.aggregation import aggregate_yield
from yield_streamer.domain.claims import calculate_fee, round_down
from yield_streamer.domain.constants import FEE_RATE, RATE_FACTOR, ROUND_FACTOR
from yield_streamer.domain.exceptions import EmptyRateSchedule, InvalidTimeRange
from yield_streamer.domain.models import AccruePreview, ClaimPreview, YieldRate, YieldState
from yield_streamer.domain.schedule import calculate_yield, find_rate_range, truncate_rates


def get_accrue_preview(
    state: YieldState,
    rates: Sequence[YieldRate],
    current_timestamp: int,
    rate_factor: int = RATE_FACTOR,
) -> AccruePreview:
    """
    Project state forward to current_timestamp without mutating it.

    accrued_yield_after adds everything settled in the window to the previous
    accrued yield; stream_yield_after is the yield live in the current day.
    A preview at exactly the last update timestamp changes nothing.

    Raises:
        EmptyRateSchedule: rates is empty
        InvalidTimeRange: current_timestamp is before the last update
    """
    if not rates:
        raise EmptyRateSchedule("No yield rates configured")

    from_timestamp = state.last_update_timestamp
    if current_timestamp < from_timestamp:
        raise InvalidTimeRange(from_timestamp, current_timestamp)

    preview = AccruePreview(
        from_timestamp=from_timestamp,
        to_timestamp=current_timestamp,
        balance=state.last_update_balance,
        stream_yield_before=state.stream_yield,
        accrued_yield_before=state.accrued_yield,
        stream_yield_after=state.stream_yield,
        accrued_yield_after=state.accrued_yield,
        rates=[],
        results=[],
    )

    if current_timestamp == from_timestamp:
        start_index, end_index = find_rate_range(rates, from_timestamp, from_timestamp + 1)
        preview.rates = truncate_rates(rates, start_index, end_index)
        return preview

    start_index, end_index = find_rate_range(rates, from_timestamp, current_timestamp)
    preview.rates = truncate_rates(rates, start_index, end_index)
    preview.results = calculate_yield(
        from_timestamp,
        current_timestamp,
        rates,
        start_index,
        end_index,
        state.last_update_balance,
        state.stream_yield,
        state.accrued_yield,
        rate_factor,
    )

    settled_yield, live_yield = aggregate_yield(preview.results)
    preview.accrued_yield_after = state.accrued_yield + settled_yield
    preview.stream_yield_after = live_yield

    return preview


def to_claim_preview(
    preview: AccruePreview,
    fee_rate: int = FEE_RATE,
    rate_factor: int = RATE_FACTOR,
    round_factor: int = ROUND_FACTOR,
) -> ClaimPreview:
    """
    Claimable yield (rounded down) and the tiers currently in effect.

    The preview is stamped with the accrual end it was computed for, and the
    fee is the one a claim of the whole claimable amount would pay now.
    """
    claimable = round_down(preview.accrued_yield_after + preview.stream_yield_after, round_factor)
    current_tiers = preview.rates[-1].tiers if preview.rates else ()

    return ClaimPreview(
        yield_=claimable,
        fee=calculate_fee(claimable, fee_rate, rate_factor, round_factor) if fee_rate else 0,
        timestamp=preview.to_timestamp,
        balance=preview.balance,
        rates=[tier.rate for tier in current_tiers],
        caps=[tier.cap for tier in current_tiers],
    )

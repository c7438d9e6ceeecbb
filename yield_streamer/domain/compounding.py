"""Day compounder - daily compounding of one rate over a time interval"""

from typing import List, Sequence

from yield_streamer.domain.constants import RATE_FACTOR, SECONDS_PER_DAY
from yield_streamer.domain.exceptions import InvalidTimeRange
from yield_streamer.domain.interest import calculate_tiered_yield
from yield_streamer.domain.models import RateTier, YieldResult
from yield_streamer.utils.time_utils import next_day


def _accumulate(target: List[int], values: List[int]) -> None:
    for i, value in enumerate(values):
        target[i] += value


def compound_yield(
    from_timestamp: int,
    to_timestamp: int,
    tiers: Sequence[RateTier],
    balance: int,
    stream_yield: int,
    rate_factor: int = RATE_FACTOR,
) -> YieldResult:
    """
    Compound yield over [from_timestamp, to_timestamp) under a single set of tiers.

    The interval is split into an optional first partial day, whole days and an
    optional last partial day. Whole days compound: each day's yield is added
    to the balance before the next day is computed.

    stream_yield is the yield already live in the day containing from_timestamp.
    It is reported inside the first partial day (or the last partial day when
    the interval never reaches a day boundary) and folded into the balance.

    Raises:
        InvalidTimeRange: from_timestamp > to_timestamp
    """
    if from_timestamp > to_timestamp:
        raise InvalidTimeRange(from_timestamp, to_timestamp)

    tier_count = len(tiers)
    result = YieldResult(
        tiered_first_day_partial_yield=[0] * tier_count,
        tiered_full_days_yield=[0] * tier_count,
        tiered_last_day_partial_yield=[0] * tier_count,
    )

    if from_timestamp == to_timestamp or balance == 0:
        return result

    next_day_start = next_day(from_timestamp)

    if from_timestamp % SECONDS_PER_DAY != 0:
        if to_timestamp <= next_day_start:
            # Interval ends before (or at) the next day boundary: nothing settles
            partial_yield, tiered = calculate_tiered_yield(
                balance, tiers, to_timestamp - from_timestamp, rate_factor
            )
            result.last_day_partial_yield = partial_yield + stream_yield
            result.tiered_last_day_partial_yield = tiered
            return result

        partial_yield, tiered = calculate_tiered_yield(
            balance, tiers, next_day_start - from_timestamp, rate_factor
        )
        result.first_day_partial_yield = partial_yield + stream_yield
        result.tiered_first_day_partial_yield = tiered
        balance += result.first_day_partial_yield
        from_timestamp = next_day_start
    else:
        result.first_day_partial_yield = stream_yield
        balance += stream_yield

        if to_timestamp < next_day_start:
            partial_yield, tiered = calculate_tiered_yield(
                balance, tiers, to_timestamp - from_timestamp, rate_factor
            )
            result.last_day_partial_yield = partial_yield
            result.tiered_last_day_partial_yield = tiered
            return result

    # Whole days, compounding daily
    while to_timestamp - from_timestamp >= SECONDS_PER_DAY:
        day_yield, tiered = calculate_tiered_yield(balance, tiers, SECONDS_PER_DAY, rate_factor)
        result.full_days_yield += day_yield
        _accumulate(result.tiered_full_days_yield, tiered)
        balance += day_yield
        from_timestamp += SECONDS_PER_DAY

    if from_timestamp < to_timestamp:
        partial_yield, tiered = calculate_tiered_yield(
            balance, tiers, to_timestamp - from_timestamp, rate_factor
        )
        result.last_day_partial_yield = partial_yield
        result.tiered_last_day_partial_yield = tiered

    return result

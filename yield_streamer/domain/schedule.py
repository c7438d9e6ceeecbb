"""Rate schedule resolution and splitting of an interval at rate boundaries"""

from typing import List, Sequence

from yield_streamer.domain.compounding import compound_yield
from yield_streamer.domain.constants import RATE_FACTOR
from yield_streamer.domain.exceptions import EmptyRateSchedule, InvalidTimeRange
from yield_streamer.domain.models import YieldRate, YieldResult
from yield_streamer.utils.time_utils import day_start


def find_rate_range(
    rates: Sequence[YieldRate],
    from_timestamp: int,
    to_timestamp: int,
) -> tuple[int, int]:
    """
    Find the inclusive index range of schedule entries in effect during
    [from_timestamp, to_timestamp).

    Scans backward from the newest entry: entries starting at or after
    to_timestamp are skipped, the first one starting before it is the end,
    and the scan stops at the first entry starting at or before from_timestamp.

    Returns: (start_index, end_index)

    Raises:
        EmptyRateSchedule: rates is empty
        InvalidTimeRange: from_timestamp >= to_timestamp
    """
    if not rates:
        raise EmptyRateSchedule("No yield rates configured")
    if from_timestamp >= to_timestamp:
        raise InvalidTimeRange(from_timestamp, to_timestamp)

    start_index = 0
    end_index = 0
    end_found = False

    for i in range(len(rates) - 1, -1, -1):
        rate_start = day_start(rates[i].effective_day)

        if rate_start >= to_timestamp:
            continue

        if not end_found:
            end_index = i
            end_found = True

        if rate_start <= from_timestamp:
            start_index = i
            break

    return start_index, end_index


def truncate_rates(rates: Sequence[YieldRate], start_index: int, end_index: int) -> List[YieldRate]:
    """Inclusive slice rates[start_index..end_index]"""
    if start_index > end_index:
        raise IndexError(f"start_index {start_index} is greater than end_index {end_index}")
    if start_index < 0 or end_index >= len(rates):
        raise IndexError(f"Rate index out of range: [{start_index}, {end_index}] of {len(rates)}")
    return list(rates[start_index : end_index + 1])


def calculate_yield(
    from_timestamp: int,
    to_timestamp: int,
    rates: Sequence[YieldRate],
    start_index: int,
    end_index: int,
    balance: int,
    stream_yield: int,
    accrued_yield: int,
    rate_factor: int = RATE_FACTOR,
) -> List[YieldResult]:
    """
    Compound yield across every schedule entry touched by the interval.

    The first sub-interval starts from balance + accrued_yield and carries the
    stream yield. Each later sub-interval starts at its entry's effective day
    with the running balance (everything produced so far folded in) and no
    stream yield, since only the first touched day can have one.

    Returns one YieldResult per entry in [start_index, end_index].
    """
    if start_index == end_index:
        return [
            compound_yield(
                from_timestamp,
                to_timestamp,
                rates[start_index].tiers,
                balance + accrued_yield,
                stream_yield,
                rate_factor,
            )
        ]

    results: List[YieldResult] = []
    running_balance = balance + accrued_yield

    first = compound_yield(
        from_timestamp,
        day_start(rates[start_index + 1].effective_day),
        rates[start_index].tiers,
        running_balance,
        stream_yield,
        rate_factor,
    )
    results.append(first)
    running_balance += first.total_yield

    for i in range(start_index + 1, end_index):
        middle = compound_yield(
            day_start(rates[i].effective_day),
            day_start(rates[i + 1].effective_day),
            rates[i].tiers,
            running_balance,
            0,
            rate_factor,
        )
        results.append(middle)
        running_balance += middle.total_yield

    results.append(
        compound_yield(
            day_start(rates[end_index].effective_day),
            to_timestamp,
            rates[end_index].tiers,
            running_balance,
            0,
            rate_factor,
        )
    )

    return results

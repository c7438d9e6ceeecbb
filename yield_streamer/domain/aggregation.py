"""Yield aggregation - reduce per-sub-interval results to settled and live yield"""

from typing import Sequence

from yield_streamer.domain.models import YieldResult


def aggregate_yield(results: Sequence[YieldResult]) -> tuple[int, int]:
    """
    Reduce ordered sub-interval results to (settled_yield, live_yield).

    Only the last partial day of the final sub-interval is still open, so it
    alone is live. Every other component, including the last partial day of
    earlier sub-intervals, has been closed by a later sub-interval.
    """
    if not results:
        return 0, 0

    settled_yield = 0
    for result in results:
        settled_yield += result.first_day_partial_yield + result.full_days_yield

    for result in results[:-1]:
        settled_yield += result.last_day_partial_yield

    live_yield = results[-1].last_day_partial_yield

    return settled_yield, live_yield

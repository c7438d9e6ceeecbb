"""Tiered interest calculator - simple interest allocated across capped rate tiers"""

from typing import List, Sequence

from yield_streamer.domain.constants import RATE_FACTOR, SECONDS_PER_DAY
from yield_streamer.domain.models import RateTier


def calculate_tiered_yield(
    amount: int,
    tiers: Sequence[RateTier],
    elapsed_seconds: int,
    rate_factor: int = RATE_FACTOR,
) -> tuple[int, List[int]]:
    """
    Calculate simple interest on amount over elapsed_seconds.

    The amount is poured into the tiers in order (waterfall): each tier takes
    min(remaining, cap), a zero cap takes everything that is left. Each tier's
    yield is rounded down independently.

    Args:
        amount: Principal to allocate
        tiers: Ordered tiers of one schedule entry
        elapsed_seconds: Accrual duration
        rate_factor: Scale of tier rates

    Returns: (total_yield, per_tier_yield)

    Example:
        5_000_000 over one day at [(3%, 1M), (2%, 1M), (1%, 0)]
        → 30_000 + 20_000 + 30_000 = 80_000
    """
    tiered_yield = [0] * len(tiers)
    total_yield = 0
    remaining = amount
    denominator = SECONDS_PER_DAY * rate_factor

    for i, tier in enumerate(tiers):
        if remaining == 0:
            break

        allocated = remaining if tier.cap == 0 else min(remaining, tier.cap)
        tier_yield = allocated * tier.rate * elapsed_seconds // denominator

        tiered_yield[i] = tier_yield
        total_yield += tier_yield
        remaining -= allocated

    return total_yield, tiered_yield

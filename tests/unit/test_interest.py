"""Unit tests for the tiered interest calculator"""

import pytest

from conftest import DAY, HOUR, daily_rate
from yield_streamer.domain.constants import RATE_FACTOR
from yield_streamer.domain.interest import calculate_tiered_yield
from yield_streamer.domain.models import RateTier


def test_waterfall_across_three_tiers(three_tiers):
    """Test 5M is split 1M / 1M / 3M across the tiers for one day"""
    total, tiered = calculate_tiered_yield(5_000_000, three_tiers, DAY)

    assert tiered == [30_000, 20_000, 30_000]
    assert total == 80_000


def test_amount_below_first_cap_stops_early(three_tiers):
    """Test remaining tiers get nothing once the amount is used up"""
    total, tiered = calculate_tiered_yield(500_000, three_tiers, DAY)

    assert tiered == [15_000, 0, 0]
    assert total == 15_000


def test_zero_cap_tier_absorbs_everything():
    """Test a leading uncapped tier takes the whole amount"""
    tiers = [RateTier(rate=daily_rate(1), cap=0), RateTier(rate=daily_rate(5), cap=1_000)]
    total, tiered = calculate_tiered_yield(2_000_000, tiers, DAY)

    assert tiered == [20_000, 0]
    assert total == 20_000


def test_partial_day_is_prorated(three_tiers):
    """Test 6 hours earn a quarter of the daily yield"""
    total, tiered = calculate_tiered_yield(5_000_000, three_tiers, 6 * HOUR)

    assert tiered == [7_500, 5_000, 7_500]
    assert total == 20_000


def test_each_tier_rounds_down():
    """Test fractional yield is truncated per tier"""
    tiers = [RateTier(rate=daily_rate(1), cap=150), RateTier(rate=daily_rate(1), cap=0)]
    # 150 * 1% = 1.5 → 1, 50 * 1% = 0.5 → 0
    total, tiered = calculate_tiered_yield(200, tiers, DAY)

    assert tiered == [1, 0]
    assert total == 1


def test_zero_elapsed_or_zero_amount(three_tiers):
    """Test nothing accrues without time or principal"""
    assert calculate_tiered_yield(5_000_000, three_tiers, 0) == (0, [0, 0, 0])
    assert calculate_tiered_yield(0, three_tiers, DAY) == (0, [0, 0, 0])


def test_custom_rate_factor():
    """Test rates scaled by a different factor"""
    tiers = [RateTier(rate=400_000_000, cap=0)]  # 40% with a 10^9 factor
    total, _ = calculate_tiered_yield(1_000, tiers, 6 * HOUR, rate_factor=10**9)

    assert total == 100


@pytest.mark.parametrize("amount", [0, 1, 999_999, 1_000_000, 1_500_001, 2_000_000, 7_654_321, 10**12])
@pytest.mark.parametrize("elapsed", [1, 3 * HOUR, DAY - 1, DAY, 3 * DAY])
def test_tier_sum_matches_total_and_caps_hold(three_tiers, amount, elapsed):
    """Test per-tier yields add up to the total and capped tiers never exceed their cap's yield"""
    total, tiered = calculate_tiered_yield(amount, three_tiers, elapsed)

    assert sum(tiered) == total
    for tier, tier_yield in zip(three_tiers, tiered):
        if tier.cap:
            assert tier_yield <= tier.cap * tier.rate * elapsed // (DAY * RATE_FACTOR)

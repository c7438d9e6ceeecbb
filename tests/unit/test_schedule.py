"""Unit tests for rate schedule resolution and interval splitting"""

import pytest

from conftest import BASE_DAY, BASE_TIMESTAMP, DAY, HOUR, daily_rate
from yield_streamer.domain.exceptions import EmptyRateSchedule, InvalidTimeRange
from yield_streamer.domain.models import RateTier, YieldRate
from yield_streamer.domain.schedule import calculate_yield, find_rate_range, truncate_rates


def _flat(day: int, percent: float) -> YieldRate:
    return YieldRate(effective_day=day, tiers=(RateTier(rate=daily_rate(percent), cap=0),))


@pytest.fixture
def rates():
    """40% from day 0, 80% from BASE_DAY + 3, back to 40% from BASE_DAY + 5"""
    return (_flat(0, 40), _flat(BASE_DAY + 3, 80), _flat(BASE_DAY + 5, 40))


class TestFindRateRange:
    def test_single_entry(self):
        """Test a one-entry schedule always resolves to index 0"""
        assert find_rate_range([_flat(0, 40)], BASE_TIMESTAMP, BASE_TIMESTAMP + 10 * DAY) == (0, 0)

    def test_interval_before_later_entries(self, rates):
        """Test an interval entirely under the first entry"""
        assert find_rate_range(rates, BASE_TIMESTAMP, BASE_TIMESTAMP + 2 * DAY) == (0, 0)

    def test_interval_ending_at_entry_start_excludes_it(self, rates):
        """Test to_timestamp is exclusive"""
        assert find_rate_range(rates, BASE_TIMESTAMP, BASE_TIMESTAMP + 3 * DAY) == (0, 0)

    def test_interval_starting_at_entry_start_includes_it(self, rates):
        """Test from_timestamp on an entry's first second resolves to that entry"""
        assert find_rate_range(rates, BASE_TIMESTAMP + 3 * DAY, BASE_TIMESTAMP + 4 * DAY) == (1, 1)

    def test_interval_spanning_all_entries(self, rates):
        """Test an interval crossing both boundaries"""
        assert find_rate_range(rates, BASE_TIMESTAMP + 2 * DAY, BASE_TIMESTAMP + 6 * DAY) == (0, 2)

    def test_interval_after_last_entry(self, rates):
        """Test an interval under the newest entry"""
        assert find_rate_range(rates, BASE_TIMESTAMP + 6 * DAY, BASE_TIMESTAMP + 7 * DAY) == (2, 2)

    def test_empty_schedule(self):
        """Test an empty schedule is rejected"""
        with pytest.raises(EmptyRateSchedule):
            find_rate_range([], 0, 1)

    @pytest.mark.parametrize("offset", [0, -1])
    def test_empty_or_inverted_interval(self, rates, offset):
        """Test from_timestamp >= to_timestamp is rejected"""
        with pytest.raises(InvalidTimeRange):
            find_rate_range(rates, BASE_TIMESTAMP, BASE_TIMESTAMP + offset)


class TestTruncateRates:
    def test_inclusive_slice(self, rates):
        """Test both bounds are included"""
        assert truncate_rates(rates, 1, 2) == [rates[1], rates[2]]
        assert truncate_rates(rates, 0, 0) == [rates[0]]

    def test_start_after_end(self, rates):
        """Test reversed bounds raise"""
        with pytest.raises(IndexError):
            truncate_rates(rates, 2, 1)

    def test_end_out_of_range(self, rates):
        """Test an end index past the schedule raises"""
        with pytest.raises(IndexError):
            truncate_rates(rates, 0, 3)


class TestCalculateYield:
    def test_single_entry_seeds_balance_with_accrued(self, rates):
        """Test accrued yield compounds with the balance"""
        results = calculate_yield(
            BASE_TIMESTAMP + 18 * HOUR,
            BASE_TIMESTAMP + DAY + 6 * HOUR,
            rates,
            0,
            0,
            balance=2_400,
            stream_yield=300,
            accrued_yield=600,
        )

        assert len(results) == 1
        assert results[0].first_day_partial_yield == 600  # 3000 * 40% / 4 + 300
        assert results[0].last_day_partial_yield == 360

    def test_split_across_three_entries(self, rates):
        """Test each sub-interval compounds on everything produced before it"""
        results = calculate_yield(
            BASE_TIMESTAMP + 2 * DAY + 18 * HOUR,
            BASE_TIMESTAMP + 5 * DAY + 6 * HOUR,
            rates,
            0,
            2,
            balance=6_000,
            stream_yield=3_300,
            accrued_yield=3_000,
        )

        assert len(results) == 3

        # 9000 * 40% / 4 + 3300, ends at the 80% boundary
        assert results[0].first_day_partial_yield == 0
        assert results[0].last_day_partial_yield == 4_200

        # Two full days at 80% on 13200
        assert results[1].first_day_partial_yield == 0
        assert results[1].full_days_yield == 10_560 + 19_008
        assert results[1].last_day_partial_yield == 0

        # 6 hours at 40% on 42768
        assert results[2].full_days_yield == 0
        assert results[2].last_day_partial_yield == 4_276

    def test_middle_entries_start_without_stream(self, rates):
        """Test only the first sub-interval carries the stream yield"""
        results = calculate_yield(
            BASE_TIMESTAMP + 3 * DAY + 12 * HOUR,
            BASE_TIMESTAMP + 5 * DAY + 12 * HOUR,
            rates,
            1,
            2,
            balance=1_000,
            stream_yield=500,
            accrued_yield=0,
        )

        # 1000 * 80% / 2 + 500 settles on day 3, then a full day on 1900
        assert results[0].first_day_partial_yield == 900
        assert results[0].full_days_yield == 1_520
        # 3420 at 40% for 12 hours
        assert results[1].first_day_partial_yield == 0
        assert results[1].last_day_partial_yield == 684

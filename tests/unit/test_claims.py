"""Unit tests for claim rounding, fee and deduction arithmetic"""

import pytest

from yield_streamer.domain.claims import (
    calculate_fee,
    deduct_claim,
    round_down,
    round_up,
    validate_claim_amount,
)
from yield_streamer.domain.exceptions import ClaimBelowMinimum, ClaimNotRounded, InsufficientYieldBalance


class TestRounding:
    def test_round_down_and_up(self):
        """Test rounding to the 10,000 unit"""
        assert round_down(10_000_001) == 10_000_000
        assert round_up(10_000_001) == 10_010_000

    def test_multiples_are_unchanged(self):
        """Test exact multiples round to themselves both ways"""
        assert round_down(10_000_000) == 10_000_000
        assert round_up(10_000_000) == 10_000_000
        assert round_down(0) == 0
        assert round_up(0) == 0

    @pytest.mark.parametrize("amount", [1, 9_999, 10_001, 123_456_789])
    def test_bounds(self, amount):
        """Test round_down <= amount <= round_up within one round factor"""
        assert round_down(amount) <= amount <= round_up(amount)
        assert round_up(amount) - round_down(amount) == 10_000

    def test_custom_round_factor(self):
        """Test a different round factor"""
        assert round_down(1_234, round_factor=100) == 1_200
        assert round_up(1_234, round_factor=100) == 1_300


class TestFee:
    def test_zero_fee_rate(self):
        """Test no fee when the rate is zero"""
        assert calculate_fee(10_000_000, fee_rate=0) == 0

    def test_fee_rounds_up(self):
        """Test 1% of 1.23M is 12,300 rounded up to 20,000"""
        assert calculate_fee(1_230_000, fee_rate=10**10) == 20_000

    def test_fee_on_exact_multiple(self):
        """Test a fee already on the round factor is kept"""
        assert calculate_fee(10_000_000, fee_rate=10**10) == 100_000


class TestValidateClaimAmount:
    def test_below_minimum(self):
        """Test 500,000 is under the 1,000,000 minimum"""
        with pytest.raises(ClaimBelowMinimum):
            validate_claim_amount(500_000)

    def test_not_rounded(self):
        """Test 1,000,001 is not a multiple of 10,000"""
        with pytest.raises(ClaimNotRounded):
            validate_claim_amount(1_000_001)

    def test_minimum_checked_first(self):
        """Test an unrounded amount under the minimum reports the minimum"""
        with pytest.raises(ClaimBelowMinimum):
            validate_claim_amount(999_999)

    def test_valid_amounts(self):
        """Test the minimum itself and larger multiples pass"""
        validate_claim_amount(1_000_000)
        validate_claim_amount(25_010_000)


class TestDeductClaim:
    def test_accrued_covers_amount(self):
        """Test stream yield is untouched when accrued yield suffices"""
        assert deduct_claim(5_000_000, 300_000, 4_000_000) == (1_000_000, 300_000)

    def test_spills_into_stream(self):
        """Test the remainder comes out of stream yield"""
        assert deduct_claim(1_000_000, 500_000, 1_200_000) == (0, 300_000)

    def test_exact_total(self):
        """Test claiming everything empties both"""
        assert deduct_claim(60_000, 30_000, 90_000) == (0, 0)

    def test_insufficient_yield(self):
        """Test 100,000 against 90,000 available"""
        with pytest.raises(InsufficientYieldBalance):
            deduct_claim(60_000, 30_000, 100_000)

"""Claim settlement arithmetic - rounding, fee and yield deduction"""

from yield_streamer.domain.constants import FEE_RATE, MIN_CLAIM_AMOUNT, RATE_FACTOR, ROUND_FACTOR
from yield_streamer.domain.exceptions import ClaimBelowMinimum, ClaimNotRounded, InsufficientYieldBalance


def round_down(amount: int, round_factor: int = ROUND_FACTOR) -> int:
    """Largest multiple of round_factor not above amount"""
    return (amount // round_factor) * round_factor


def round_up(amount: int, round_factor: int = ROUND_FACTOR) -> int:
    """Smallest multiple of round_factor not below amount"""
    rounded = round_down(amount, round_factor)
    if rounded < amount:
        return rounded + round_factor
    return rounded


def calculate_fee(
    amount: int,
    fee_rate: int = FEE_RATE,
    rate_factor: int = RATE_FACTOR,
    round_factor: int = ROUND_FACTOR,
) -> int:
    """Claim fee, rounded up to the round factor"""
    return round_up(amount * fee_rate // rate_factor, round_factor)


def validate_claim_amount(
    amount: int,
    min_claim_amount: int = MIN_CLAIM_AMOUNT,
    round_factor: int = ROUND_FACTOR,
) -> None:
    """
    Check claim amount preconditions.

    Raises:
        ClaimBelowMinimum: amount < min_claim_amount
        ClaimNotRounded: amount is not a multiple of round_factor
    """
    if amount < min_claim_amount:
        raise ClaimBelowMinimum(f"Claim amount {amount} is below minimum {min_claim_amount}")
    if amount != round_down(amount, round_factor):
        raise ClaimNotRounded(f"Claim amount {amount} is not a multiple of {round_factor}")


def deduct_claim(accrued_yield: int, stream_yield: int, amount: int) -> tuple[int, int]:
    """
    Take amount out of accrued yield first, then out of stream yield.

    Returns: (accrued_yield, stream_yield) after deduction

    Raises:
        InsufficientYieldBalance: amount exceeds accrued + stream yield
    """
    total_yield = accrued_yield + stream_yield
    if amount > total_yield:
        raise InsufficientYieldBalance(f"Claim amount {amount} exceeds available yield {total_yield}")

    if amount <= accrued_yield:
        return accrued_yield - amount, stream_yield

    return 0, stream_yield - (amount - accrued_yield)

"""Day arithmetic on unix timestamps (seconds)"""

from yield_streamer.domain.constants import SECONDS_PER_DAY


def effective_day(timestamp: int) -> int:
    """Day index since epoch containing the timestamp"""
    return timestamp // SECONDS_PER_DAY


def effective_timestamp(timestamp: int) -> int:
    """Start of the day containing the timestamp"""
    return effective_day(timestamp) * SECONDS_PER_DAY


def next_day(timestamp: int) -> int:
    """Start of the day following the one containing the timestamp"""
    return effective_timestamp(timestamp) + SECONDS_PER_DAY


def remaining_seconds(timestamp: int) -> int:
    """Seconds elapsed since the start of the timestamp's day"""
    return timestamp % SECONDS_PER_DAY


def day_start(day: int) -> int:
    """Timestamp at which the given day index begins"""
    return day * SECONDS_PER_DAY

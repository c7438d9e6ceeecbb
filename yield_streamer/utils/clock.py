"""Time sources for the yield streamer"""

import time

from yield_streamer.domain.constants import NEGATIVE_TIME_SHIFT, SECONDS_PER_DAY


class SystemClock:
    """Wall clock shifted back so day boundaries fall at local midnight"""

    def __init__(self, negative_time_shift: int = NEGATIVE_TIME_SHIFT):
        self.negative_time_shift = negative_time_shift

    def now(self) -> int:
        return int(time.time()) - self.negative_time_shift


class FixedClock:
    """Manually driven clock for simulations and tests"""

    def __init__(self, timestamp: int = 0):
        self.timestamp = timestamp

    def now(self) -> int:
        return self.timestamp

    def set(self, timestamp: int) -> None:
        self.timestamp = timestamp

    def set_day(self, day: int, seconds: int = 0) -> None:
        self.timestamp = day * SECONDS_PER_DAY + seconds

    def advance(self, seconds: int) -> int:
        self.timestamp += seconds
        return self.timestamp

"""In-memory stores for yield states and group rate schedules"""

import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Dict, Iterator, Sequence

from yield_streamer.domain.exceptions import (
    EmptyRateTiers,
    InvalidScheduleOrdering,
    RateIndexOutOfRange,
)
from yield_streamer.domain.models import RateTier, YieldRate, YieldState
from yield_streamer.infrastructure.observability.metrics import schedule_change_counter


class YieldStateRepository:
    """Repository for per-account yield states"""

    def __init__(self):
        self._states: Dict[str, YieldState] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    @contextmanager
    def lock(self, account: str) -> Iterator[None]:
        """Serialize read-modify-write cycles on one account"""
        with self._registry_lock:
            account_lock = self._locks.setdefault(account, threading.RLock())
        with account_lock:
            yield

    def get(self, account: str) -> YieldState:
        """Fetch a copy of the account state (default state if unknown)"""
        state = self._states.get(account)
        return replace(state) if state is not None else YieldState()

    def save(self, account: str, state: YieldState) -> None:
        self._states[account] = replace(state)

    def set_yield_state(self, account: str, state: YieldState) -> None:
        """Overwrite an account state as-is"""
        with self.lock(account):
            self.save(account, state)

    def reset_yield_state(self, account: str) -> None:
        """Return an account to the uninitialized state"""
        with self.lock(account):
            self._states.pop(account, None)


class ScheduleRepository:
    """Repository for account groups and their rate schedules"""

    def __init__(self, default_group_id: int = 0):
        self.default_group_id = default_group_id
        self._rates: Dict[int, tuple[YieldRate, ...]] = {}
        self._groups: Dict[str, int] = {}
        self._lock = threading.Lock()

    def rates_for_group(self, group_id: int) -> tuple[YieldRate, ...]:
        """Snapshot of the group's schedule, oldest first"""
        return self._rates.get(group_id, ())

    def group_of(self, account: str) -> int:
        return self._groups.get(account, self.default_group_id)

    def assign_group(self, account: str, group_id: int) -> None:
        with self._lock:
            self._groups[account] = group_id

    def add_rate(self, group_id: int, effective_day: int, tiers: Sequence[RateTier]) -> YieldRate:
        """
        Append a schedule entry.

        Raises:
            EmptyRateTiers: tiers is empty
            InvalidScheduleOrdering: first entry not at day 0, or not after the last entry
        """
        rate = _build_rate(effective_day, tiers)

        with self._lock:
            current = self._rates.get(group_id, ())
            if not current and effective_day != 0:
                raise InvalidScheduleOrdering("First yield rate must take effect on day 0")
            if current and effective_day <= current[-1].effective_day:
                raise InvalidScheduleOrdering(
                    f"Effective day {effective_day} must be after {current[-1].effective_day}"
                )
            self._rates[group_id] = current + (rate,)

        schedule_change_counter.labels(operation="add").inc()
        return rate

    def update_rate(
        self,
        group_id: int,
        index: int,
        effective_day: int,
        tiers: Sequence[RateTier],
    ) -> YieldRate:
        """
        Replace a schedule entry in place, keeping neighbours in order.

        Any entry may be corrected, including one a later entry has already
        superseded. The only constraints are ordering: entry 0 stays on day 0
        and every other entry lies strictly between its neighbours. Accounts
        pick up a correction on their next accrual, including for the part of
        the uncommitted interval it covers.

        Raises:
            EmptyRateTiers: tiers is empty
            RateIndexOutOfRange: no entry at index
            InvalidScheduleOrdering: entry 0 moved off day 0, or not strictly between neighbours
        """
        rate = _build_rate(effective_day, tiers)

        with self._lock:
            current = self._rates.get(group_id, ())
            if index < 0 or index >= len(current):
                raise RateIndexOutOfRange(f"No yield rate at index {index} for group {group_id}")
            if index == 0 and effective_day != 0:
                raise InvalidScheduleOrdering("First yield rate must take effect on day 0")
            if index > 0 and effective_day <= current[index - 1].effective_day:
                raise InvalidScheduleOrdering(
                    f"Effective day {effective_day} must be after {current[index - 1].effective_day}"
                )
            if index < len(current) - 1 and effective_day >= current[index + 1].effective_day:
                raise InvalidScheduleOrdering(
                    f"Effective day {effective_day} must be before {current[index + 1].effective_day}"
                )
            self._rates[group_id] = current[:index] + (rate,) + current[index + 1 :]

        schedule_change_counter.labels(operation="update").inc()
        return rate


def _build_rate(effective_day: int, tiers: Sequence[RateTier]) -> YieldRate:
    if not tiers:
        raise EmptyRateTiers("Yield rate must have at least one tier")
    return YieldRate(effective_day=effective_day, tiers=tuple(tiers))

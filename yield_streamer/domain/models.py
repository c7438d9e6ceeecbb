"""Domain models - pure Python dataclasses representing yield entities"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class RateTier:
    """Capped band of principal earning its own daily rate"""

    rate: int  # Daily rate scaled by RATE_FACTOR
    cap: int  # 0 = absorbs all remaining balance


@dataclass(frozen=True)
class YieldRate:
    """Schedule entry: tiers in effect from effective_day onward"""

    effective_day: int
    tiers: tuple[RateTier, ...]


@dataclass
class YieldState:
    """Per-account accrual state as of the last update"""

    last_update_timestamp: int = 0
    last_update_balance: int = 0
    accrued_yield: int = 0
    stream_yield: int = 0
    initialized: bool = False


@dataclass
class YieldResult:
    """Yield produced over one rate-homogeneous sub-interval"""

    first_day_partial_yield: int = 0
    full_days_yield: int = 0
    last_day_partial_yield: int = 0
    tiered_first_day_partial_yield: List[int] = field(default_factory=list)
    tiered_full_days_yield: List[int] = field(default_factory=list)
    tiered_last_day_partial_yield: List[int] = field(default_factory=list)

    @property
    def total_yield(self) -> int:
        return self.first_day_partial_yield + self.full_days_yield + self.last_day_partial_yield


@dataclass
class AccruePreview:
    """Read-only projection of an accrual from the last update to to_timestamp"""

    from_timestamp: int
    to_timestamp: int
    balance: int
    stream_yield_before: int
    accrued_yield_before: int
    stream_yield_after: int
    accrued_yield_after: int
    rates: List[YieldRate]
    results: List[YieldResult]


@dataclass
class ClaimPreview:
    """Claimable amount derived from an accrue preview"""

    yield_: int
    fee: int
    timestamp: int
    balance: int
    rates: List[int]
    caps: List[int]


@dataclass
class ClaimResult:
    """Outcome of a settled claim"""

    account: str
    amount: int
    fee: int
    net_amount: int
    accrued_yield: int
    stream_yield: int
    timestamp: int

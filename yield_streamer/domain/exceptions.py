"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTimeRange(DomainException):
    """Time interval is empty or inverted"""

    def __init__(self, from_timestamp: int, to_timestamp: int):
        super().__init__(f"Invalid time range: from={from_timestamp} to={to_timestamp}")
        self.from_timestamp = from_timestamp
        self.to_timestamp = to_timestamp


class EmptyRateSchedule(DomainException):
    """No yield rates configured for the group"""

    pass


class EmptyRateTiers(DomainException):
    """Yield rate entry has no tiers"""

    pass


class InvalidScheduleOrdering(DomainException):
    """Effective day breaks the ascending, zero-start order of the schedule"""

    pass


class RateIndexOutOfRange(DomainException):
    """Schedule entry index does not exist"""

    pass


class ClaimBelowMinimum(DomainException):
    """Claim amount is below the configured minimum"""

    pass


class ClaimNotRounded(DomainException):
    """Claim amount is not a multiple of the round factor"""

    pass


class InsufficientYieldBalance(DomainException):
    """Accrued plus stream yield does not cover the claim"""

    pass


class AccountNotInitialized(DomainException):
    """Account has no yield state yet"""

    pass


class AccountAlreadyInitialized(DomainException):
    """Account yield state already exists"""

    pass


class GroupAlreadyAssigned(DomainException):
    """Account already belongs to the requested group"""

    pass


class FeeDestinationMissing(DomainException):
    """Fee rate is configured but no fee receiver is set"""

    pass


class LedgerAPIError(DomainException):
    """Token ledger returned an error or is unavailable"""

    pass

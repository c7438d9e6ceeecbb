"""Yield streamer - accrual state manager and claim settlement over injected collaborators"""

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Protocol

from yield_streamer.config import Settings, settings
from yield_streamer.domain.accrual import get_accrue_preview, to_claim_preview
from yield_streamer.domain.claims import calculate_fee, deduct_claim, validate_claim_amount
from yield_streamer.domain.exceptions import (
    AccountAlreadyInitialized,
    AccountNotInitialized,
    DomainException,
    FeeDestinationMissing,
    GroupAlreadyAssigned,
)
from yield_streamer.domain.models import AccruePreview, ClaimPreview, ClaimResult, YieldRate, YieldState
from yield_streamer.infrastructure.clients.ledger import TokenLedger
from yield_streamer.infrastructure.clients.legacy import LegacyReadResult, LegacySource
from yield_streamer.infrastructure.observability.logging import log_accrual, log_claim
from yield_streamer.infrastructure.observability.metrics import (
    accrual_counter,
    claim_counter,
    initialization_counter,
    record_claim,
)
from yield_streamer.infrastructure.repositories import ScheduleRepository, YieldStateRepository
from yield_streamer.utils.time_utils import effective_day


class Clock(Protocol):
    def now(self) -> int: ...


@dataclass
class InitializationReport:
    """Per-account outcome of a legacy migration batch"""

    initialized: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: Dict[str, LegacyReadResult] = field(default_factory=dict)


class YieldStreamer:
    """
    Streams yield to token holders.

    Reads (previews, state) are side-effect free. Writes (accrue, claim,
    balance hook, initialization, group change) run under the account lock.
    The account lock is never held across a ledger transfer, so ledger
    hooks can always take it. A claim either pays out in full or returns the
    deducted yield.
    """

    def __init__(
        self,
        ledger: TokenLedger,
        schedules: ScheduleRepository,
        clock: Clock,
        states: YieldStateRepository | None = None,
        config: Settings | None = None,
    ):
        self.ledger = ledger
        self.schedules = schedules
        self.clock = clock
        self.states = states or YieldStateRepository()
        self.config = config or settings

    # Read surface

    def get_yield_state(self, account: str) -> YieldState:
        return self.states.get(account)

    def get_accrue_preview(self, account: str, now: int | None = None) -> AccruePreview:
        state = self.states.get(account)
        return get_accrue_preview(
            state,
            self._rates_for(account),
            self.clock.now() if now is None else now,
            self.config.rate_factor,
        )

    def get_claim_preview(self, account: str, now: int | None = None) -> ClaimPreview:
        return to_claim_preview(
            self.get_accrue_preview(account, now),
            self.config.fee_rate,
            self.config.rate_factor,
            self.config.round_factor,
        )

    # Write surface

    def accrue(self, account: str) -> YieldState:
        """Commit accrual up to now"""
        with self.states.lock(account):
            state = self.states.get(account)
            if not state.initialized:
                raise AccountNotInitialized(f"Yield state of {account} is not initialized")
            state = self._accrue_state(account, state, self.clock.now(), trigger="explicit")
            self.states.save(account, state)
            return state

    def claim(self, account: str, amount: int) -> ClaimResult:
        """
        Pay out amount of accrued and stream yield to account.

        Flow:
        1. Validate minimum and rounding
        2. Commit accrual up to now
        3. Deduct from accrued yield, then stream yield
        4. Pay fee (if configured) and net amount in one ledger operation

        The account lock is released before the payout: the ledger calls back
        into after_balance_change, which takes the same lock. If the payout
        fails the deducted yield is credited back.

        Raises:
            ClaimBelowMinimum, ClaimNotRounded, AccountNotInitialized,
            InsufficientYieldBalance, FeeDestinationMissing, LedgerAPIError
        """
        start_time = time.time()

        try:
            validate_claim_amount(amount, self.config.min_claim_amount, self.config.round_factor)

            with self.states.lock(account):
                state = self.states.get(account)
                if not state.initialized:
                    raise AccountNotInitialized(f"Yield state of {account} is not initialized")

                now = self.clock.now()
                accrued = self._accrue_state(account, state, now, trigger="claim")
                state = replace(accrued)
                state.accrued_yield, state.stream_yield = deduct_claim(
                    accrued.accrued_yield, accrued.stream_yield, amount
                )

                fee = 0
                if self.config.fee_rate:
                    if not self.config.fee_receiver:
                        raise FeeDestinationMissing("Fee rate is set but no fee receiver is configured")
                    fee = calculate_fee(
                        amount, self.config.fee_rate, self.config.rate_factor, self.config.round_factor
                    )

                self.states.save(account, state)

            payouts: Dict[str, int] = {}
            if fee:
                payouts[self.config.fee_receiver] = fee
            payouts[account] = payouts.get(account, 0) + amount - fee

            try:
                self.ledger.transfer_many(payouts)
            except Exception:
                self._credit_back(
                    account,
                    accrued.accrued_yield - state.accrued_yield,
                    accrued.stream_yield - state.stream_yield,
                    now,
                )
                raise

        except DomainException as e:
            claim_counter.labels(outcome="rejected").inc()
            logging.warning(f"Claim rejected: {e}", extra={"account": account, "error": type(e).__name__})
            raise

        duration_ms = (time.time() - start_time) * 1000
        record_claim(amount, fee)
        log_claim(account, amount, fee, state.accrued_yield, state.stream_yield, duration_ms)

        return ClaimResult(
            account=account,
            amount=amount,
            fee=fee,
            net_amount=amount - fee,
            accrued_yield=state.accrued_yield,
            stream_yield=state.stream_yield,
            timestamp=now,
        )

    def after_balance_change(self, account: str, old_balance: int, new_balance: int) -> None:
        """Ledger hook: settle yield on the old balance, then track the new one"""
        with self.states.lock(account):
            state = self.states.get(account)
            now = self.clock.now()

            if not state.initialized:
                if not self.config.enable_yield_state_auto_initialization:
                    return
                self.states.save(
                    account,
                    YieldState(last_update_timestamp=now, last_update_balance=new_balance, initialized=True),
                )
                initialization_counter.labels(source="auto", outcome="ok").inc()
                return

            state = self._accrue_state(account, state, now, trigger="balance_change")
            state.last_update_balance = new_balance
            self.states.save(account, state)

    def initialize(self, account: str, accrued_yield: int = 0) -> YieldState:
        """Start accruing for an account from its current ledger balance"""
        with self.states.lock(account):
            if self.states.get(account).initialized:
                raise AccountAlreadyInitialized(f"Yield state of {account} is already initialized")

            state = YieldState(
                last_update_timestamp=self.clock.now(),
                last_update_balance=self.ledger.balance_of(account),
                accrued_yield=accrued_yield,
                initialized=True,
            )
            self.states.save(account, state)

        initialization_counter.labels(source="explicit", outcome="ok").inc()
        logging.info("Yield state initialized", extra={"account": account, "accrued_yield": accrued_yield})
        return state

    def initialize_from_legacy(self, accounts: Iterable[str], source: LegacySource) -> InitializationReport:
        """
        Migrate accounts from the legacy accounting system.

        A failed read is recorded in the report and the batch moves on.
        Accounts that already have a yield state are skipped.
        """
        report = InitializationReport()

        for account in accounts:
            with self.states.lock(account):
                if self.states.get(account).initialized:
                    report.skipped.append(account)
                    initialization_counter.labels(source="legacy", outcome="skipped").inc()
                    continue

                result = source.read_state(account)
                if not result.ok:
                    report.failed[account] = result
                    initialization_counter.labels(source="legacy", outcome="failed").inc()
                    logging.warning(
                        f"Legacy read failed: {result.reason}",
                        extra={"account": account, "error": result.error.value},
                    )
                    continue

                snapshot = result.snapshot
                self.states.save(
                    account,
                    YieldState(
                        last_update_timestamp=snapshot.timestamp,
                        last_update_balance=snapshot.balance,
                        accrued_yield=snapshot.accrued_yield,
                        initialized=True,
                    ),
                )
                report.initialized.append(account)
                initialization_counter.labels(source="legacy", outcome="ok").inc()

        logging.info(
            "Legacy migration batch completed",
            extra={
                "initialized": len(report.initialized),
                "skipped": len(report.skipped),
                "failed": len(report.failed),
            },
        )
        return report

    def assign_group(self, account: str, group_id: int) -> None:
        """Move an account to another rate group, settling under the old schedule first"""
        with self.states.lock(account):
            if self.schedules.group_of(account) == group_id:
                raise GroupAlreadyAssigned(f"Account {account} is already in group {group_id}")

            state = self.states.get(account)
            if state.initialized:
                state = self._accrue_state(account, state, self.clock.now(), trigger="group_change")
                self.states.save(account, state)

            self.schedules.assign_group(account, group_id)

    def _credit_back(self, account: str, accrued_part: int, stream_part: int, claim_timestamp: int) -> None:
        """Return yield deducted by a claim whose payout failed"""
        with self.states.lock(account):
            state = self.states.get(account)
            if effective_day(state.last_update_timestamp) == effective_day(claim_timestamp):
                state.accrued_yield += accrued_part
                state.stream_yield += stream_part
            else:
                # The claim's day has closed, its live yield is settled by now
                state.accrued_yield += accrued_part + stream_part
            self.states.save(account, state)

    def _rates_for(self, account: str) -> tuple[YieldRate, ...]:
        return self.schedules.rates_for_group(self.schedules.group_of(account))

    def _accrue_state(self, account: str, state: YieldState, now: int, trigger: str) -> YieldState:
        """Copy of state advanced to now; the caller decides whether to save it"""
        preview = get_accrue_preview(state, self._rates_for(account), now, self.config.rate_factor)
        advanced = replace(
            state,
            accrued_yield=preview.accrued_yield_after,
            stream_yield=preview.stream_yield_after,
            last_update_timestamp=now,
        )

        accrual_counter.labels(trigger=trigger).inc()
        log_accrual(account, trigger, preview.from_timestamp, now, advanced.accrued_yield, advanced.stream_yield)
        return advanced

"""Token ledger clients: in-memory ledger and HTTP client with exponential backoff"""

import threading
import time
from typing import Callable, Dict, List, Mapping, Protocol

import httpx

from yield_streamer.config import settings
from yield_streamer.domain.exceptions import LedgerAPIError
from yield_streamer.infrastructure.observability.metrics import ledger_failure_counter, ledger_latency_histogram

# (account, old_balance, new_balance)
BalanceHook = Callable[[str, int, int], None]


class TokenLedger(Protocol):
    """Balance-bearing asset ledger the streamer pays yield from"""

    def balance_of(self, account: str) -> int: ...

    def transfer(self, to: str, amount: int) -> None: ...

    def transfer_many(self, payouts: Mapping[str, int]) -> None: ...


class InMemoryTokenLedger:
    """
    Process-local ledger that notifies hooks after every balance change.

    Hooks run in registration order while the ledger lock is held, so they
    observe balance changes in the order they were applied.
    """

    def __init__(self, reserve_account: str = "yield-reserve"):
        self.reserve_account = reserve_account
        self._balances: Dict[str, int] = {}
        self._hooks: List[BalanceHook] = []
        self._lock = threading.RLock()

    def add_hook(self, hook: BalanceHook) -> None:
        self._hooks.append(hook)

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def mint(self, account: str, amount: int) -> None:
        """Credit new tokens to an account (deposit)"""
        with self._lock:
            self._apply({account: self.balance_of(account) + amount})

    def burn(self, account: str, amount: int) -> None:
        """Debit tokens from an account (withdrawal)"""
        with self._lock:
            balance = self.balance_of(account)
            if amount > balance:
                raise LedgerAPIError(f"Insufficient balance: {account} holds {balance}, burn {amount}")
            self._apply({account: balance - amount})

    def transfer(self, to: str, amount: int) -> None:
        """Pay out of the reserve account"""
        self.transfer_many({to: amount})

    def transfer_many(self, payouts: Mapping[str, int]) -> None:
        """Pay several accounts out of the reserve account, all or nothing"""
        with self._lock:
            total = sum(payouts.values())
            balance = self.balance_of(self.reserve_account)
            if total > balance:
                raise LedgerAPIError(
                    f"Insufficient balance: {self.reserve_account} holds {balance}, transfer {total}"
                )
            changes = {self.reserve_account: balance - total}
            for to, amount in payouts.items():
                changes[to] = changes.get(to, self.balance_of(to)) + amount
            self._apply(changes)

    def transfer_from(self, sender: str, to: str, amount: int) -> None:
        with self._lock:
            balance = self.balance_of(sender)
            if amount > balance:
                raise LedgerAPIError(f"Insufficient balance: {sender} holds {balance}, transfer {amount}")
            changes = {sender: balance - amount}
            changes[to] = changes.get(to, self.balance_of(to)) + amount
            self._apply(changes)

    def _apply(self, changes: Dict[str, int]) -> None:
        """Set balances, then run hooks; a failing hook rolls every balance back"""
        previous = {account: self.balance_of(account) for account in changes}
        self._balances.update(changes)
        try:
            for account, new_balance in changes.items():
                for hook in self._hooks:
                    hook(account, previous[account], new_balance)
        except Exception:
            self._balances.update(previous)
            raise


class LedgerClient:
    """Client for the external token ledger service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url or settings.ledger_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.ledger_max_retries
        self.backoff_base = settings.ledger_backoff_base
        self.transport = transport

    def balance_of(self, account: str) -> int:
        """
        Fetch the current token balance of an account.

        Raises:
            LedgerAPIError: On timeout, HTTP errors, or invalid response
        """
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = client.get(f"{self.base_url}/balances/{account}")
                response.raise_for_status()
                return int(response.json()["balance"])

            except httpx.TimeoutException as e:
                raise LedgerAPIError(f"Ledger API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise LedgerAPIError(f"Ledger API error: {e.response.status_code}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise LedgerAPIError(f"Invalid balance data from ledger: {e}") from e

    def transfer(self, to: str, amount: int) -> None:
        """Transfer tokens from the yield reserve to one account"""
        self._post_with_retries("/transfers", {"to": to, "amount": amount})

    def transfer_many(self, payouts: Mapping[str, int]) -> None:
        """Transfer tokens from the yield reserve to several accounts in one ledger operation"""
        self._post_with_retries(
            "/transfers/batch",
            {"transfers": [{"to": to, "amount": amount} for to, amount in payouts.items()]},
        )

    def _post_with_retries(self, path: str, payload: dict) -> None:
        """
        POST a transfer request with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^attempt)
        - Retries on HTTP errors and network failures
        - Tracks latency histogram and failure counter

        Raises:
            LedgerAPIError: All retries exhausted
        """
        attempt = 0
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with ledger_latency_histogram.time():
                        response = client.post(f"{self.base_url}{path}", json=payload)
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    ledger_failure_counter.inc()

                    if attempt >= self.max_retries:
                        # Final failure after all retries
                        raise LedgerAPIError(f"Ledger transfer failed after {attempt} attempts: {e}") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    time.sleep(backoff)

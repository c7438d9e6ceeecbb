"""Legacy accounting system client used for one-shot yield state migration"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import httpx

from yield_streamer.config import settings


class LegacyReadError(Enum):
    """Why a legacy read produced no snapshot"""

    REVERTED = "reverted"  # Legacy system rejected the request
    PANIC = "panic"  # Legacy system failed internally
    FAILURE = "failure"  # Transport failure or unreadable response


@dataclass(frozen=True)
class LegacyYieldSnapshot:
    """Account position carried over from the legacy system"""

    accrued_yield: int
    balance: int
    timestamp: int


@dataclass(frozen=True)
class LegacyReadResult:
    """Either a snapshot or a typed error, never both"""

    snapshot: LegacyYieldSnapshot | None = None
    error: LegacyReadError | None = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class LegacySource(Protocol):
    def read_state(self, account: str) -> LegacyReadResult: ...


class LegacyClient:
    """HTTP client for the legacy yield accounting service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url or settings.legacy_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def read_state(self, account: str) -> LegacyReadResult:
        """
        Read an account's legacy position.

        4xx responses map to REVERTED, 5xx to PANIC, network errors and
        malformed payloads to FAILURE. Never raises.
        """
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(f"{self.base_url}/yield-states/{account}")
        except httpx.RequestError as e:
            return LegacyReadResult(error=LegacyReadError.FAILURE, reason=f"Legacy API unreachable: {e}")

        if response.is_client_error:
            return LegacyReadResult(error=LegacyReadError.REVERTED, reason=f"Legacy API rejected: {response.status_code}")
        if response.is_server_error:
            return LegacyReadResult(error=LegacyReadError.PANIC, reason=f"Legacy API error: {response.status_code}")

        try:
            data = response.json()
            snapshot = LegacyYieldSnapshot(
                accrued_yield=int(data["accrued_yield"]),
                balance=int(data["balance"]),
                timestamp=int(data["timestamp"]),
            )
        except (KeyError, ValueError, TypeError) as e:
            return LegacyReadResult(error=LegacyReadError.FAILURE, reason=f"Invalid legacy data: {e}")

        return LegacyReadResult(snapshot=snapshot)

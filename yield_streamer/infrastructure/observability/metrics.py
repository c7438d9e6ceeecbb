"""Prometheus metrics for monitoring accruals, claims and ledger transfers"""

from prometheus_client import Counter, Histogram

# Accrual metrics
accrual_counter = Counter(
    "yield_accrual_commits_total",
    "Accrual commits",
    ["trigger"],  # balance_change | claim | explicit | group_change
)

initialization_counter = Counter(
    "yield_state_initializations_total",
    "Yield state initializations",
    ["source", "outcome"],  # explicit | auto | legacy ; ok | failed | skipped
)

# Claim metrics
claim_counter = Counter(
    "yield_claims_total",
    "Claim requests",
    ["outcome"],  # settled | rejected
)

claimed_amount_counter = Counter(
    "yield_claimed_amount_total",
    "Total yield paid out, fee included",
)

claim_fee_counter = Counter(
    "yield_claim_fees_total",
    "Total fee withheld from claims",
)

claim_amount_bucket_counter = Counter(
    "yield_claim_amount_bucket",
    "Claims by settled amount bucket",
    ["bucket"],  # <10M, 10M-100M, 100M-1B, 1B+
)

# Schedule metrics
schedule_change_counter = Counter(
    "yield_schedule_changes_total",
    "Rate schedule authoring operations",
    ["operation"],  # add | update
)

# Ledger metrics
ledger_latency_histogram = Histogram(
    "ledger_transfer_latency_seconds",
    "Ledger transfer response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

ledger_failure_counter = Counter(
    "ledger_transfer_failures_total",
    "Failed ledger transfer attempts",
)


def record_claim(amount: int, fee: int) -> None:
    """Record settled claim metrics and bucket the claimed amount"""
    claim_counter.labels(outcome="settled").inc()
    claimed_amount_counter.inc(amount)
    claim_fee_counter.inc(fee)

    if amount < 10_000_000:
        bucket = "<10M"
    elif amount < 100_000_000:
        bucket = "10M-100M"
    elif amount < 1_000_000_000:
        bucket = "100M-1B"
    else:
        bucket = "1B+"

    claim_amount_bucket_counter.labels(bucket=bucket).inc()

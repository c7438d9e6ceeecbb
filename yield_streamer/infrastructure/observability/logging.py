"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "yield-streamer"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_accrual(
    account: str,
    trigger: str,
    from_timestamp: int,
    to_timestamp: int,
    accrued_yield: int,
    stream_yield: int,
) -> None:
    """Log structured accrual commit"""
    logging.info(
        "Accrual committed",
        extra={
            "account": account,
            "step": "accrual_commit",
            "trigger": trigger,
            "from_timestamp": from_timestamp,
            "to_timestamp": to_timestamp,
            "accrued_yield": accrued_yield,
            "stream_yield": stream_yield,
        },
    )


def log_claim(
    account: str,
    amount: int,
    fee: int,
    accrued_yield: int,
    stream_yield: int,
    duration_ms: float,
) -> None:
    """Log structured claim outcome for reconciliation"""
    logging.info(
        "Claim settled",
        extra={
            "account": account,
            "step": "claim_complete",
            "amount": amount,
            "fee": fee,
            "net_amount": amount - fee,
            "accrued_yield": accrued_yield,
            "stream_yield": stream_yield,
            "duration_ms": duration_ms,
        },
    )

"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from yield_streamer.domain.constants import (
    ENABLE_YIELD_STATE_AUTO_INITIALIZATION,
    FEE_RATE,
    MIN_CLAIM_AMOUNT,
    NEGATIVE_TIME_SHIFT,
    RATE_FACTOR,
    ROUND_FACTOR,
)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="YIELD_STREAMER_", extra="ignore"
    )

    # Service
    service_name: str = "yield-streamer"
    log_level: str = "INFO"

    # Yield engine
    rate_factor: int = RATE_FACTOR
    round_factor: int = ROUND_FACTOR
    min_claim_amount: int = MIN_CLAIM_AMOUNT
    fee_rate: int = FEE_RATE
    fee_receiver: str | None = None
    negative_time_shift: int = NEGATIVE_TIME_SHIFT
    enable_yield_state_auto_initialization: bool = ENABLE_YIELD_STATE_AUTO_INITIALIZATION
    default_group_id: int = 0

    # External Services
    ledger_api_base: str = "http://localhost:8002"
    legacy_api_base: str = "http://localhost:8003"

    # HTTP Client
    http_timeout_seconds: float = 5.0
    ledger_max_retries: int = 5
    ledger_backoff_base: float = 1.0  # Exponential backoff base in seconds


settings = Settings()

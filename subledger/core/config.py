"""
Application configuration.
All settings are loaded from environment variables.
Use env.example as a reference for the available variables.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The ledger itself (owner, fee, balance) lives in the database; these
    values only seed it on first start and tune the service around it.
    """

    # ===========================================
    # APPLICATION
    # ===========================================
    # CORS: comma-separated list. Empty = default list in main.py.
    cors_origins: str = ""

    # ===========================================
    # DATABASE
    # ===========================================
    database_url: str = "sqlite:///./subledger.db"

    # ===========================================
    # LEDGER BOOTSTRAP
    # ===========================================
    # Identity that owns the ledger created on startup. Empty = do not bootstrap
    # (use scripts/init_ledger.py instead).
    ledger_owner: str = ""
    ledger_initial_fee: int = 1

    # ===========================================
    # SUBSCRIPTIONS
    # ===========================================
    subscription_period_seconds: int = 60
    email_max_length: int = 100
    name_max_length: int = 50

    # ===========================================
    # FEE POLICY
    # ===========================================
    # False = updateSubscriptionFee rejects a zero fee. Negative fees are always rejected.
    fee_policy_allow_zero: bool = True

    # ===========================================
    # CALLER IDENTITY
    # ===========================================
    # Header set by the authenticating gateway in front of the service.
    caller_id_header: str = "X-Caller-Id"

    # ===========================================
    # LOGGING
    # ===========================================
    log_level: str = "INFO"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("ledger_initial_fee")
    @classmethod
    def validate_initial_fee(cls, v: int) -> int:
        """Fee is an amount: never negative, and fits a signed 64-bit column."""
        if v < 0:
            raise ValueError("ledger_initial_fee must be non-negative")
        if v > 2**63 - 1:
            raise ValueError("ledger_initial_fee must fit a signed 64-bit integer")
        return v

    @field_validator("subscription_period_seconds")
    @classmethod
    def validate_period(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("subscription_period_seconds must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper().strip()

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()

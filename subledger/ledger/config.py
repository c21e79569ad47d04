"""
Ledger config: typed wrappers over subledger.core.config.settings.
"""
from __future__ import annotations

from subledger.core.config import settings


def get_subscription_period() -> int:
    return settings.subscription_period_seconds


def get_email_max_length() -> int:
    return settings.email_max_length


def get_name_max_length() -> int:
    return settings.name_max_length


def allow_zero_fee() -> bool:
    return settings.fee_policy_allow_zero

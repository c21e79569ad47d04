"""
Subscriber contact field and fee validation. Pure functions, no I/O.

Lengths are counted in UTF-8 bytes. Checks run in a fixed order and the first
failure wins: email length, first name length, last name length, email format.
"""
from __future__ import annotations

import re

from subledger.ledger.config import get_email_max_length, get_name_max_length
from subledger.ledger.errors import (
    InvalidEmailFormat,
    InvalidEmailLength,
    InvalidFirstNameLength,
    InvalidFee,
    InvalidLastNameLength,
)

# Minimal shape: non-empty local part, one "@", non-empty domain.
EMAIL_PATTERN = re.compile(r"^[^@]+@[^@]+$")

# Amounts (fee, balance, payouts) are stored as signed 64-bit integers.
MAX_AMOUNT = 2**63 - 1


def _byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


def _within(value: str, max_length: int) -> bool:
    return 0 < _byte_length(value) <= max_length


def is_valid_email_format(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


def validate_contact_fields(email: str, first_name: str, last_name: str) -> None:
    """Raise the first matching validation error, or return None if all fields are valid."""
    email_max = get_email_max_length()
    name_max = get_name_max_length()

    if not _within(email, email_max):
        raise InvalidEmailLength(f"Email cannot be empty or exceed {email_max} characters")
    if not _within(first_name, name_max):
        raise InvalidFirstNameLength(f"First name cannot be empty or exceed {name_max} characters")
    if not _within(last_name, name_max):
        raise InvalidLastNameLength(f"Last name cannot be empty or exceed {name_max} characters")
    if not is_valid_email_format(email):
        raise InvalidEmailFormat()


def validate_fee(fee: int) -> None:
    """Fees are non-negative and must fit the 64-bit amount column."""
    if fee < 0:
        raise InvalidFee("Subscription fee cannot be negative")
    if fee > MAX_AMOUNT:
        raise InvalidFee(f"Subscription fee cannot exceed {MAX_AMOUNT}")

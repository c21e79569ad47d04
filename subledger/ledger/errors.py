"""
Ledger error taxonomy. Every error rejects the whole call: nothing is committed.

Each error has a stable code (used by clients and tests) and a human-readable
message. Categories map onto HTTP statuses in subledger.main.
"""
from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    FEE = "fee"
    STATE = "state"
    AUTHORIZATION = "authorization"
    TERMINAL = "terminal"


class LedgerError(Exception):
    """Base class for rejected ledger calls."""

    code: str = "LedgerError"
    category: ErrorCategory = ErrorCategory.STATE
    default_message: str = "Ledger call rejected"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self) -> dict[str, str]:
        return {"error": self.code, "detail": self.message}


# ----- Validation -----


class ValidationError(LedgerError):
    category = ErrorCategory.VALIDATION


class InvalidEmailLength(ValidationError):
    code = "InvalidEmailLength"
    default_message = "Email cannot be empty or exceed 100 characters"


class InvalidFirstNameLength(ValidationError):
    code = "InvalidFirstNameLength"
    default_message = "First name cannot be empty or exceed 50 characters"


class InvalidLastNameLength(ValidationError):
    code = "InvalidLastNameLength"
    default_message = "Last name cannot be empty or exceed 50 characters"


class InvalidEmailFormat(ValidationError):
    code = "InvalidEmailFormat"
    default_message = "Invalid email format"


# ----- Fee -----


class FeeError(LedgerError):
    category = ErrorCategory.FEE


class IncorrectFee(FeeError):
    code = "IncorrectFee"
    default_message = "Incorrect subscription fee"


class InvalidFee(FeeError):
    code = "InvalidFee"
    default_message = "Subscription fee rejected by fee policy"


# ----- State -----


class StateError(LedgerError):
    category = ErrorCategory.STATE


class AlreadySubscribed(StateError):
    code = "AlreadySubscribed"
    default_message = "Already subscribed"


class NotSubscribed(StateError):
    code = "NotSubscribed"
    default_message = "You must have a subscription"


class PaymentNotDue(StateError):
    code = "PaymentNotDue"
    default_message = "Payment not due yet"


class BalanceLimitExceeded(StateError):
    code = "BalanceLimitExceeded"
    default_message = "Ledger balance cannot hold this payment; withdraw funds first"


class LedgerAlreadyInitialized(StateError):
    code = "LedgerAlreadyInitialized"
    default_message = "Ledger already initialized"


class LedgerNotInitialized(StateError):
    code = "LedgerNotInitialized"
    default_message = "Ledger is not initialized"


# ----- Authorization -----


class NotOwner(LedgerError):
    code = "NotOwner"
    category = ErrorCategory.AUTHORIZATION
    default_message = "Only the owner can call this function"


# ----- Terminal -----


class LedgerDestroyed(LedgerError):
    code = "LedgerDestroyed"
    category = ErrorCategory.TERMINAL
    default_message = "Ledger has been destroyed"

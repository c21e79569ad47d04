"""
Subscription ledger core (internal library): validation, owner gate, clock, DTOs, errors.
State transitions live in subledger.services; this package has no I/O.
"""
from subledger.ledger.access import check_owner, require_owner
from subledger.ledger.clock import Clock, ManualClock, SystemClock
from subledger.ledger.errors import LedgerError
from subledger.ledger.models import (
    AuthorizationResult,
    Observation,
    Payment,
    SubscriberRecord,
    Subscribed,
    SubscriptionStatus,
    Unsubscribed,
)
from subledger.ledger.validation import validate_contact_fields

__all__ = [
    "AuthorizationResult",
    "Clock",
    "LedgerError",
    "ManualClock",
    "Observation",
    "Payment",
    "SubscriberRecord",
    "Subscribed",
    "SubscriptionStatus",
    "SystemClock",
    "Unsubscribed",
    "check_owner",
    "require_owner",
    "validate_contact_fields",
]

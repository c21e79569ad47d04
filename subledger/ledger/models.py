"""
Ledger DTOs: subscriber views, observations, authorization result.
Observations publish their fields in a fixed order (args); consumers rely on it.
"""
from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, Field


# ----- Subscriber views -----


class SubscriptionStatus(BaseModel):
    """checkSubscription result. Zero values for identities that never subscribed."""

    is_active: bool = False
    subscription_due: int = 0
    email: str = ""
    first_name: str = ""
    last_name: str = ""

    model_config = {"frozen": True}

    def as_tuple(self) -> tuple[bool, int, str, str, str]:
        return (self.is_active, self.subscription_due, self.email, self.first_name, self.last_name)


class SubscriberRecord(BaseModel):
    """One registry entry as returned by getAllSubscribers."""

    identity: str
    is_subscribed: bool
    subscription_due: int
    email: str
    first_name: str
    last_name: str

    model_config = {"frozen": True, "from_attributes": True}


# ----- Observations -----


class Observation(BaseModel):
    """Completed state change exposed to external watchers."""

    name: ClassVar[str] = ""
    arg_fields: ClassVar[tuple[str, ...]] = ()

    model_config = {"frozen": True}

    @property
    def args(self) -> tuple[Any, ...]:
        return tuple(getattr(self, f) for f in self.arg_fields)

    @property
    def identity(self) -> str:
        return getattr(self, self.arg_fields[0])

    def as_payload(self) -> dict[str, Any]:
        return {"name": self.name, "args": list(self.args)}


class Subscribed(Observation):
    name: ClassVar[str] = "Subscribed"
    arg_fields: ClassVar[tuple[str, ...]] = (
        "subscriber", "subscription_due", "email", "first_name", "last_name",
    )

    subscriber: str
    subscription_due: int
    email: str
    first_name: str
    last_name: str


class Unsubscribed(Observation):
    name: ClassVar[str] = "Unsubscribed"
    arg_fields: ClassVar[tuple[str, ...]] = ("subscriber",)

    subscriber: str


class Payment(Observation):
    name: ClassVar[str] = "Payment"
    arg_fields: ClassVar[tuple[str, ...]] = ("subscriber", "amount", "new_subscription_due")

    subscriber: str
    amount: int
    new_subscription_due: int


# ----- Authorization -----


class AuthorizationResult(BaseModel):
    """Outcome of the owner check: allowed is True only when caller == owner."""

    allowed: bool = Field(..., description="True = caller is the ledger owner")
    caller: str
    owner: str

    model_config = {"frozen": True}


class LoggedObservation(BaseModel):
    """Observation as stored in the ledger event log."""

    seq: int
    emitted_at: int
    name: str
    args: list[Any]

    model_config = {"frozen": True}


# ----- Ledger & custody views -----


class LedgerSummary(BaseModel):
    """Public ledger facts: owner, current fee, held balance."""

    owner: str
    subscription_fee: int
    balance: int
    subscription_period: int

    model_config = {"frozen": True}


class PayoutRecord(BaseModel):
    """Custody transfer to the owner (withdrawal or self-destruct)."""

    id: str | None = None
    recipient: str
    amount: int
    reason: str
    paid_at: int

    model_config = {"frozen": True, "from_attributes": True}

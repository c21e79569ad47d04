from typing import Any

from pydantic import BaseModel


class LedgerOut(BaseModel):
    owner: str
    subscription_fee: int
    balance: int
    subscription_period: int


class IsOwnerOut(BaseModel):
    identity: str
    is_owner: bool


class LoggedObservationOut(BaseModel):
    seq: int
    emitted_at: int
    name: str
    args: list[Any]


class FeeUpdateIn(BaseModel):
    subscription_fee: int


class FeeOut(BaseModel):
    subscription_fee: int


class PayoutOut(BaseModel):
    id: str | None = None
    recipient: str
    amount: int
    reason: str
    paid_at: int

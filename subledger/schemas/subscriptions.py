from typing import Any

from pydantic import BaseModel, ConfigDict

from subledger.ledger.models import Observation


class SubscribeIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str
    first_name: str
    last_name: str
    # Attached payment; must equal the current fee exactly (checked by the ledger, not here).
    amount: int


class PaymentIn(BaseModel):
    amount: int


class ObservationOut(BaseModel):
    name: str
    args: list[Any]


class CallResultOut(BaseModel):
    observations: list[ObservationOut]

    @classmethod
    def from_observations(cls, observations: list[Observation]) -> "CallResultOut":
        return cls(observations=[ObservationOut(**o.as_payload()) for o in observations])


class SubscriptionOut(BaseModel):
    is_active: bool
    subscription_due: int
    email: str
    first_name: str
    last_name: str


class SubscriberOut(BaseModel):
    identity: str
    is_subscribed: bool
    subscription_due: int
    email: str
    first_name: str
    last_name: str


class ActiveOut(BaseModel):
    identity: str
    is_subscribed: bool

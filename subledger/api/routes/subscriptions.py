from fastapi import APIRouter, Depends

from subledger.api.deps import get_caller, get_subscription_service
from subledger.schemas.subscriptions import (
    ActiveOut,
    CallResultOut,
    PaymentIn,
    SubscribeIn,
    SubscriptionOut,
)
from subledger.services.subscriptions.service import SubscriptionService


router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("", response_model=CallResultOut, status_code=201)
def subscribe(
    payload: SubscribeIn,
    caller: str = Depends(get_caller),
    service: SubscriptionService = Depends(get_subscription_service),
) -> CallResultOut:
    observations = service.subscribe(
        caller,
        payload.email,
        payload.first_name,
        payload.last_name,
        payload.amount,
    )
    return CallResultOut.from_observations(observations)


@router.delete("/me", response_model=CallResultOut)
def unsubscribe(
    caller: str = Depends(get_caller),
    service: SubscriptionService = Depends(get_subscription_service),
) -> CallResultOut:
    return CallResultOut.from_observations(service.unsubscribe(caller))


@router.post("/me/payments", response_model=CallResultOut)
def make_payment(
    payload: PaymentIn,
    caller: str = Depends(get_caller),
    service: SubscriptionService = Depends(get_subscription_service),
) -> CallResultOut:
    return CallResultOut.from_observations(service.make_payment(caller, payload.amount))


@router.get("/{identity}", response_model=SubscriptionOut)
def check_subscription(
    identity: str,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionOut:
    status = service.check_subscription(identity)
    return SubscriptionOut(**status.model_dump())


@router.get("/{identity}/active", response_model=ActiveOut)
def is_subscribed_user(
    identity: str,
    service: SubscriptionService = Depends(get_subscription_service),
) -> ActiveOut:
    return ActiveOut(identity=identity, is_subscribed=service.is_subscribed_user(identity))

"""
Admin API: owner-only ledger controls. The owner check itself happens inside
the ledger call, so a non-owner request is rejected with NotOwner (403).
"""
from fastapi import APIRouter, Depends, Query

from subledger.api.deps import get_caller, get_custody_service, get_subscription_service
from subledger.schemas.ledger import FeeOut, FeeUpdateIn, PayoutOut
from subledger.schemas.subscriptions import SubscriberOut
from subledger.services.custody.service import CustodyService
from subledger.services.subscriptions.service import SubscriptionService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/subscribers", response_model=list[SubscriberOut])
def get_all_subscribers(
    caller: str = Depends(get_caller),
    service: SubscriptionService = Depends(get_subscription_service),
) -> list[SubscriberOut]:
    return [SubscriberOut(**r.model_dump()) for r in service.get_all_subscribers(caller)]


@router.put("/fee", response_model=FeeOut)
def update_subscription_fee(
    payload: FeeUpdateIn,
    caller: str = Depends(get_caller),
    service: CustodyService = Depends(get_custody_service),
) -> FeeOut:
    return FeeOut(subscription_fee=service.update_subscription_fee(caller, payload.subscription_fee))


@router.post("/withdrawals", response_model=PayoutOut)
def withdraw_funds(
    caller: str = Depends(get_caller),
    service: CustodyService = Depends(get_custody_service),
) -> PayoutOut:
    return PayoutOut(**service.withdraw_funds(caller).model_dump())


@router.post("/self-destruct", response_model=PayoutOut)
def self_destruct(
    caller: str = Depends(get_caller),
    service: CustodyService = Depends(get_custody_service),
) -> PayoutOut:
    return PayoutOut(**service.self_destruct(caller).model_dump())


@router.get("/payouts", response_model=list[PayoutOut])
def list_payouts(
    limit: int = Query(100, ge=1, le=1000),
    caller: str = Depends(get_caller),
    service: CustodyService = Depends(get_custody_service),
) -> list[PayoutOut]:
    return [PayoutOut(**p.model_dump()) for p in service.list_payouts(caller, limit=limit)]

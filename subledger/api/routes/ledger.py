from fastapi import APIRouter, Depends, Query

from subledger.api.deps import get_caller, get_custody_service, get_subscription_service
from subledger.schemas.ledger import IsOwnerOut, LedgerOut, LoggedObservationOut
from subledger.services.custody.service import CustodyService
from subledger.services.subscriptions.service import SubscriptionService


router = APIRouter(prefix="/ledger", tags=["ledger"])


@router.get("", response_model=LedgerOut)
def ledger_summary(service: CustodyService = Depends(get_custody_service)) -> LedgerOut:
    return LedgerOut(**service.ledger_summary().model_dump())


@router.get("/is-owner", response_model=IsOwnerOut)
def is_owner(
    caller: str = Depends(get_caller),
    service: CustodyService = Depends(get_custody_service),
) -> IsOwnerOut:
    return IsOwnerOut(identity=caller, is_owner=service.is_owner(caller))


@router.get("/events", response_model=list[LoggedObservationOut])
def list_events(
    identity: str | None = Query(None),
    after_seq: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    service: SubscriptionService = Depends(get_subscription_service),
) -> list[LoggedObservationOut]:
    events = service.list_observations(identity=identity, after_seq=after_seq, limit=limit)
    return [LoggedObservationOut(**e.model_dump()) for e in events]

"""
Request-scoped dependencies: caller identity, ledger clock, services.
The gateway in front of the service authenticates callers and sets the caller header.
"""
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from subledger.core.config import settings
from subledger.db.session import get_db
from subledger.ledger.clock import Clock, system_clock
from subledger.services.custody.service import CustodyService
from subledger.services.subscriptions.service import SubscriptionService

def get_caller(caller_id: str | None = Header(None, alias=settings.caller_id_header)) -> str:
    caller = (caller_id or "").strip()
    if not caller:
        raise HTTPException(status_code=401, detail="Caller identity required")
    return caller


def get_clock() -> Clock:
    return system_clock


def get_subscription_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> SubscriptionService:
    return SubscriptionService(db, clock)


def get_custody_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> CustodyService:
    return CustodyService(db, clock)

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.orm import Session

from subledger.db.session import get_db
from subledger.services.ledger_state.service import LedgerStateService


router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Liveness probe - always returns 200 if app is running."""
    return {"status": "ok"}


@router.get("/ready")
def readiness(response: Response, db: Session = Depends(get_db)) -> dict:
    """Readiness probe - returns 503 if the database is unavailable or the ledger is missing."""
    try:
        db.execute(text("SELECT 1"))
        state = LedgerStateService(db).get()
    except Exception as e:
        response.status_code = 503
        return {"status": "not_ready", "error": str(e)}
    if state is None:
        response.status_code = 503
        return {"status": "not_ready", "error": "ledger not initialized"}
    if state.destroyed:
        response.status_code = 503
        return {"status": "destroyed"}
    return {"status": "ready"}

"""
Main FastAPI application for the subscription ledger.
Serves subscriptions, ledger views, owner admin, health and metrics.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from subledger.core.config import settings
from subledger.core.logging import configure_logging
from subledger.api.routes import admin, health, ledger, subscriptions
from subledger.db.session import SessionLocal, init_db
from subledger.ledger.errors import ErrorCategory, LedgerError, LedgerNotInitialized
from subledger.services.ledger_state.service import LedgerStateService
from subledger.utils.metrics import router as metrics_router

logger = logging.getLogger(__name__)

STATUS_BY_CATEGORY = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.FEE: 400,
    ErrorCategory.STATE: 409,
    ErrorCategory.AUTHORIZATION: 403,
    ErrorCategory.TERMINAL: 410,
}


def error_status(exc: LedgerError) -> int:
    if isinstance(exc, LedgerNotInitialized):
        return 503
    return STATUS_BY_CATEGORY.get(exc.category, 400)


def bootstrap_ledger() -> None:
    """Create tables and, when LEDGER_OWNER is set, the ledger itself."""
    init_db()
    if not settings.ledger_owner:
        logger.info("ledger_bootstrap_skipped", extra={"reason": "ledger_owner not set"})
        return
    db = SessionLocal()
    try:
        LedgerStateService(db).ensure_initialized(settings.ledger_owner, settings.ledger_initial_fee)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    bootstrap_ledger()
    yield


app = FastAPI(
    title="Subscription Ledger API",
    description="Recurring-fee subscription registry with owner-controlled custody",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
if not origins:
    origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    return JSONResponse(status_code=error_status(exc), content=exc.as_dict())


# Routers
app.include_router(health.router, tags=["health"])
app.include_router(subscriptions.router)
app.include_router(ledger.router)
app.include_router(admin.router)
app.include_router(metrics_router)

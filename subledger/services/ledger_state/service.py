"""
LedgerStateService: creation and locking of the single ledger state row.

Responsibilities:
- initialize(owner, fee): create the ledger exactly once
- load(lock=...): fetch the state row (FOR UPDATE for writes)
- ensure_initialized: startup bootstrap from settings
"""
import logging

from sqlalchemy.orm import Session

from subledger.ledger.errors import LedgerAlreadyInitialized, LedgerNotInitialized
from subledger.ledger.validation import validate_fee
from subledger.models.ledger_state import LEDGER_STATE_ID, LedgerState
from subledger.services.audit.service import AuditService

logger = logging.getLogger(__name__)


class LedgerStateService:
    def __init__(self, db: Session):
        self.db = db

    def get(self) -> LedgerState | None:
        return self.db.query(LedgerState).filter(LedgerState.id == LEDGER_STATE_ID).one_or_none()

    def load(self, lock: bool = True) -> LedgerState:
        """Return the ledger state; lock=True takes a row lock for the rest of the transaction."""
        query = self.db.query(LedgerState).filter(LedgerState.id == LEDGER_STATE_ID)
        if lock:
            query = query.with_for_update()
        state = query.one_or_none()
        if state is None:
            raise LedgerNotInitialized()
        return state

    def initialize(self, owner: str, subscription_fee: int) -> LedgerState:
        """Create the ledger with a fixed owner and initial fee. Fails if it already exists."""
        if not owner:
            raise ValueError("owner identity is required")
        validate_fee(subscription_fee)
        if self.get() is not None:
            raise LedgerAlreadyInitialized()

        state = LedgerState(
            id=LEDGER_STATE_ID,
            owner=owner,
            subscription_fee=subscription_fee,
            balance=0,
            enrolled_count=0,
            destroyed=False,
        )
        self.db.add(state)
        self.db.flush()
        AuditService(self.db).log(
            actor_id=owner,
            action="ledger_initialized",
            entity_type="ledger",
            entity_id=str(LEDGER_STATE_ID),
            payload={"subscription_fee": subscription_fee},
        )
        self.db.commit()
        logger.info("ledger_initialized", extra={"owner": owner, "fee": subscription_fee})
        return state

    def ensure_initialized(self, owner: str, subscription_fee: int) -> bool:
        """Create the ledger if missing. Returns True if it was created now."""
        existing = self.get()
        if existing is not None:
            if existing.owner != owner:
                logger.warning(
                    "ledger_owner_mismatch",
                    extra={"owner": existing.owner, "identity": owner},
                )
            return False
        self.initialize(owner, subscription_fee)
        return True

"""
CustodyService: subscription fee, held balance, payouts to the owner, self-destruct.

All mutating calls are owner-only. A payout moves the entire balance and zeroes
it in the same transaction; there is no partial withdrawal.
"""
import logging
from datetime import datetime, timezone

from subledger.ledger.access import check_owner, require_owner
from subledger.ledger.config import allow_zero_fee, get_subscription_period
from subledger.ledger.errors import InvalidFee
from subledger.ledger.models import LedgerSummary, PayoutRecord
from subledger.ledger.validation import validate_fee
from subledger.models.ledger_state import LedgerState
from subledger.models.payout import Payout
from subledger.services.audit.service import AuditService
from subledger.services.ledger_state.dispatch import LedgerCallService, ledger_call
from subledger.utils.metrics import ledger_balance, ledger_funds_paid_out_total

logger = logging.getLogger(__name__)

PAYOUT_WITHDRAWAL = "withdrawal"
PAYOUT_SELF_DESTRUCT = "self_destruct"


class CustodyService(LedgerCallService):
    def __init__(self, db, clock=None):
        super().__init__(db, clock)
        self.audit = AuditService(db)

    def _pay_out_balance(self, state: LedgerState, reason: str) -> PayoutRecord:
        """Transfer the whole balance to the owner and zero it."""
        amount = state.balance
        now = self.clock.now()
        state.balance = 0

        payout_id = None
        if amount > 0:
            payout = Payout(recipient=state.owner, amount=amount, reason=reason, paid_at=now)
            self.db.add(payout)
            self.db.flush()
            payout_id = payout.id

        def _publish() -> None:
            ledger_funds_paid_out_total.labels(reason=reason).inc(amount)
            ledger_balance.set(0)

        self.after_commit(_publish)
        logger.info(
            "funds_paid_out",
            extra={"owner": state.owner, "amount": amount, "reason": reason, "payout_id": payout_id},
        )
        return PayoutRecord(id=payout_id, recipient=state.owner, amount=amount, reason=reason, paid_at=now)

    # ------------------------------------------------------------------
    # Owner operations
    # ------------------------------------------------------------------

    @ledger_call("update_subscription_fee")
    def update_subscription_fee(self, state: LedgerState, caller: str, new_fee: int) -> int:
        require_owner(state.owner, caller, "update_subscription_fee")
        validate_fee(new_fee)
        if new_fee == 0 and not allow_zero_fee():
            raise InvalidFee("Subscription fee must be greater than zero")

        old_fee = state.subscription_fee
        state.subscription_fee = new_fee
        self.audit.log(
            actor_id=caller,
            action="subscription_fee_updated",
            entity_type="ledger",
            entity_id=str(state.id),
            payload={"old_fee": old_fee, "new_fee": new_fee},
        )
        logger.info("subscription_fee_updated", extra={"old_fee": old_fee, "new_fee": new_fee})
        return new_fee

    @ledger_call("withdraw_funds")
    def withdraw_funds(self, state: LedgerState, caller: str) -> PayoutRecord:
        require_owner(state.owner, caller, "withdraw_funds")
        payout = self._pay_out_balance(state, PAYOUT_WITHDRAWAL)
        self.audit.log(
            actor_id=caller,
            action="funds_withdrawn",
            entity_type="ledger",
            entity_id=str(state.id),
            payload={"amount": payout.amount, "payout_id": payout.id},
        )
        return payout

    @ledger_call("self_destruct")
    def self_destruct(self, state: LedgerState, caller: str) -> PayoutRecord:
        require_owner(state.owner, caller, "self_destruct")
        payout = self._pay_out_balance(state, PAYOUT_SELF_DESTRUCT)
        state.destroyed = True
        state.destroyed_at = datetime.now(timezone.utc)
        self.audit.log(
            actor_id=caller,
            action="ledger_destroyed",
            entity_type="ledger",
            entity_id=str(state.id),
            payload={"amount": payout.amount, "payout_id": payout.id},
        )
        logger.warning("ledger_destroyed", extra={"owner": state.owner, "amount": payout.amount})
        return payout

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @ledger_call("ledger_summary", write=False)
    def ledger_summary(self, state: LedgerState) -> LedgerSummary:
        return LedgerSummary(
            owner=state.owner,
            subscription_fee=state.subscription_fee,
            balance=state.balance,
            subscription_period=get_subscription_period(),
        )

    @ledger_call("is_owner", write=False)
    def is_owner(self, state: LedgerState, caller: str) -> bool:
        return check_owner(state.owner, caller).allowed

    @ledger_call("list_payouts", write=False)
    def list_payouts(self, state: LedgerState, caller: str, limit: int = 100) -> list[PayoutRecord]:
        require_owner(state.owner, caller, "list_payouts")
        rows = self.db.query(Payout).order_by(Payout.paid_at, Payout.created_at).limit(limit).all()
        return [PayoutRecord.model_validate(row) for row in rows]

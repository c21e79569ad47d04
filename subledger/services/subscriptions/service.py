"""
SubscriptionService: registry and the subscribe / unsubscribe / payment state machine.

Every public method is one ledger call (see services/ledger_state/dispatch.py).
Fees must match exactly; due dates are reset from the current clock, never
accumulated from the previous due date.
"""
import logging

from subledger.ledger.access import require_owner
from subledger.ledger.config import get_subscription_period
from subledger.ledger.errors import (
    AlreadySubscribed,
    BalanceLimitExceeded,
    IncorrectFee,
    NotSubscribed,
    PaymentNotDue,
)
from subledger.ledger.models import (
    LoggedObservation,
    Observation,
    Payment,
    SubscriberRecord,
    Subscribed,
    SubscriptionStatus,
    Unsubscribed,
)
from subledger.ledger.validation import MAX_AMOUNT, validate_contact_fields
from subledger.models.ledger_state import LedgerState
from subledger.models.subscriber import Subscriber
from subledger.services.events.service import EventService
from subledger.services.ledger_state.dispatch import LedgerCallService, ledger_call
from subledger.utils.metrics import ledger_balance, ledger_payments_received_total

logger = logging.getLogger(__name__)


class SubscriptionService(LedgerCallService):
    def __init__(self, db, clock=None):
        super().__init__(db, clock)
        self.events = EventService(db)

    def _get_record(self, identity: str) -> Subscriber | None:
        return self.db.query(Subscriber).filter(Subscriber.identity == identity).one_or_none()

    def _credit(self, state: LedgerState, amount: int, kind: str) -> None:
        if state.balance + amount > MAX_AMOUNT:
            raise BalanceLimitExceeded()
        # Increment in SQL so the write never depends on a stale in-memory balance.
        state.balance = LedgerState.balance + amount
        self.db.flush()
        new_balance = state.balance

        def _publish() -> None:
            ledger_payments_received_total.labels(kind=kind).inc(amount)
            ledger_balance.set(new_balance)

        self.after_commit(_publish)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    @ledger_call("subscribe")
    def subscribe(
        self,
        state: LedgerState,
        caller: str,
        email: str,
        first_name: str,
        last_name: str,
        amount: int,
    ) -> list[Observation]:
        validate_contact_fields(email, first_name, last_name)
        if amount != state.subscription_fee:
            raise IncorrectFee()

        record = self._get_record(caller)
        if record is not None and record.is_subscribed:
            raise AlreadySubscribed()

        now = self.clock.now()
        due = now + get_subscription_period()

        if record is None:
            # First subscription: the identity joins the enumeration order once, for good.
            record = Subscriber(identity=caller, position=state.enrolled_count)
            state.enrolled_count += 1
            self.db.add(record)

        record.is_subscribed = True
        record.subscription_due = due
        record.email = email
        record.first_name = first_name
        record.last_name = last_name
        self._credit(state, amount, kind="subscribe")
        self.db.flush()

        observation = self.events.emit(
            Subscribed(
                subscriber=caller,
                subscription_due=due,
                email=email,
                first_name=first_name,
                last_name=last_name,
            ),
            now,
        )
        logger.info(
            "subscribed",
            extra={"identity": caller, "amount": amount, "subscription_due": due, "balance": state.balance},
        )
        return [observation]

    @ledger_call("unsubscribe")
    def unsubscribe(self, state: LedgerState, caller: str) -> list[Observation]:
        record = self._get_record(caller)
        if record is None or not record.is_subscribed:
            raise NotSubscribed("You must have a subscription to unsubscribe")

        # Due date and contact fields stay as they were; no refund.
        record.is_subscribed = False
        self.db.flush()

        observation = self.events.emit(Unsubscribed(subscriber=caller), self.clock.now())
        logger.info("unsubscribed", extra={"identity": caller})
        return [observation]

    @ledger_call("make_payment")
    def make_payment(self, state: LedgerState, caller: str, amount: int) -> list[Observation]:
        record = self._get_record(caller)
        if record is None or not record.is_subscribed:
            raise NotSubscribed("You must have a subscription to make a payment")

        now = self.clock.now()
        if now < record.subscription_due:
            raise PaymentNotDue()
        if amount != state.subscription_fee:
            raise IncorrectFee()

        new_due = now + get_subscription_period()
        record.subscription_due = new_due
        self._credit(state, amount, kind="payment")
        self.db.flush()

        observation = self.events.emit(
            Payment(subscriber=caller, amount=amount, new_subscription_due=new_due),
            now,
        )
        logger.info(
            "payment_received",
            extra={"identity": caller, "amount": amount, "subscription_due": new_due, "now": now},
        )
        return [observation]

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @ledger_call("check_subscription", write=False)
    def check_subscription(self, state: LedgerState, identity: str) -> SubscriptionStatus:
        record = self._get_record(identity)
        if record is None:
            return SubscriptionStatus()
        return SubscriptionStatus(
            is_active=record.is_subscribed,
            subscription_due=record.subscription_due,
            email=record.email,
            first_name=record.first_name,
            last_name=record.last_name,
        )

    @ledger_call("is_subscribed_user", write=False)
    def is_subscribed_user(self, state: LedgerState, identity: str) -> bool:
        record = self._get_record(identity)
        return bool(record is not None and record.is_subscribed)

    @ledger_call("get_all_subscribers", write=False)
    def get_all_subscribers(self, state: LedgerState, caller: str) -> list[SubscriberRecord]:
        require_owner(state.owner, caller, "get_all_subscribers")
        rows = self.db.query(Subscriber).order_by(Subscriber.position).all()
        return [SubscriberRecord.model_validate(row) for row in rows]

    @ledger_call("list_observations", write=False)
    def list_observations(
        self,
        state: LedgerState,
        identity: str | None = None,
        after_seq: int = 0,
        limit: int = 100,
    ) -> list[LoggedObservation]:
        return self.events.list_events(identity=identity, after_seq=after_seq, limit=limit)

"""Tests for ledger creation and the dispatch wrapper (atomicity, metrics, terminal state)."""
from unittest.mock import patch

import pytest
from prometheus_client import REGISTRY

from conftest import ALICE, FEE, OWNER
from subledger.ledger.errors import (
    IncorrectFee,
    InvalidFee,
    LedgerAlreadyInitialized,
    LedgerNotInitialized,
)
from subledger.models.audit_log import AuditLog
from subledger.models.ledger_event import LedgerEvent
from subledger.models.ledger_state import LedgerState
from subledger.models.subscriber import Subscriber
from subledger.services.ledger_state.service import LedgerStateService
from subledger.services.subscriptions.service import SubscriptionService


def _ops(operation, outcome):
    return REGISTRY.get_sample_value(
        "ledger_operations_total", {"operation": operation, "outcome": outcome}
    ) or 0.0


class TestInitialize:
    def test_initialize_once(self, db):
        state = LedgerStateService(db).initialize(OWNER, FEE)
        assert (state.owner, state.subscription_fee, state.balance, state.destroyed) == (OWNER, FEE, 0, False)
        assert db.query(AuditLog).filter(AuditLog.action == "ledger_initialized").count() == 1

    def test_initialize_twice_rejected(self, db, ledger):
        with pytest.raises(LedgerAlreadyInitialized):
            LedgerStateService(db).initialize("0xother", 5)
        assert db.query(LedgerState).one().owner == OWNER

    def test_negative_initial_fee_rejected(self, db):
        with pytest.raises(InvalidFee):
            LedgerStateService(db).initialize(OWNER, -1)

    def test_initial_fee_above_64_bit_range_rejected(self, db):
        with pytest.raises(InvalidFee):
            LedgerStateService(db).initialize(OWNER, 2**64)
        assert LedgerStateService(db).get() is None

    def test_owner_required(self, db):
        with pytest.raises(ValueError):
            LedgerStateService(db).initialize("", FEE)

    def test_ensure_initialized(self, db):
        service = LedgerStateService(db)
        assert service.ensure_initialized(OWNER, FEE) is True
        assert service.ensure_initialized(OWNER, FEE) is False
        assert service.ensure_initialized("0xsomeone", 1) is False
        assert db.query(LedgerState).one().owner == OWNER

    def test_calls_before_initialize_fail(self, db, clock):
        service = SubscriptionService(db, clock)
        with pytest.raises(LedgerNotInitialized):
            service.check_subscription(ALICE)


class TestAtomicity:
    def test_error_after_writes_rolls_back(self, db, clock, ledger):
        """A failure late in the call leaves no record, no balance change, no observation."""
        service = SubscriptionService(db, clock)
        with patch.object(service.events, "emit", side_effect=RuntimeError("log unavailable")):
            with pytest.raises(RuntimeError):
                service.subscribe(ALICE, "a@example.com", "A", "B", FEE)
        db.expire_all()
        assert db.query(Subscriber).count() == 0
        assert db.query(LedgerEvent).count() == 0
        state = db.query(LedgerState).one()
        assert (state.balance, state.enrolled_count) == (0, 0)

    def test_changes_visible_to_other_sessions_after_commit(self, session_factory, clock, ledger):
        writer = session_factory()
        reader = session_factory()
        try:
            SubscriptionService(writer, clock).subscribe(ALICE, "a@example.com", "A", "B", FEE)
            assert SubscriptionService(reader, clock).is_subscribed_user(ALICE) is True
        finally:
            writer.close()
            reader.close()


class TestMetrics:
    def test_outcomes_counted(self, db, clock, ledger):
        service = SubscriptionService(db, clock)
        ok_before = _ops("subscribe", "ok")
        fee_before = _ops("subscribe", "IncorrectFee")
        received_before = REGISTRY.get_sample_value(
            "ledger_payments_received_total", {"kind": "subscribe"}
        ) or 0.0

        with pytest.raises(IncorrectFee):
            service.subscribe(ALICE, "a@example.com", "A", "B", 1)
        service.subscribe(ALICE, "a@example.com", "A", "B", FEE)

        assert _ops("subscribe", "ok") == ok_before + 1
        assert _ops("subscribe", "IncorrectFee") == fee_before + 1
        assert REGISTRY.get_sample_value(
            "ledger_payments_received_total", {"kind": "subscribe"}
        ) == received_before + FEE
        assert REGISTRY.get_sample_value("ledger_balance") == FEE

    def test_rejected_call_publishes_nothing(self, db, clock, ledger):
        service = SubscriptionService(db, clock)
        received_before = REGISTRY.get_sample_value(
            "ledger_payments_received_total", {"kind": "subscribe"}
        ) or 0.0
        with patch.object(service.events, "emit", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                service.subscribe(ALICE, "a@example.com", "A", "B", FEE)
        assert (
            REGISTRY.get_sample_value("ledger_payments_received_total", {"kind": "subscribe"}) or 0.0
        ) == received_before

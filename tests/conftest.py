"""Shared fixtures: isolated file-backed SQLite ledger per test, manual clock."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from subledger.db.base import Base
from subledger.db.session import SQLITE_BUSY_TIMEOUT_SECONDS, configure_sqlite_engine
from subledger.ledger.clock import ManualClock
from subledger.models import audit_log, ledger_event, ledger_state, payout, subscriber  # noqa: F401
from subledger.services.ledger_state.service import LedgerStateService

OWNER = "0xowner"
ALICE = "0xalice"
BOB = "0xbob"
FEE = 10**18
START = 1_700_000_000


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ledger.db'}",
        connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT_SECONDS},
    )
    configure_sqlite_engine(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return ManualClock(START)


@pytest.fixture
def ledger(db):
    return LedgerStateService(db).initialize(OWNER, FEE)

"""
LedgerState: the single row holding owner, fee, custody balance and the
terminal destroyed flag. Every ledger call locks this row first.
"""
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, String

from subledger.db.base import Base

LEDGER_STATE_ID = 1


class LedgerState(Base):
    __tablename__ = "ledger_state"

    id = Column(Integer, primary_key=True, default=LEDGER_STATE_ID)
    owner = Column(String, nullable=False)                      # fixed at creation
    subscription_fee = Column(BigInteger, nullable=False)
    balance = Column(BigInteger, nullable=False, default=0)     # payments received minus payouts
    enrolled_count = Column(Integer, nullable=False, default=0)  # identities ever subscribed
    destroyed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    destroyed_at = Column(DateTime(timezone=True), nullable=True)

"""
LedgerEvent: append-only log of observations (Subscribed / Unsubscribed / Payment).
args keeps the observation fields in their published order.
"""
from datetime import datetime, timezone

from sqlalchemy import JSON, BigInteger, Column, DateTime, Integer, String

from subledger.db.base import Base


class LedgerEvent(Base):
    __tablename__ = "ledger_events"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    identity = Column(String, nullable=False, index=True)
    args = Column(JSON, nullable=False)
    emitted_at = Column(BigInteger, nullable=False)  # ledger clock at emission
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

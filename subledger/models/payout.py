"""
Payout: custody transfer of the ledger balance to the owner.
reason: withdrawal / self_destruct.
"""
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import BigInteger, Column, DateTime, String

from subledger.db.base import Base


class Payout(Base):
    __tablename__ = "payouts"

    id = Column(String, primary_key=True, default=lambda: str(uuid4()))
    recipient = Column(String, nullable=False, index=True)
    amount = Column(BigInteger, nullable=False)
    reason = Column(String, nullable=False)       # withdrawal / self_destruct
    paid_at = Column(BigInteger, nullable=False)  # ledger clock
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, String

from subledger.db.base import Base


class Subscriber(Base):
    __tablename__ = "subscribers"

    identity = Column(String, primary_key=True)
    # Order of first subscription; assigned once, never reassigned on re-subscribe.
    position = Column(Integer, nullable=False, unique=True, index=True)
    is_subscribed = Column(Boolean, nullable=False, default=False)
    subscription_due = Column(BigInteger, nullable=False, default=0)  # ledger clock units
    # Contact fields are kept after unsubscribe until the next subscribe overwrites them.
    email = Column(String, nullable=False, default="")
    first_name = Column(String, nullable=False, default="")
    last_name = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

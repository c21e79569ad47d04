import logging

from sqlalchemy.orm import Session

from subledger.ledger.models import LoggedObservation, Observation
from subledger.models.ledger_event import LedgerEvent

logger = logging.getLogger(__name__)


class EventService:
    """Append-only observation log. emit() joins the caller's transaction."""

    def __init__(self, db: Session):
        self.db = db

    def emit(self, observation: Observation, now: int) -> Observation:
        event = LedgerEvent(
            name=observation.name,
            identity=observation.identity,
            args=list(observation.args),
            emitted_at=now,
        )
        self.db.add(event)
        self.db.flush()
        logger.info(
            "observation_emitted",
            extra={"operation": observation.name, "identity": observation.identity},
        )
        return observation

    def list_events(
        self,
        identity: str | None = None,
        after_seq: int = 0,
        limit: int = 100,
    ) -> list[LoggedObservation]:
        query = self.db.query(LedgerEvent).filter(LedgerEvent.seq > after_seq)
        if identity is not None:
            query = query.filter(LedgerEvent.identity == identity)
        rows = query.order_by(LedgerEvent.seq).limit(limit).all()
        return [
            LoggedObservation(seq=row.seq, emitted_at=row.emitted_at, name=row.name, args=list(row.args))
            for row in rows
        ]

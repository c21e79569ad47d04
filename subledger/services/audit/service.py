from typing import Any

from sqlalchemy.orm import Session

from subledger.models.audit_log import AuditLog


class AuditService:
    """Administrative audit trail. Writes join the caller's transaction (flush, no commit)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def log(
        self,
        actor_id: str,
        action: str,
        entity_type: str,
        entity_id: str | None,
        payload: dict[str, Any] | None = None,
    ) -> AuditLog:
        entry = AuditLog(
            actor_id=actor_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            payload=payload or {},
        )
        self.db.add(entry)
        self.db.flush()
        return entry

"""
Dispatch wrapper for ledger calls.

Every public ledger operation is wrapped by ledger_call: it loads the state row
(locked for writes), short-circuits with LedgerDestroyed once the ledger is
destroyed, commits on success and rolls back on any error, so a rejected call
leaves no trace. Metric updates queued by the call run only after commit.
"""
import functools
import logging
from typing import Any, Callable

from sqlalchemy.orm import Session

from subledger.ledger.clock import Clock, system_clock
from subledger.ledger.errors import LedgerDestroyed, LedgerError
from subledger.services.ledger_state.service import LedgerStateService
from subledger.utils.metrics import ledger_operations_total

logger = logging.getLogger(__name__)


class LedgerCallService:
    """Base for services whose public methods are ledger calls."""

    def __init__(self, db: Session, clock: Clock | None = None):
        self.db = db
        self.clock = clock or system_clock
        self.state_service = LedgerStateService(db)
        self._after_commit: list[Callable[[], None]] = []

    def after_commit(self, hook: Callable[[], None]) -> None:
        self._after_commit.append(hook)


def ledger_call(operation: str, write: bool = True):
    """Wrap a LedgerCallService method as one atomic ledger call.

    The wrapped method receives the loaded LedgerState as its first argument
    after self.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(self: LedgerCallService, *args: Any, **kwargs: Any) -> Any:
            self._after_commit = []
            try:
                state = self.state_service.load(lock=write)
                if state.destroyed:
                    raise LedgerDestroyed()
                result = func(self, state, *args, **kwargs)
                self.db.commit()
            except LedgerError as exc:
                self.db.rollback()
                ledger_operations_total.labels(operation=operation, outcome=exc.code).inc()
                logger.info(
                    "ledger_call_rejected",
                    extra={"operation": operation, "error": exc.code},
                )
                raise
            except Exception:
                self.db.rollback()
                ledger_operations_total.labels(operation=operation, outcome="internal_error").inc()
                logger.exception("ledger_call_failed", extra={"operation": operation})
                raise

            hooks, self._after_commit = self._after_commit, []
            for hook in hooks:
                hook()
            ledger_operations_total.labels(operation=operation, outcome="ok").inc()
            return result

        return wrapper

    return decorator

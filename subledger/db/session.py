from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from subledger.core.config import settings

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def _engine_kwargs(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        # Requests are served from a threadpool; SQLite connections must be shareable.
        return {"connect_args": {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT_SECONDS}}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 1800,  # recycle connections every 30 min (avoid stale)
        "connect_args": {"connect_timeout": 5},
    }


def configure_sqlite_engine(engine: Engine) -> Engine:
    """Start every SQLite transaction with BEGIN IMMEDIATE.

    SQLite has no SELECT ... FOR UPDATE; taking the write lock at BEGIN
    serializes ledger calls the way the row lock does on PostgreSQL.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        # pysqlite would otherwise emit its own deferred BEGIN at the first write.
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))
if settings.is_sqlite:
    configure_sqlite_engine(engine)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db() -> None:
    """Create ledger tables if they do not exist yet."""
    # Models must be imported so they register on Base.metadata.
    from subledger.db.base import Base
    from subledger.models import audit_log, ledger_event, ledger_state, payout, subscriber  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

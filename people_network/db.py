"""SQLAlchemy engine, session factory and schema initialisation."""
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .config import settings
from .models import Base

logger = logging.getLogger(__name__)


def _set_sqlite_pragmas(dbapi_conn, _record):
    # ON DELETE CASCADE is inert in SQLite unless foreign keys are switched on
    # for every connection.
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _set_wal(dbapi_conn, _record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def install_sqlite_pragmas(engine: Engine) -> Engine:
    """Register the connect-time pragmas on a SQLite engine. No-op otherwise."""
    url = engine.url
    if url.get_backend_name() != "sqlite":
        return engine
    event.listen(engine, "connect", _set_sqlite_pragmas)
    if url.database and url.database != ":memory:":
        event.listen(engine, "connect", _set_wal)
    return engine


def make_engine(database_url: str, echo: bool = False) -> Engine:
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
    engine = create_engine(url, echo=echo, connect_args=connect_args)
    logger.info("Using database %s", url.render_as_string(hide_password=True))
    return install_sqlite_pragmas(engine)


def init_db(bind: Engine):
    """Create tables if they don't exist yet."""
    Base.metadata.create_all(bind=bind)
    logger.info("Database schema ready")


engine = make_engine(settings.database_url, echo=settings.sql_echo)
SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError:
        db.rollback()
        raise
    finally:
        db.close()

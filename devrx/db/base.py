from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from devrx.config.settings import get_settings

_engine = None


def enable_sqlite_foreign_keys(engine: Engine) -> Engine:
    """Turn on FK enforcement so ON DELETE CASCADE applies under SQLite."""
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def get_engine():
    global _engine
    if _engine is None:
        url = get_settings().database_url
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        _engine = enable_sqlite_foreign_keys(
            create_engine(url, echo=False, connect_args=connect_args)
        )
    return _engine


def init_db() -> None:
    """Create all tables."""
    # Registers every table on SQLModel.metadata.
    import devrx.db.schemas  # noqa: F401

    SQLModel.metadata.create_all(get_engine())

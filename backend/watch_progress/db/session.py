from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from watch_progress.core.config import settings


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections are shared with the event loop thread."""
    connect_args = {}
    if database_url.startswith('sqlite'):
        connect_args['check_same_thread'] = False
    eng = create_engine(database_url, pool_pre_ping=True, connect_args=connect_args, future=True)
    if database_url.startswith('sqlite'):
        @event.listens_for(eng, 'connect')
        def _sqlite_pragmas(dbapi_connection, _record):  # pragma: no cover - driver hook
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA journal_mode=WAL')
            cursor.close()
    return eng


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

class Base(DeclarativeBase):
    pass

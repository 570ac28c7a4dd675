"""
Dependency injection setup for the application.
Provides FastAPI dependencies for the progress store and playback sessions.
"""

from typing import Annotated, Optional
from fastapi import Depends

from watch_progress.core.config import Settings
from watch_progress.services.progress_store import ProgressStore
from watch_progress.services.sessions import SessionRegistry
from watch_progress.storage.kv_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    SqlKeyValueStore,
)

_store: Optional[ProgressStore] = None
_sessions: Optional[SessionRegistry] = None


def build_kv_store(cfg: Settings) -> KeyValueStore:
    """Select the persistence backend named in the settings."""
    if cfg.storage_backend == 'memory':
        return InMemoryKeyValueStore()
    if cfg.storage_backend == 'file':
        return JsonFileKeyValueStore(cfg.progress_file)
    from watch_progress.db.session import SessionLocal, engine, Base
    # Ensure the table exists for the configured database
    import watch_progress.models.kv_entry  # noqa: F401
    Base.metadata.create_all(bind=engine)
    return SqlKeyValueStore(SessionLocal)


def configure(store: ProgressStore, sessions: SessionRegistry) -> None:
    """Install the instances the request dependencies hand out."""
    global _store, _sessions
    _store = store
    _sessions = sessions


def reset() -> None:
    global _store, _sessions
    _store = None
    _sessions = None


def get_store() -> ProgressStore:
    if _store is None:
        raise RuntimeError('progress store not configured')
    return _store


def get_sessions() -> SessionRegistry:
    if _sessions is None:
        raise RuntimeError('session registry not configured')
    return _sessions


# FastAPI dependency type annotations
StoreDep = Annotated[ProgressStore, Depends(get_store)]
SessionsDep = Annotated[SessionRegistry, Depends(get_sessions)]

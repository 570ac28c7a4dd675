from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Callable, Dict, Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.orm import Session

from watch_progress.models.kv_entry import KeyValueEntry

_log = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """String key-value persistence used by the progress store.

    ``get`` returns ``None`` for an absent key. Either method may raise; the
    caller is responsible for treating failures as non-fatal.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self, initial: Dict[str, str] | None = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SqlKeyValueStore:
    """Key-value rows in the ``kv_entries`` table, one short session per call."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        with self._session_factory() as db:
            row = db.execute(select(KeyValueEntry.value).where(KeyValueEntry.key == key)).first()
            return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._session_factory() as db:
            entry = db.get(KeyValueEntry, key)
            if entry is None:
                db.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            db.commit()


class JsonFileKeyValueStore:
    """All keys in a single JSON object file, rewritten atomically on each set."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        raw = self.path.read_text(encoding='utf-8')
        if not raw.strip():
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f'expected a JSON object in {self.path}')
        return data

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except (ValueError, OSError):
            _log.warning("progress file %s unreadable; rewriting", self.path)
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + '.tmp')
        tmp.write_text(json.dumps(data), encoding='utf-8')
        os.replace(tmp, self.path)

"""Tests for the key-value persistence backends, using real SQLite and files."""

import pytest
from sqlalchemy.orm import sessionmaker

from watch_progress.db.session import Base, build_engine
from watch_progress.models.kv_entry import KeyValueEntry
from watch_progress.services.progress_store import ProgressStore
from watch_progress.storage.kv_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    SqlKeyValueStore,
)


@pytest.fixture
def sql_store(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'kv.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield SqlKeyValueStore(factory), factory
    engine.dispose()


def test_backends_satisfy_protocol(tmp_path, sql_store):
    store, _ = sql_store
    for backend in (InMemoryKeyValueStore(), JsonFileKeyValueStore(tmp_path / 'p.json'), store):
        assert isinstance(backend, KeyValueStore)


class TestSqlKeyValueStore:
    def test_missing_key(self, sql_store):
        store, _ = sql_store
        assert store.get('videoProgress') is None

    def test_set_then_overwrite(self, sql_store):
        store, factory = sql_store
        store.set('videoProgress', '[]')
        store.set('videoProgress', '[["a", {}]]')
        assert store.get('videoProgress') == '[["a", {}]]'
        with factory() as db:
            assert db.query(KeyValueEntry).count() == 1

    def test_progress_store_round_trip(self, sql_store):
        kv, _ = sql_store
        writer = ProgressStore(kv)
        writer.initialize_video('v1', 30)
        writer.add_interval('v1', 0, 15)
        reader = ProgressStore(kv)
        assert reader.load_from_storage() is True
        assert reader.get_progress('v1').percent_watched == pytest.approx(50)


class TestJsonFileKeyValueStore:
    def test_missing_file(self, tmp_path):
        assert JsonFileKeyValueStore(tmp_path / 'absent.json').get('k') is None

    def test_set_creates_parent_and_keeps_other_keys(self, tmp_path):
        path = tmp_path / 'nested' / 'progress.json'
        store = JsonFileKeyValueStore(path)
        store.set('a', '1')
        store.set('b', '2')
        assert store.get('a') == '1'
        assert store.get('b') == '2'
        assert not path.with_suffix('.json.tmp').exists()

    def test_corrupt_file_raises_on_get_and_recovers_on_set(self, tmp_path):
        path = tmp_path / 'progress.json'
        path.write_text('{broken', encoding='utf-8')
        store = JsonFileKeyValueStore(path)
        with pytest.raises(ValueError):
            store.get('videoProgress')
        store.set('videoProgress', '[]')
        assert store.get('videoProgress') == '[]'

    def test_corrupt_file_loads_cold(self, tmp_path):
        path = tmp_path / 'progress.json'
        path.write_text('[1, 2]', encoding='utf-8')
        progress = ProgressStore(JsonFileKeyValueStore(path))
        assert progress.load_from_storage() is False
        assert len(progress) == 0

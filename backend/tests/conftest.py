import os
import sys
import pathlib
import tempfile
import pytest

# Ensure backend root (containing the 'watch_progress' package) is on sys.path
BACKEND_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

# Configure the app BEFORE any watch_progress import reads the environment
_TEST_DATA_DIR = tempfile.mkdtemp(prefix='watch-progress-tests-')
os.environ.setdefault('WATCH_PROGRESS_DATA_DIR', _TEST_DATA_DIR)
os.environ.setdefault('WATCH_PROGRESS_STORAGE', 'memory')
os.environ.setdefault('WATCH_PROGRESS_LOG_LEVEL', 'DEBUG')

from fastapi.testclient import TestClient

from watch_progress.services.progress_store import ProgressStore
from watch_progress.storage.kv_store import InMemoryKeyValueStore
from tests.fakes import FakePlaybackSource


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv_store):
    return ProgressStore(kv_store)


@pytest.fixture
def source():
    return FakePlaybackSource()


@pytest.fixture
def client():
    from watch_progress.main import app
    with TestClient(app) as c:
        yield c

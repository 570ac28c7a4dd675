from pathlib import Path
from pydantic import BaseModel
import os
from watch_progress import __version__
# Optionally load a repo-level config.env file so local runs can keep settings
# out of the shell environment. Copy `backend/config.sample.env` to
# `backend/config.env` to use it.
try:
    from dotenv import load_dotenv
    cfg_override = os.getenv('WATCH_PROGRESS_CONFIG_FILE')
    candidates = []
    if cfg_override:
        candidates.append(Path(cfg_override))
    candidates.append(Path.cwd() / 'config.env')
    candidates.append(Path.cwd() / 'backend' / 'config.env')

    for p in candidates:
        try:
            if p and p.exists():
                load_dotenv(str(p))
                break
        except Exception:
            continue
except Exception:
    # If python-dotenv isn't available or load fails, fall back to env vars
    pass

"""Central configuration.

Env vars:
  WATCH_PROGRESS_DATA_DIR         - directory for writable application data (created)
  WATCH_PROGRESS_DB_PATH          - explicit path to the SQLite db file (overrides DATA dir)
  WATCH_PROGRESS_STORAGE          - progress persistence backend: sql | memory | file
  WATCH_PROGRESS_STORAGE_KEY      - key the progress mapping is stored under
  WATCH_PROGRESS_LOG_LEVEL        - DEBUG, INFO, WARNING, ERROR, CRITICAL
  WATCH_PROGRESS_VERSION          - override reported version
"""

STORAGE_BACKENDS = ('sql', 'memory', 'file')

_diagnostics: list[str] = []


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        _diagnostics.append(f"invalid_float name={name} value={value!r} using={default}")
        return default


env_data_dir = os.getenv('WATCH_PROGRESS_DATA_DIR')

# Build ordered candidate list (dedup while preserving order)
_candidates = []
for c in [env_data_dir, str(Path.cwd() / 'data')]:
    if c and c not in _candidates:
        _candidates.append(c)

data_dir = None
for cand in _candidates:
    p = Path(cand)
    try:
        p.mkdir(parents=True, exist_ok=True)
        data_dir = p
        _diagnostics.append(f"selected_data_dir={p} (candidate)")
        break
    except Exception as e:  # pragma: no cover
        _diagnostics.append(f"candidate_failed path={p} err={e}")
        continue

if data_dir is None:
    data_dir = Path(__file__).resolve().parent.parent.parent / 'data'
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
        _diagnostics.append(f"fallback_package_dir={data_dir}")
    except Exception as e:  # pragma: no cover
        _diagnostics.append(f"fatal_failed_create_fallback path={data_dir} err={e}")

db_path = os.getenv('WATCH_PROGRESS_DB_PATH')
if db_path:
    db_path = Path(db_path)
else:
    db_path = data_dir / 'progress.db'

storage_backend = (os.getenv('WATCH_PROGRESS_STORAGE') or 'sql').strip().lower()
if storage_backend not in STORAGE_BACKENDS:
    _diagnostics.append(f"unknown_storage_backend={storage_backend!r} using=sql")
    storage_backend = 'sql'


class Settings(BaseModel):
    app_name: str = 'Watch Progress'
    database_url: str = f'sqlite:///{db_path}'
    api_v1_prefix: str = '/api/v1'
    version: str = os.getenv('WATCH_PROGRESS_VERSION', __version__)
    data_dir: Path = data_dir
    db_file: Path = db_path
    storage_backend: str = storage_backend
    storage_key: str = os.getenv('WATCH_PROGRESS_STORAGE_KEY', 'videoProgress')
    progress_file: Path = data_dir / 'progress.json'
    log_level: str = os.getenv('WATCH_PROGRESS_LOG_LEVEL', 'INFO')
    host: str = os.getenv('WATCH_PROGRESS_HOST', '0.0.0.0')
    port: int = int(_env_float('WATCH_PROGRESS_PORT', 4160))
    diagnostics: list[str] | None = _diagnostics

settings = Settings()

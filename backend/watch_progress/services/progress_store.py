from __future__ import annotations

import json
import logging
import math
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from watch_progress.progress.intervals import calculate_watched_time, compute_percent, merge_intervals
from watch_progress.schemas.progress import VideoProgress, WatchedInterval
from watch_progress.storage.kv_store import KeyValueStore

_log = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = 'videoProgress'

ProgressListener = Callable[[VideoProgress], None]


def _finite_or_zero(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) and number > 0 else 0.0


def _normalized(record: VideoProgress) -> VideoProgress:
    """Re-merge intervals and recompute derived fields for a record."""
    intervals = merge_intervals(record.intervals)
    watched = calculate_watched_time(intervals)
    percent = compute_percent(watched, record.total_duration, previous=record.percent_watched)
    return record.model_copy(update={
        'intervals': intervals,
        'total_watched_time': watched,
        'percent_watched': percent,
    })


class ProgressStore:
    """Owns every ``VideoProgress`` record and their persistence.

    Mutations go through ``initialize_video``, ``add_interval`` and
    ``set_last_position``; each successful one notifies listeners, and
    interval and position updates write the whole mapping to the key-value
    store. Invalid input and unknown video
    ids are ignored. Storage failures are logged and never raised: the
    in-memory mapping is always the current truth.
    """

    def __init__(self, kv_store: KeyValueStore | None = None, storage_key: str = DEFAULT_STORAGE_KEY):
        self._kv_store = kv_store
        self.storage_key = storage_key
        self._records: Dict[str, VideoProgress] = {}
        self._listeners: List[ProgressListener] = []
        self.current_video_id: Optional[str] = None

    # --- observers ---------------------------------------------------
    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def _emit(self, record: VideoProgress) -> None:
        for cb in list(self._listeners):
            try:
                cb(record.model_copy(deep=True))
            except Exception:
                _log.exception("progress listener failed video=%s", record.video_id)

    def _commit(self, record: VideoProgress, persist: bool = True) -> VideoProgress:
        self._records[record.video_id] = record
        self._emit(record)
        if persist:
            self.save_to_storage()
        return record.model_copy(deep=True)

    # --- mutations ---------------------------------------------------
    def initialize_video(self, video_id: str, total_duration: float) -> VideoProgress:
        """Create the record for ``video_id`` unless one already exists.

        An existing record keeps its history and duration; only the current
        video pointer moves. A new record notifies listeners but is not
        written until it changes, so creating one before `load_from_storage`
        cannot overwrite the persisted mapping.
        """
        self.current_video_id = video_id
        existing = self._records.get(video_id)
        if existing is not None:
            return existing.model_copy(deep=True)
        record = VideoProgress(
            video_id=video_id,
            intervals=[],
            total_watched_time=0.0,
            total_duration=_finite_or_zero(total_duration),
            percent_watched=0.0,
            last_position=0.0,
        )
        _log.info("initialized progress video=%s duration=%.2f", video_id, record.total_duration)
        return self._commit(record, persist=False)

    def add_interval(self, video_id: str, start: float, end: float) -> Optional[VideoProgress]:
        try:
            candidate = WatchedInterval(start=start, end=end)
        except (ValidationError, TypeError, ValueError):
            _log.debug("dropping invalid interval video=%s start=%s end=%s", video_id, start, end)
            return None
        record = self._records.get(video_id)
        if record is None:
            _log.debug("dropping interval for unknown video=%s", video_id)
            return None
        intervals = merge_intervals([*record.intervals, candidate])
        watched = calculate_watched_time(intervals)
        updated = record.model_copy(update={
            'intervals': intervals,
            'total_watched_time': watched,
            'percent_watched': compute_percent(watched, record.total_duration, previous=record.percent_watched),
        })
        _log.debug(
            "recorded interval video=%s [%.2f, %.2f] watched=%.2f percent=%.1f",
            video_id, candidate.start, candidate.end, watched, updated.percent_watched,
        )
        return self._commit(updated)

    def set_last_position(self, video_id: str, position: float) -> Optional[VideoProgress]:
        record = self._records.get(video_id)
        if record is None:
            _log.debug("ignoring last position for unknown video=%s", video_id)
            return None
        try:
            value = float(position)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(value):
            return None
        return self._commit(record.model_copy(update={'last_position': max(0.0, value)}))

    # --- reads -------------------------------------------------------
    def get_progress(self, video_id: str) -> Optional[VideoProgress]:
        record = self._records.get(video_id)
        return record.model_copy(deep=True) if record is not None else None

    def all_progress(self) -> List[VideoProgress]:
        return [record.model_copy(deep=True) for record in self._records.values()]

    def __contains__(self, video_id: str) -> bool:
        return video_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    # --- persistence -------------------------------------------------
    def serialize(self) -> str:
        entries = [[video_id, record.model_dump(by_alias=True)] for video_id, record in self._records.items()]
        return json.dumps(entries, allow_nan=False)

    @staticmethod
    def deserialize(payload: str) -> Dict[str, VideoProgress]:
        """Parse a ``[[videoId, progress], ...]`` payload.

        Entries that are malformed or fail validation (including non-finite
        numbers) are skipped with a warning. Raises ``ValueError`` when the
        payload is not a list, or when it has entries and none of them is usable.
        """
        entries = json.loads(payload)
        if not isinstance(entries, list):
            raise ValueError('progress payload must be a list of [videoId, progress] pairs')
        records: Dict[str, VideoProgress] = {}
        for entry in entries:
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                _log.warning("skipping malformed progress entry: %r", entry)
                continue
            video_id, data = entry
            if not isinstance(video_id, str) or not isinstance(data, dict):
                _log.warning("skipping malformed progress entry: %r", entry)
                continue
            try:
                record = VideoProgress.model_validate({**data, 'videoId': video_id})
            except ValidationError as exc:
                _log.warning("skipping invalid progress video=%s err=%s", video_id, exc)
                continue
            records[video_id] = _normalized(record)
        if entries and not records:
            raise ValueError('no usable progress entries')
        return records

    def save_to_storage(self) -> bool:
        if self._kv_store is None:
            return False
        try:
            self._kv_store.set(self.storage_key, self.serialize())
            return True
        except Exception:
            _log.exception("failed to save progress key=%s", self.storage_key)
            return False

    def load_from_storage(self) -> bool:
        """Replace the in-memory mapping with the persisted one.

        A missing key or unreadable payload leaves the mapping unchanged.
        """
        if self._kv_store is None:
            return False
        try:
            payload = self._kv_store.get(self.storage_key)
        except Exception:
            _log.exception("failed to read progress key=%s", self.storage_key)
            return False
        if not payload:
            _log.debug("no persisted progress under key=%s", self.storage_key)
            return False
        try:
            records = self.deserialize(payload)
        except (ValueError, ValidationError) as exc:
            _log.warning("ignoring unreadable progress payload key=%s err=%s", self.storage_key, exc)
            return False
        self._records = records
        _log.info("loaded progress for %d videos", len(records))
        return True

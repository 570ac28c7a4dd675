from __future__ import annotations

import asyncio
import logging
import math
from typing import Callable, Optional, Protocol, runtime_checkable

from watch_progress.schemas.progress import VideoProgress
from watch_progress.services.progress_store import ProgressStore

_log = logging.getLogger(__name__)

DEFAULT_SAMPLE_INTERVAL = 1.0


@runtime_checkable
class PlaybackSource(Protocol):
    """The player the tracker observes. Only these members are consumed."""

    @property
    def current_time(self) -> float: ...

    def seek(self, position: float) -> None: ...


class PeriodicSampler:
    """Calls ``callback`` every ``interval`` seconds on the running event loop.

    ``stop`` cancels the pending task so no callback fires afterwards.
    """

    def __init__(self, callback: Callable[[], None], interval: float = DEFAULT_SAMPLE_INTERVAL):
        if interval <= 0:
            raise ValueError('sample interval must be positive')
        self.callback = callback
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.callback()
            except Exception:
                _log.exception("sampler callback failed")

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()


class PlaybackSegmentTracker:
    """Turns playback signals for one video session into committed intervals.

    At most one segment is open at a time. A segment opens lazily on the first
    sampling tick while playing and closes on pause, seek, end of playback or
    session teardown, at which point it is handed to the progress store.
    """

    def __init__(
        self,
        store: ProgressStore,
        video_id: str,
        source: PlaybackSource | None = None,
        sample_interval: float = DEFAULT_SAMPLE_INTERVAL,
    ):
        self.store = store
        self.video_id = video_id
        self.source = source
        self.is_playing = False
        self.segment_start: float | None = None
        self.current_time = 0.0
        self.duration: float | None = None
        # display only, may lag the real buffer
        self.buffered_percent = 0.0
        self.active = False
        self.closed = False
        self._sampler = PeriodicSampler(self.tick, sample_interval)

    # --- lifecycle ---------------------------------------------------
    def start_session(self) -> float | None:
        """Open the session; seeks the source to the saved position if one exists."""
        if self.closed:
            return None
        self.active = True
        saved = self.store.get_progress(self.video_id)
        resume = None
        if saved is not None and saved.last_position > 0:
            resume = saved.last_position
            self.current_time = resume
            if self.source is not None:
                self.source.seek(resume)
        _log.info("session started video=%s resume=%s", self.video_id, resume)
        return resume

    def start_sampler(self) -> None:
        """Start the periodic tick on the running event loop."""
        if self.closed:
            return
        self._sampler.start()

    @property
    def sampling(self) -> bool:
        return self._sampler.running

    def end_session(self) -> Optional[VideoProgress]:
        """Close the session: commit the open segment and record the last position."""
        if self.closed:
            return self.store.get_progress(self.video_id)
        self._sampler.stop()
        self._refresh_time()
        self._close_segment(self.current_time)
        self.is_playing = False
        self.store.set_last_position(self.video_id, self.current_time)
        self.active = False
        self.closed = True
        _log.info("session ended video=%s position=%.2f", self.video_id, self.current_time)
        return self.store.get_progress(self.video_id)

    # --- signals -----------------------------------------------------
    def on_duration_known(self, duration: float) -> None:
        if self.closed:
            return
        try:
            value = float(duration)
        except (TypeError, ValueError):
            return
        if not math.isfinite(value) or value <= 0:
            return
        self.duration = value
        self.store.initialize_video(self.video_id, value)

    def on_play(self) -> None:
        if self.closed:
            return
        self.is_playing = True

    def on_time_update(self, position: float, buffered_end: float | None = None) -> None:
        if self.closed:
            return
        self._set_time(position)
        if buffered_end is not None:
            self._set_buffered(buffered_end)

    def tick(self) -> None:
        """Periodic sample: refresh the head and open a segment if playing."""
        if self.closed:
            return
        self._refresh_time()
        if self.source is not None:
            self._set_buffered(getattr(self.source, 'buffered_end', None))
        if self.is_playing and self.segment_start is None:
            self.segment_start = self.current_time
            _log.debug("segment opened video=%s at=%.2f", self.video_id, self.current_time)

    def on_pause(self) -> None:
        if self.closed:
            return
        self._refresh_time()
        self._close_segment(self.current_time)
        self.is_playing = False

    def on_ended(self) -> None:
        if self.closed:
            return
        self._refresh_time()
        self._close_segment(self.current_time)
        self.is_playing = False

    def on_seeking(self, from_position: float | None = None) -> None:
        """A seek has begun. Closes the open segment at the pre-seek head.

        The source has usually moved already, so the last sampled time is used
        unless the caller passes the position the seek started from.
        """
        if self.closed:
            return
        if from_position is not None:
            self._set_time(from_position)
        self._close_segment(self.current_time)

    def seek(self, position: float) -> None:
        """Explicit seek requested by the user (e.g. a scrub bar click)."""
        if self.closed:
            return
        self._refresh_time()
        self._close_segment(self.current_time)
        self._set_time(position)
        if self.source is not None:
            self.source.seek(self.current_time)

    # --- internals ---------------------------------------------------
    def _close_segment(self, end: float) -> None:
        start, self.segment_start = self.segment_start, None
        if start is None:
            return
        # zero-length and inverted spans are dropped by the store
        self.store.add_interval(self.video_id, start, end)

    def _refresh_time(self) -> None:
        if self.source is None:
            return
        try:
            self._set_time(self.source.current_time)
        except Exception:
            _log.exception("failed to read playback position video=%s", self.video_id)

    def _set_time(self, position) -> None:
        try:
            value = float(position)
        except (TypeError, ValueError):
            return
        if math.isfinite(value) and value >= 0:
            self.current_time = value

    def _set_buffered(self, buffered_end) -> None:
        if buffered_end is None or not self.duration:
            return
        try:
            percent = float(buffered_end) / self.duration * 100.0
        except (TypeError, ValueError, ZeroDivisionError):
            return
        if math.isfinite(percent):
            self.buffered_percent = max(0.0, min(100.0, percent))

    def snapshot(self) -> dict:
        return {
            'video_id': self.video_id,
            'is_playing': self.is_playing,
            'segment_start': self.segment_start,
            'current_time': self.current_time,
            'duration': self.duration,
            'buffered_percent': self.buffered_percent,
            'active': self.active,
        }

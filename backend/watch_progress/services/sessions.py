from __future__ import annotations

import logging
from typing import Dict, Optional

from watch_progress.schemas.playback import PlaybackEventIn
from watch_progress.schemas.progress import VideoProgress
from watch_progress.services.progress_store import ProgressStore
from watch_progress.services.tracker import PlaybackSegmentTracker

_log = logging.getLogger(__name__)


class SessionRegistry:
    """Playback sessions driven by remote players, at most one per video.

    Opening a session for another video closes the currently selected one
    first, so switching videos records the outgoing position and commits its
    open segment. Remote players send their own ``tick`` events, so no
    server-side sampler runs for these sessions.
    """

    def __init__(self, store: ProgressStore):
        self.store = store
        self._sessions: Dict[str, PlaybackSegmentTracker] = {}
        self.selected_video_id: Optional[str] = None

    def get(self, video_id: str) -> Optional[PlaybackSegmentTracker]:
        return self._sessions.get(video_id)

    def active_ids(self) -> list[str]:
        return list(self._sessions.keys())

    def open(self, video_id: str) -> tuple[PlaybackSegmentTracker, Optional[float]]:
        for other in [vid for vid in self._sessions if vid != video_id]:
            _log.info("switching video from=%s to=%s", other, video_id)
            self.close(other)
        existing = self._sessions.pop(video_id, None)
        if existing is not None:
            # a reopened page supersedes the stale session
            existing.end_session()
        tracker = PlaybackSegmentTracker(self.store, video_id)
        resume = tracker.start_session()
        self._sessions[video_id] = tracker
        self.selected_video_id = video_id
        return tracker, resume

    def dispatch(self, video_id: str, event: PlaybackEventIn) -> Optional[PlaybackSegmentTracker]:
        tracker = self._sessions.get(video_id)
        if tracker is None:
            return None
        _log.debug("video=%s event=%s position=%s", video_id, event.type, event.position)
        if event.type == 'seek':
            if event.position is not None:
                tracker.seek(event.position)
            return tracker
        if event.type == 'seeking':
            tracker.on_seeking(event.from_position)
            return tracker
        if event.position is not None:
            tracker.on_time_update(event.position, event.buffered_end)
        elif event.buffered_end is not None:
            tracker.on_time_update(tracker.current_time, event.buffered_end)
        if event.type == 'duration':
            if event.duration is not None:
                tracker.on_duration_known(event.duration)
        elif event.type == 'play':
            tracker.on_play()
        elif event.type == 'pause':
            tracker.on_pause()
        elif event.type == 'ended':
            tracker.on_ended()
        elif event.type == 'tick':
            tracker.tick()
        return tracker

    def close(self, video_id: str) -> Optional[VideoProgress]:
        tracker = self._sessions.pop(video_id, None)
        if tracker is None:
            return None
        if self.selected_video_id == video_id:
            self.selected_video_id = None
        return tracker.end_session()

    def close_all(self) -> None:
        for video_id in list(self._sessions):
            self.close(video_id)

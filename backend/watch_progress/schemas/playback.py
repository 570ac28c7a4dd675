from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from watch_progress.progress.intervals import interval_markers
from watch_progress.schemas.progress import VideoProgress, WatchedInterval
from watch_progress.utils.time_format import format_time

PlaybackEventType = Literal['play', 'pause', 'seeking', 'seek', 'ended', 'duration', 'tick', 'timeupdate']


class PlaybackEventIn(BaseModel):
    type: PlaybackEventType
    # current head for most events; the seek target for 'seek'
    position: Optional[float] = None
    # only for 'seeking': where the head was before the seek started
    from_position: Optional[float] = Field(None, alias='from')
    duration: Optional[float] = None
    buffered_end: Optional[float] = Field(None, alias='bufferedEnd')

    model_config = {
        'populate_by_name': True,
        'extra': 'ignore',
    }


class TrackerState(BaseModel):
    video_id: str
    is_playing: bool
    segment_start: Optional[float] = None
    current_time: float
    duration: Optional[float] = None
    buffered_percent: float
    active: bool


class SessionStartOut(BaseModel):
    video_id: str
    resume_position: Optional[float] = None


class IntervalMarker(BaseModel):
    left: float
    width: float


class ProgressOut(BaseModel):
    video_id: str
    intervals: List[WatchedInterval]
    total_watched_time: float
    total_duration: float
    percent_watched: float
    last_position: float
    markers: List[IntervalMarker] = []
    watched_display: str
    duration_display: str
    position_display: str


class VideoOut(BaseModel):
    id: str
    title: str
    description: str
    duration: float
    thumbnail_url: str
    video_url: str
    percent_watched: float = 0.0
    last_position: float = 0.0


class VideoDetailOut(VideoOut):
    index: int
    count: int
    previous_id: Optional[str] = None
    next_id: Optional[str] = None


def progress_out(record: VideoProgress) -> ProgressOut:
    return ProgressOut(
        video_id=record.video_id,
        intervals=record.intervals,
        total_watched_time=record.total_watched_time,
        total_duration=record.total_duration,
        percent_watched=record.percent_watched,
        last_position=record.last_position,
        markers=[IntervalMarker(**m) for m in interval_markers(record.intervals, record.total_duration)],
        watched_display=format_time(record.total_watched_time),
        duration_display=format_time(record.total_duration),
        position_display=format_time(record.last_position),
    )

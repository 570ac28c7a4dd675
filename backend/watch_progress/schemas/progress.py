from __future__ import annotations

import math
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class WatchedInterval(BaseModel):
    """A contiguous span of playback, in seconds. Always ``start < end``."""

    model_config = ConfigDict(frozen=True)

    start: float
    end: float

    @model_validator(mode='after')
    def _check_bounds(self) -> 'WatchedInterval':
        if not (math.isfinite(self.start) and math.isfinite(self.end)):
            raise ValueError('interval bounds must be finite')
        if self.start >= self.end:
            raise ValueError(f'interval start ({self.start}) must be before end ({self.end})')
        return self


class VideoProgress(BaseModel):
    # Persisted under the camelCase names so stored payloads stay compatible
    # with browser players that write the same format.
    model_config = ConfigDict(populate_by_name=True, extra='ignore', allow_inf_nan=False)

    video_id: str = Field(alias='videoId')
    intervals: List[WatchedInterval] = Field(default_factory=list)
    total_watched_time: float = Field(0.0, alias='totalWatchedTime')
    total_duration: float = Field(0.0, alias='totalDuration')
    percent_watched: float = Field(0.0, alias='percentWatched', ge=0.0, le=100.0)
    last_position: float = Field(0.0, alias='lastPosition')

    @field_validator('total_watched_time', 'total_duration', 'percent_watched', 'last_position', mode='before')
    @classmethod
    def _null_as_zero(cls, value):
        # JSON.stringify writes NaN as null
        return 0.0 if value is None else value

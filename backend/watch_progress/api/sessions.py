from fastapi import APIRouter, HTTPException

from watch_progress.core.dependencies import SessionsDep
from watch_progress.schemas.playback import (
    PlaybackEventIn,
    ProgressOut,
    SessionStartOut,
    TrackerState,
    progress_out,
)

router = APIRouter(prefix='/sessions', tags=['sessions'])


@router.post('/{video_id}/start', response_model=SessionStartOut)
async def start_session(video_id: str, sessions: SessionsDep):
    """Open a playback session; returns where the player should resume."""
    _, resume = sessions.open(video_id)
    return SessionStartOut(video_id=video_id, resume_position=resume)


@router.post('/{video_id}/events', response_model=TrackerState)
async def post_event(video_id: str, event: PlaybackEventIn, sessions: SessionsDep):
    tracker = sessions.dispatch(video_id, event)
    if tracker is None:
        raise HTTPException(status_code=404, detail=f'no active session for video {video_id}')
    return TrackerState(**tracker.snapshot())


@router.post('/{video_id}/end', response_model=ProgressOut)
async def end_session(video_id: str, sessions: SessionsDep):
    if sessions.get(video_id) is None:
        raise HTTPException(status_code=404, detail=f'no active session for video {video_id}')
    record = sessions.close(video_id)
    if record is None:
        # session closed before the player ever reported a duration
        raise HTTPException(status_code=404, detail=f'no progress for video {video_id}')
    return progress_out(record)

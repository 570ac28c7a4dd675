from typing import List

from fastapi import APIRouter, HTTPException

from watch_progress.catalog import SAMPLE_VIDEOS, VideoData, find_video, neighbours
from watch_progress.core.dependencies import StoreDep
from watch_progress.services.progress_store import ProgressStore
from watch_progress.schemas.playback import VideoDetailOut, VideoOut

router = APIRouter(prefix='/videos', tags=['videos'])


def _video_fields(video: VideoData, store: ProgressStore) -> dict:
    record = store.get_progress(video.id)
    return {
        'id': video.id,
        'title': video.title,
        'description': video.description,
        'duration': video.duration,
        'thumbnail_url': video.thumbnail_url,
        'video_url': video.video_url,
        'percent_watched': record.percent_watched if record else 0.0,
        'last_position': record.last_position if record else 0.0,
    }


@router.get('', response_model=List[VideoOut])
async def list_videos(store: StoreDep):
    """Library view: every lecture with its percent watched."""
    return [VideoOut(**_video_fields(video, store)) for video in SAMPLE_VIDEOS]


@router.get('/{video_id}', response_model=VideoDetailOut)
async def get_video(video_id: str, store: StoreDep):
    index = find_video(video_id)
    if index is None:
        raise HTTPException(status_code=404, detail=f'unknown video {video_id}')
    previous_id, next_id = neighbours(index)
    return VideoDetailOut(
        **_video_fields(SAMPLE_VIDEOS[index], store),
        index=index + 1,
        count=len(SAMPLE_VIDEOS),
        previous_id=previous_id,
        next_id=next_id,
    )

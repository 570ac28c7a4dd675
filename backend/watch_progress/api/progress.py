from typing import List

from fastapi import APIRouter, HTTPException

from watch_progress.core.dependencies import StoreDep
from watch_progress.schemas.playback import ProgressOut, progress_out

router = APIRouter(prefix='/progress', tags=['progress'])


@router.get('', response_model=List[ProgressOut])
async def list_progress(store: StoreDep):
    return [progress_out(record) for record in store.all_progress()]


@router.get('/{video_id}', response_model=ProgressOut)
async def get_progress(video_id: str, store: StoreDep):
    """Read-only snapshot for one video, with progress bar markers."""
    record = store.get_progress(video_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f'no progress for video {video_id}')
    return progress_out(record)

from typing import Any, Dict

from fastapi import APIRouter

from watch_progress.core.config import settings

router = APIRouter()


def get_version_payload() -> Dict[str, Any]:
    return {
        'version': settings.version,
        'storage': settings.storage_backend,
    }


@router.get('/version')
async def version():
    return get_version_payload()

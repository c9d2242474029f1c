import logging

from fastapi import APIRouter

from parody.config import settings
from parody.models.music import MusicGenerateBody
from parody.services.music_service import MusicService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/music-generate")
async def generate_music(body: MusicGenerateBody) -> dict:
    """Submit lyrics for music generation. Returns the remote task id."""
    if not body.custom_mode or body.instrumental:
        logger.info("Ignoring customMode/instrumental overrides; lyrics are always sung")

    service = MusicService(settings)
    try:
        task_id = await service.submit(body.to_request())
    finally:
        await service.close()

    return {"success": True, "taskId": task_id}


@router.get("/music-status/{task_id}")
async def get_music_status(task_id: str) -> dict:
    """Single status lookup for a music task (no polling)."""
    service = MusicService(settings)
    try:
        status = await service.fetch_status(task_id)
    finally:
        await service.close()

    return status.model_dump(by_alias=True, exclude_none=True)

from fastapi import APIRouter

from parody.config import settings
from parody.models.pipeline import MusicOptionsBody, ParodyTopicBody, PipelineSnapshot, SearchBody
from parody.services.pipeline import get_pipeline

router = APIRouter()


def _dump(snapshot: PipelineSnapshot) -> dict:
    return snapshot.model_dump(by_alias=True, mode="json")


@router.get("")
async def get_pipeline_state() -> dict:
    """Current state of the parody session."""
    return _dump(get_pipeline(settings).snapshot())


@router.post("/search")
async def search_sources(body: SearchBody) -> dict:
    """Fetch lyrics and an instrumental track for a song."""
    snapshot = await get_pipeline(settings).search(body.song, body.artist)
    return _dump(snapshot)


@router.post("/parody")
async def rewrite_lyrics(body: ParodyTopicBody) -> dict:
    snapshot = await get_pipeline(settings).generate_parody(body.topic)
    return _dump(snapshot)


@router.post("/music")
async def start_music(body: MusicOptionsBody) -> dict:
    """Submit the parody for music generation; polling continues in the background."""
    snapshot = await get_pipeline(settings).generate_music(
        style=body.style,
        title=body.title,
        vocal_gender=body.vocal_gender,
        model=body.model,
    )
    return _dump(snapshot)


@router.post("/music/cancel")
async def cancel_music() -> dict:
    return _dump(await get_pipeline(settings).cancel_music())


@router.delete("")
async def reset_pipeline() -> dict:
    return _dump(await get_pipeline(settings).reset())

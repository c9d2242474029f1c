from fastapi import APIRouter

from parody.config import settings
from parody.models.lyrics import SongQuery
from parody.services.lyrics_service import LyricsService

router = APIRouter()


@router.get("/lyrics")
async def get_lyrics(song: str = "", artist: str = "") -> dict:
    """Find a song on Genius and return its normalized lyrics."""
    service = LyricsService(settings)
    try:
        result = await service.fetch_lyrics(SongQuery(title=song, artist=artist))
    finally:
        await service.close()

    return result.model_dump(by_alias=True)

from fastapi import APIRouter, Query

from parody.config import settings
from parody.services.instrumental_service import InstrumentalService, with_bias_term

router = APIRouter()


@router.get("/instrumental-search")
async def instrumental_search(
    q: str = "",
    page_token: str | None = Query(None, alias="pageToken"),
    channel_id: str | None = Query(None, alias="channelId"),
) -> dict:
    """Search YouTube for an instrumental version of a song.

    ``type``, ``maxResults``, ``order`` and ``safeSearch`` are fixed
    server-side; any values sent by the client are ignored.
    """
    service = InstrumentalService(settings)
    try:
        query = with_bias_term(q) if q.strip() else q
        return await service.search(query, page_token=page_token, channel_id=channel_id)
    finally:
        await service.close()

"""Instrumental backing-track lookup through the YouTube Data API."""

import logging
from typing import Any

import httpx

from parody.config import Settings
from parody.errors import ConfigError, MissingInputError, UpstreamError
from parody.models.instrumental import InstrumentalResult
from parody.models.lyrics import SongQuery

logger = logging.getLogger(__name__)

BIAS_TERM = "instrumental"

_PAGINATION_KEYS = ("nextPageToken", "prevPageToken")


def build_search_text(query: SongQuery) -> str:
    """``title [artist] instrumental``."""
    parts = [query.title]
    if query.artist:
        parts.append(query.artist)
    parts.append(BIAS_TERM)
    return " ".join(parts)


def with_bias_term(q: str) -> str:
    """Append the bias term to a free-text query unless it already ends with it."""
    q = q.strip()
    words = q.lower().split()
    if words and words[-1] == BIAS_TERM:
        return q
    return f"{q} {BIAS_TERM}".strip()


class InstrumentalService:
    """Finds the single most relevant instrumental video for a song."""

    def __init__(self, config: Settings, http: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._http = http

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._config.http_timeout_seconds)
        return self._http

    async def find_instrumental(self, query: SongQuery) -> InstrumentalResult | None:
        """Return the top match, or None when the provider has no results."""
        if not query.title:
            raise MissingInputError("Missing song title")

        payload = await self.search(build_search_text(query))
        items = payload.get("items") or []
        if not items:
            logger.info("No instrumental found for '%s'", query.search_text)
            return None

        item = items[0]
        snippet = item.get("snippet", {})
        return InstrumentalResult(
            video_id=item["id"]["videoId"],
            title=snippet.get("title", ""),
            channel_title=snippet.get("channelTitle", ""),
            published_at=snippet["publishedAt"],
        )

    async def search(
        self,
        q: str,
        page_token: str | None = None,
        channel_id: str | None = None,
    ) -> dict[str, Any]:
        """Run one search and return the provider payload.

        Always asks for a single relevance-ordered video; ``items`` is cut to
        one entry and pagination tokens are dropped since results are never
        paged through.
        """
        if not q.strip():
            raise MissingInputError("Missing 'q' query parameter")

        api_key = self._config.youtube_api_key
        if not api_key:
            raise ConfigError("YOUTUBE_API_KEY is not set")

        params: dict[str, Any] = {
            "part": "snippet",
            "q": q,
            "type": "video",
            "maxResults": 1,
            "order": "relevance",
            "safeSearch": "moderate",
            "key": api_key,
        }
        if page_token:
            params["pageToken"] = page_token
        if channel_id:
            params["channelId"] = channel_id

        try:
            resp = await self._client().get(self._config.youtube_api_url, params=params)
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.exception("YouTube search failed for '%s'", q)
            raise UpstreamError("Instrumental search failed", details=str(e)) from e

        for key in _PAGINATION_KEYS:
            payload.pop(key, None)
        payload["items"] = (payload.get("items") or [])[:1]
        return payload

    async def close(self) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

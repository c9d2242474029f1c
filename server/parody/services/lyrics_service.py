"""Lyrics fetching service: Genius search, then lyric-page scrape."""

import asyncio
import logging
import re

import httpx
import lyricsgenius
from bs4 import BeautifulSoup

from parody.config import Settings
from parody.errors import ConfigError, MissingInputError, NotFoundError, UpstreamError
from parody.models.lyrics import LyricsResult, SongQuery

logger = logging.getLogger(__name__)

_LINE_BREAK_MARKUP = re.compile(r"<br\s*/?>", re.IGNORECASE)
_SECTION_MARKER = re.compile(r"\[[^\[\]\n]+\]")
_MARKER_WITH_SPACING = re.compile(r"\s*(\[[^\[\]\n]+\])\s*")
# Four or more line breaks, i.e. three or more blank lines
_BLANK_LINE_RUN = re.compile(r"\n(?:[ \t]*\n){3,}")

_LYRICS_CONTAINER = {"data-lyrics-container": "true"}


def normalize_lyrics(raw_text: str) -> str:
    """Clean scraped lyric text.

    Genius pages carry a contributor/title preamble before the first
    section header, so everything before the first ``[...]`` marker is
    dropped. Headers are isolated on their own line between blank lines.
    """
    text = raw_text.replace("\r\n", "\n")
    text = _LINE_BREAK_MARKUP.sub("\n", text)

    first_marker = _SECTION_MARKER.search(text)
    if first_marker:
        text = text[first_marker.start():]

    text = _MARKER_WITH_SPACING.sub(r"\n\n\1\n\n", text)
    text = _BLANK_LINE_RUN.sub("\n\n", text)
    return text.strip()


def extract_lyrics_text(html: str) -> str:
    """Concatenate every lyric container on a Genius page, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    blocks: list[str] = []
    for container in soup.find_all(attrs=_LYRICS_CONTAINER):
        for br in container.find_all("br"):
            br.replace_with("\n")
        blocks.append(container.get_text())
    return "\n".join(blocks)


class LyricsService:
    """Fetches and normalizes lyrics from Genius."""

    def __init__(self, config: Settings, http: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._genius: lyricsgenius.Genius | None = None
        self._http = http

    def _get_genius(self) -> lyricsgenius.Genius:
        if self._genius is None:
            token = self._config.genius_api_token
            if not token:
                raise ConfigError("GENIUS_API_TOKEN is not set")
            self._genius = lyricsgenius.Genius(
                token,
                verbose=False,
                remove_section_headers=False,
                timeout=int(self._config.http_timeout_seconds),
                retries=0,
            )
        return self._genius

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=self._config.http_timeout_seconds,
                follow_redirects=True,
            )
        return self._http

    async def fetch_lyrics(self, query: SongQuery) -> LyricsResult:
        """Resolve the top Genius hit for the query and scrape its lyrics."""
        if not query.title:
            raise MissingInputError("Missing 'song' query parameter")

        hit = await self._search_top_hit(query.search_text)
        song_url = hit["url"]
        title = hit.get("full_title") or hit.get("title") or query.title

        html = await self._fetch_page(song_url)
        raw = extract_lyrics_text(html)
        if not raw.strip():
            logger.warning("No lyric containers found on %s", song_url)
            raise NotFoundError("No lyrics found.")

        return LyricsResult(title=title, source_url=song_url, text=normalize_lyrics(raw))

    async def _search_top_hit(self, search_text: str) -> dict:
        genius = self._get_genius()
        try:
            # lyricsgenius is blocking; keep it off the event loop
            response = await asyncio.to_thread(genius.search_songs, search_text)
        except Exception as e:
            logger.exception("Genius search failed for '%s'", search_text)
            raise UpstreamError("Lyrics search failed", details=str(e)) from e

        hits = (response or {}).get("hits") or []
        if not hits:
            logger.info("No Genius hits for '%s'", search_text)
            raise NotFoundError("No lyrics found.")
        return hits[0]["result"]

    async def _fetch_page(self, url: str) -> str:
        try:
            resp = await self._client().get(url)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.exception("Failed to fetch lyrics page %s", url)
            raise UpstreamError("Lyrics page could not be retrieved", details=str(e)) from e
        return resp.text

    async def close(self) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

"""Parody lyric rewriting using Google Gemini."""

import logging

from google import genai
from google.genai import types

from parody.config import Settings
from parody.errors import ConfigError, MissingInputError, UpstreamError
from parody.models.parody import ParodyRequest, ParodyResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a professional parody songwriter. You rewrite existing song lyrics around a new topic so they can be sung over the original melody.

Rules:
1. Keep the syllable count of every line as close to the original as possible
2. Keep the rhythm, stress pattern and rhyme scheme of each line
3. Keep every section header (e.g. [Verse 1], [Chorus]) exactly where it appears
4. Keep the same number of lines in every section
5. Output ONLY the rewritten lyrics. No title, no introduction, no notes, no explanation before or after
"""


def build_parody_prompt(req: ParodyRequest) -> str:
    """Compose the single instruction block sent to the model."""
    artist = req.artist or "Unknown artist"
    title = req.song_title or "Untitled"
    return f"""Rewrite the lyrics of "{title}" by {artist} as a parody about: {req.topic}

Preserve the syllabic cadence and rhythmic structure of every line so the new words fit the original melody.
Respond with only the rewritten lyrics and nothing else.

Original lyrics:
{req.original_lyrics}"""


class ParodyService:
    """Gemini integration for turning original lyrics into a parody."""

    def __init__(self, config: Settings) -> None:
        self._config = config
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            api_key = self._config.google_ai_api_key
            if not api_key:
                raise ConfigError(
                    "GOOGLE_AI_API_KEY is not set. Please set it in your .env file or environment."
                )
            self._client = genai.Client(api_key=api_key)
        return self._client

    async def rewrite(self, req: ParodyRequest) -> ParodyResult:
        """Return the model output verbatim; no retry on failure."""
        if not req.original_lyrics.strip() or not req.topic.strip():
            raise MissingInputError("Missing lyrics or parody topic")

        client = self._get_client()
        config = types.GenerateContentConfig(
            system_instruction=SYSTEM_PROMPT,
            temperature=0.9,
            max_output_tokens=self._config.parody_max_output_tokens,
        )

        try:
            response = await client.aio.models.generate_content(
                model=self._config.gemini_model,
                contents=build_parody_prompt(req),
                config=config,
            )
        except Exception as e:
            logger.exception("Gemini API error while generating parody")
            raise UpstreamError("Failed to generate parody", details=str(e)) from e

        text = response.text
        if not text or not text.strip():
            logger.warning("Gemini returned no parody text for '%s'", req.song_title)
            raise UpstreamError("Failed to generate parody", details="Empty response from model")

        return ParodyResult(text=text)

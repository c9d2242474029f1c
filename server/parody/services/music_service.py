"""Music generation through the Suno API.

Generation is a two-step remote contract: ``submit`` returns a task id and
``fetch_status`` is queried by id until the task finishes. The callback URL
is mandatory in the submission payload but is never served; completion is
discovered by polling only.
"""

import logging
from typing import Any

import httpx

from parody.config import Settings
from parody.errors import ConfigError, MissingInputError, UpstreamError, UpstreamRejectedError
from parody.models.music import MusicJobRequest, MusicStatus, MusicTrack

logger = logging.getLogger(__name__)

_GENERATE_PATH = "/api/v1/generate"
_RECORD_INFO_PATH = "/api/v1/generate/record-info"


def _track_from_payload(data: dict[str, Any]) -> MusicTrack:
    return MusicTrack(
        id=data.get("id") or "",
        title=data.get("title") or "",
        audio_url=data.get("audioUrl") or data.get("streamAudioUrl") or "",
        duration=data.get("duration"),
        tags=data.get("tags") or "",
    )


class MusicService:
    """Submits generation tasks and reads back their status."""

    def __init__(self, config: Settings, http: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._http = http

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self._config.suno_api_url,
                timeout=self._config.http_timeout_seconds,
            )
        return self._http

    def _headers(self) -> dict[str, str]:
        api_key = self._config.suno_api_key
        if not api_key:
            raise ConfigError("SUNO_API_KEY is not set")
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(self, req: MusicJobRequest) -> dict[str, Any]:
        return {
            "prompt": req.lyrics,
            "style": req.style_tags,
            "title": req.title,
            "customMode": req.custom_mode,
            "instrumental": req.instrumental,
            "model": req.model or self._config.suno_model,
            "callBackUrl": self._config.music_callback_url,
        }

    async def submit(self, req: MusicJobRequest) -> str:
        """Submit a generation task and return its task id."""
        if not req.lyrics.strip():
            raise MissingInputError(
                "Missing lyrics for music generation",
                details="The prompt field must contain the lyrics to sing",
            )

        headers = self._headers()
        payload = self.build_payload(req)
        logger.info("Submitting music task '%s' (style: %s)", req.title, payload["style"])

        body = await self._request("POST", _GENERATE_PATH, headers=headers, json=payload)

        task_id = (body.get("data") or {}).get("taskId")
        if body.get("code") != 200 or not task_id:
            logger.warning("Music generation rejected: %s", body.get("msg"))
            raise UpstreamRejectedError(
                "Music generation request was rejected",
                details=body.get("msg") or body,
            )

        logger.info("Music task submitted: taskId=%s", task_id)
        return task_id

    async def fetch_status(self, task_id: str) -> MusicStatus:
        """Query one status snapshot for a task."""
        if not task_id:
            raise MissingInputError("Missing taskId")

        headers = self._headers()
        body = await self._request(
            "GET", _RECORD_INFO_PATH, headers=headers, params={"taskId": task_id},
        )
        if body.get("code") != 200:
            raise UpstreamRejectedError(
                "Music status query was rejected",
                details=body.get("msg") or body,
            )

        data = body.get("data") or {}
        response = data.get("response") or {}
        tracks = [_track_from_payload(t) for t in response.get("sunoData") or []]
        return MusicStatus(
            task_id=data.get("taskId") or task_id,
            status=data.get("status") or "PENDING",
            tracks=tracks,
            error=data.get("errorMessage") or None,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = await self._client().request(method, path, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.exception("Suno API %s %s failed", method, path)
            raise UpstreamError("Music service request failed", details=str(e)) from e

    async def close(self) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

"""Tests for the Suno-backed MusicService."""

import json

import httpx
import pytest

from parody.config import Settings
from parody.errors import ConfigError, MissingInputError, UpstreamError, UpstreamRejectedError
from parody.models.music import MusicJobRequest, VocalGender
from parody.services.music_service import MusicService


def _settings(**overrides) -> Settings:
    values = {
        "_env_file": None,
        "suno_api_key": "suno-key",
        "public_base_url": "https://parody.example.com/",
    }
    values.update(overrides)
    return Settings(**values)


def _client(responses: dict[str, httpx.Response], requests: list | None = None) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return responses[request.url.path]

    return httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="https://api.sunoapi.org",
    )


def _submit_ok(task_id: str = "task-1") -> dict[str, httpx.Response]:
    return {"/api/v1/generate": httpx.Response(200, json={
        "code": 200, "msg": "success", "data": {"taskId": task_id},
    })}


class TestSubmit:
    @pytest.mark.asyncio
    async def test_returns_task_id_and_maps_payload(self):
        requests: list[httpx.Request] = []
        service = MusicService(_settings(), http=_client(_submit_ok("abc"), requests))
        req = MusicJobRequest(
            lyrics="[Verse]\n\nCar keys",
            style="Pop",
            title="Car Keys",
            vocal_gender=VocalGender.MALE,
        )

        assert await service.submit(req) == "abc"

        sent = requests[0]
        body = json.loads(sent.content)
        assert sent.method == "POST"
        assert sent.headers["Authorization"] == "Bearer suno-key"
        assert body == {
            "prompt": "[Verse]\n\nCar keys",
            "style": "Pop with male vocals",
            "title": "Car Keys",
            "customMode": True,
            "instrumental": False,
            "model": "V4_5",
            "callBackUrl": "https://parody.example.com/music-callback",
        }

    @pytest.mark.asyncio
    async def test_any_gender_keeps_style(self):
        requests: list[httpx.Request] = []
        service = MusicService(_settings(), http=_client(_submit_ok(), requests))
        await service.submit(MusicJobRequest(lyrics="la la", style="Pop", model="V5"))

        body = json.loads(requests[0].content)
        assert body["style"] == "Pop"
        assert body["model"] == "V5"

    @pytest.mark.asyncio
    async def test_empty_lyrics_makes_no_call(self):
        requests: list[httpx.Request] = []
        service = MusicService(_settings(), http=_client(_submit_ok(), requests))

        with pytest.raises(MissingInputError):
            await service.submit(MusicJobRequest(lyrics="", style="Pop"))
        assert requests == []

    @pytest.mark.asyncio
    async def test_missing_key(self):
        requests: list[httpx.Request] = []
        service = MusicService(_settings(suno_api_key=""), http=_client(_submit_ok(), requests))
        with pytest.raises(ConfigError):
            await service.submit(MusicJobRequest(lyrics="la la"))
        assert requests == []

    @pytest.mark.asyncio
    async def test_rejected_payload(self):
        responses = {"/api/v1/generate": httpx.Response(200, json={
            "code": 400, "msg": "Prompt too long", "data": None,
        })}
        service = MusicService(_settings(), http=_client(responses))

        with pytest.raises(UpstreamRejectedError) as exc_info:
            await service.submit(MusicJobRequest(lyrics="la la"))
        assert exc_info.value.details == "Prompt too long"

    @pytest.mark.asyncio
    async def test_http_error(self):
        responses = {"/api/v1/generate": httpx.Response(500, text="oops")}
        service = MusicService(_settings(), http=_client(responses))
        with pytest.raises(UpstreamError):
            await service.submit(MusicJobRequest(lyrics="la la"))


class TestFetchStatus:
    @pytest.mark.asyncio
    async def test_maps_tracks(self):
        requests: list[httpx.Request] = []
        responses = {"/api/v1/generate/record-info": httpx.Response(200, json={
            "code": 200,
            "msg": "success",
            "data": {
                "taskId": "abc",
                "status": "SUCCESS",
                "response": {"sunoData": [
                    {"id": "t1", "title": "Car Keys", "audioUrl": "https://cdn/t1.mp3",
                     "duration": 182.4, "tags": "pop"},
                    {"id": "t2", "title": "Car Keys", "audioUrl": "https://cdn/t2.mp3",
                     "duration": 179.0, "tags": "pop"},
                ]},
                "errorMessage": None,
            },
        })}
        service = MusicService(_settings(), http=_client(responses, requests))

        status = await service.fetch_status("abc")

        assert requests[0].url.params["taskId"] == "abc"
        assert status.is_success
        assert [t.audio_url for t in status.tracks] == ["https://cdn/t1.mp3", "https://cdn/t2.mp3"]
        assert status.tracks[0].duration == 182.4
        assert status.error is None

    @pytest.mark.asyncio
    async def test_pending_without_response(self):
        responses = {"/api/v1/generate/record-info": httpx.Response(200, json={
            "code": 200, "msg": "success",
            "data": {"taskId": "abc", "status": "PENDING", "response": None},
        })}
        service = MusicService(_settings(), http=_client(responses))

        status = await service.fetch_status("abc")
        assert status.status == "PENDING"
        assert status.tracks == []
        assert not status.is_success
        assert not status.is_failure

    @pytest.mark.asyncio
    async def test_failure_message(self):
        responses = {"/api/v1/generate/record-info": httpx.Response(200, json={
            "code": 200, "msg": "success",
            "data": {"taskId": "abc", "status": "GENERATE_AUDIO_FAILED",
                     "errorMessage": "Audio generation failed"},
        })}
        service = MusicService(_settings(), http=_client(responses))

        status = await service.fetch_status("abc")
        assert status.is_failure
        assert status.error == "Audio generation failed"

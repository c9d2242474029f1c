"""Tests for the pydantic data model."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from parody.models.instrumental import InstrumentalResult
from parody.models.lyrics import LyricsResult, SongQuery
from parody.models.music import (
    JobStatus,
    MusicGenerateBody,
    MusicJob,
    MusicJobRequest,
    MusicStatus,
    MusicTrack,
    VocalGender,
    compose_style_tags,
)
from parody.models.parody import ParodyGenerateBody
from parody.models.pipeline import PipelineSnapshot, PipelineState


class TestSongQuery:
    def test_trims_fields(self):
        query = SongQuery(title="  Yesterday ", artist=" The Beatles ")
        assert query.title == "Yesterday"
        assert query.artist == "The Beatles"

    def test_artist_optional(self):
        query = SongQuery(title="Yesterday", artist=None)
        assert query.artist == ""
        assert query.search_text == "Yesterday"

    def test_search_text_with_artist(self):
        assert SongQuery(title="Yesterday", artist="The Beatles").search_text == "Yesterday The Beatles"

    def test_immutable(self):
        query = SongQuery(title="Yesterday")
        with pytest.raises(ValidationError):
            query.title = "Help!"


class TestLyricsResult:
    def test_wire_names(self):
        result = LyricsResult(title="t", source_url="https://genius.com/x", text="[Verse]")
        assert result.model_dump(by_alias=True) == {"title": "t", "url": "https://genius.com/x", "lyrics": "[Verse]"}

    def test_accepts_wire_names(self):
        result = LyricsResult.model_validate({"title": "t", "url": "u", "lyrics": "l"})
        assert result.source_url == "u"
        assert result.text == "l"


class TestStyleTags:
    def test_male(self):
        assert compose_style_tags("Pop", VocalGender.MALE) == "Pop with male vocals"

    def test_female(self):
        assert compose_style_tags("Synthwave", VocalGender.FEMALE) == "Synthwave with female vocals"

    def test_any_leaves_style_unmodified(self):
        assert compose_style_tags("Pop", VocalGender.ANY) == "Pop"

    def test_request_property(self):
        req = MusicJobRequest(lyrics="la", style="Pop", vocal_gender="male")
        assert req.style_tags == "Pop with male vocals"

    def test_fixed_flags(self):
        req = MusicJobRequest(lyrics="la")
        assert req.custom_mode is True
        assert req.instrumental is False
        with pytest.raises(ValidationError):
            MusicJobRequest(lyrics="la", instrumental=True)


class TestMusicJob:
    def test_audio_url_only_with_success(self):
        with pytest.raises(ValidationError):
            MusicJob(status=JobStatus.POLLING, audio_url="https://cdn/a.mp3")
        with pytest.raises(ValidationError):
            MusicJob(status=JobStatus.SUCCESS)

    def test_lifecycle(self):
        job = MusicJob()
        assert job.status == JobStatus.IDLE
        job.mark_sending()
        assert job.status == JobStatus.SENDING
        job.mark_polling("task-1")
        assert job.task_id == "task-1"
        assert job.audio_url is None
        job.mark_success("https://cdn/a.mp3")
        assert job.status == JobStatus.SUCCESS
        assert job.audio_url == "https://cdn/a.mp3"

    def test_failure_clears_audio(self):
        job = MusicJob()
        job.mark_polling("task-1")
        job.mark_failed("boom")
        assert job.status == JobStatus.FAILED
        assert job.audio_url is None
        assert job.error == "boom"

    def test_camel_case_dump(self):
        job = MusicJob()
        job.mark_polling("task-1")
        assert job.model_dump(by_alias=True)["taskId"] == "task-1"


class TestRequestBodies:
    def test_parody_body_from_camel_case(self):
        body = ParodyGenerateBody.model_validate({
            "songTitle": " Yesterday ", "artist": "The Beatles",
            "lyrics": "line", "parodyTopic": " cats ",
        })
        req = body.to_request()
        assert req.song_title == "Yesterday"
        assert req.original_lyrics == "line"
        assert req.topic == "cats"

    def test_music_body_defaults(self):
        body = MusicGenerateBody.model_validate({"prompt": "la", "style": "Pop"})
        req = body.to_request()
        assert req.vocal_gender == VocalGender.ANY
        assert req.model is None
        assert req.style_tags == "Pop"


class TestPipelineSnapshot:
    def test_serializes_state_names(self):
        snapshot = PipelineSnapshot(state=PipelineState.POLLING_MUSIC)
        data = snapshot.model_dump(by_alias=True, mode="json")
        assert data["state"] == "PollingMusic"
        assert data["musicJob"] is None


class TestMusicStatus:
    def test_success_needs_playable_first_track(self):
        status = MusicStatus(task_id="abc", status="SUCCESS", tracks=[MusicTrack(id="t1", audio_url="")])
        assert not status.is_success
        assert not status.is_failure

    def test_success_with_audio(self):
        status = MusicStatus(task_id="abc", status="SUCCESS", tracks=[MusicTrack(audio_url="https://cdn/t1.mp3")])
        assert status.is_success


class TestInstrumentalResult:
    def test_links_are_serialized(self):
        result = InstrumentalResult(
            video_id="abc123",
            title="Yesterday (Instrumental)",
            channel_title="Backing Tracks",
            published_at=datetime(2019, 4, 2, tzinfo=timezone.utc),
        )
        data = PipelineSnapshot(state=PipelineState.READY, instrumental=result).model_dump(by_alias=True, mode="json")
        assert data["instrumental"]["watchUrl"] == "https://www.youtube.com/watch?v=abc123"
        assert data["instrumental"]["embedUrl"] == "https://www.youtube.com/embed/abc123"
        assert data["instrumental"]["videoId"] == "abc123"

from enum import StrEnum

from parody.models.base import CamelModel
from parody.models.instrumental import InstrumentalResult
from parody.models.lyrics import LyricsResult
from parody.models.music import MusicJob, VocalGender


class PipelineState(StrEnum):
    IDLE = "Idle"
    SEARCHING_SOURCES = "SearchingSources"
    READY = "Ready"
    GENERATING_LYRICS = "GeneratingLyrics"
    LYRICS_READY = "LyricsReady"
    SUBMITTING_MUSIC = "SubmittingMusic"
    POLLING_MUSIC = "PollingMusic"
    COMPLETE = "Complete"
    FAILED = "Failed"


class PipelineSnapshot(CamelModel):
    state: PipelineState
    lyrics: LyricsResult | None = None
    lyrics_error: str | None = None
    instrumental: InstrumentalResult | None = None
    instrumental_error: str | None = None
    parody: str | None = None
    parody_error: str | None = None
    music_job: MusicJob | None = None
    music_error: str | None = None


class SearchBody(CamelModel):
    song: str = ""
    artist: str = ""


class ParodyTopicBody(CamelModel):
    topic: str = ""


class MusicOptionsBody(CamelModel):
    style: str = ""
    title: str = ""
    vocal_gender: VocalGender = VocalGender.ANY
    model: str | None = None

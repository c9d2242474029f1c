from parody.models.instrumental import InstrumentalResult
from parody.models.lyrics import LyricsResult, SongQuery
from parody.models.music import JobStatus, MusicJob, MusicJobRequest, MusicStatus, MusicTrack, VocalGender
from parody.models.parody import ParodyRequest, ParodyResult
from parody.models.pipeline import PipelineSnapshot, PipelineState

__all__ = [
    "InstrumentalResult",
    "LyricsResult",
    "SongQuery",
    "JobStatus",
    "MusicJob",
    "MusicJobRequest",
    "MusicStatus",
    "MusicTrack",
    "VocalGender",
    "ParodyRequest",
    "ParodyResult",
    "PipelineSnapshot",
    "PipelineState",
]

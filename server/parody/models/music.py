from enum import StrEnum
from typing import Literal

from pydantic import ConfigDict, Field, model_validator

from parody.models.base import CamelModel


class VocalGender(StrEnum):
    ANY = "any"
    MALE = "male"
    FEMALE = "female"


class JobStatus(StrEnum):
    IDLE = "Idle"
    SENDING = "Sending"
    POLLING = "Polling"
    SUCCESS = "Success"
    FAILED = "Failed"


# Remote status codes that end a generation task without audio
FAILURE_STATUSES = frozenset({
    "CREATE_TASK_FAILED",
    "GENERATE_AUDIO_FAILED",
    "CALLBACK_EXCEPTION",
    "SENSITIVE_WORD_ERROR",
})
SUCCESS_STATUS = "SUCCESS"


def compose_style_tags(style: str, vocal_gender: VocalGender) -> str:
    """Append a vocal qualifier to the style unless any voice is acceptable."""
    style = style.strip()
    if vocal_gender == VocalGender.ANY:
        return style
    return f"{style} with {vocal_gender.value} vocals".strip()


class MusicJobRequest(CamelModel):
    model_config = ConfigDict(frozen=True)

    lyrics: str
    style: str = ""
    title: str = ""
    vocal_gender: VocalGender = VocalGender.ANY
    model: str | None = None
    custom_mode: Literal[True] = True
    instrumental: Literal[False] = False

    @property
    def style_tags(self) -> str:
        return compose_style_tags(self.style, self.vocal_gender)


class MusicGenerateBody(CamelModel):
    """Request body of ``POST /music-generate``.

    ``customMode`` and ``instrumental`` are accepted for wire compatibility;
    submissions always use custom lyrics with vocals.
    """

    prompt: str = ""
    custom_mode: bool = True
    style: str = ""
    title: str = ""
    instrumental: bool = False
    model: str | None = None
    vocal_gender: VocalGender = VocalGender.ANY

    def to_request(self) -> MusicJobRequest:
        return MusicJobRequest(
            lyrics=self.prompt,
            style=self.style,
            title=self.title,
            vocal_gender=self.vocal_gender,
            model=self.model or None,
        )


class MusicTrack(CamelModel):
    id: str = ""
    title: str = ""
    audio_url: str = ""
    duration: float | None = None
    tags: str = ""


class MusicStatus(CamelModel):
    task_id: str
    status: str
    tracks: list[MusicTrack] = Field(default_factory=list)
    error: str | None = None

    @property
    def is_success(self) -> bool:
        if self.status != SUCCESS_STATUS or not self.tracks:
            return False
        return bool(self.tracks[0].audio_url)

    @property
    def is_failure(self) -> bool:
        return self.status in FAILURE_STATUSES


class MusicJob(CamelModel):
    """Local record of one music submission.

    ``audio_url`` is set if and only if the job succeeded.
    """

    task_id: str | None = None
    status: JobStatus = JobStatus.IDLE
    audio_url: str | None = None
    error: str | None = None

    @model_validator(mode="after")
    def check_audio_url(self) -> "MusicJob":
        if (self.audio_url is not None) != (self.status == JobStatus.SUCCESS):
            raise ValueError("audio_url must be set exactly when status is Success")
        return self

    def mark_sending(self) -> None:
        self.status = JobStatus.SENDING

    def mark_polling(self, task_id: str) -> None:
        self.task_id = task_id
        self.status = JobStatus.POLLING

    def mark_success(self, audio_url: str) -> None:
        self.audio_url = audio_url
        self.status = JobStatus.SUCCESS
        self.error = None

    def mark_failed(self, error: str) -> None:
        self.audio_url = None
        self.status = JobStatus.FAILED
        self.error = error

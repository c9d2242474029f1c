from pydantic import BaseModel, ConfigDict, Field, field_validator


class SongQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    artist: str = ""

    @field_validator("title", "artist", mode="before")
    @classmethod
    def strip_whitespace(cls, value: str | None) -> str:
        return (value or "").strip()

    @property
    def search_text(self) -> str:
        return f"{self.title} {self.artist}" if self.artist else self.title


class LyricsResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    source_url: str = Field(alias="url")
    text: str = Field(alias="lyrics")

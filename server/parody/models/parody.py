from pydantic import BaseModel, ConfigDict

from parody.models.base import CamelModel


class ParodyRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    song_title: str = ""
    artist: str = ""
    original_lyrics: str = ""
    topic: str = ""


class ParodyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


class ParodyGenerateBody(CamelModel):
    """Request body of ``POST /parody-generate``."""

    song_title: str = ""
    artist: str = ""
    lyrics: str = ""
    parody_topic: str = ""

    def to_request(self) -> ParodyRequest:
        return ParodyRequest(
            song_title=self.song_title.strip(),
            artist=self.artist.strip(),
            original_lyrics=self.lyrics,
            topic=self.parody_topic.strip(),
        )


class ParodyGenerateResponse(CamelModel):
    ok: bool = True
    generated_parody: str = ""

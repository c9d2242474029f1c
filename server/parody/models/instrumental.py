from datetime import datetime

from pydantic import ConfigDict, computed_field

from parody.models.base import CamelModel


class InstrumentalResult(CamelModel):
    model_config = ConfigDict(frozen=True)

    video_id: str
    title: str
    channel_title: str
    published_at: datetime

    @computed_field
    @property
    def watch_url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"

    @computed_field
    @property
    def embed_url(self) -> str:
        return f"https://www.youtube.com/embed/{self.video_id}"

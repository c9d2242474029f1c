"""Orchestration of the parody pipeline.

Stages run one at a time on explicit triggers:

    search          lyrics + instrumental, concurrently
    generate_parody rewrite the lyrics around a topic
    generate_music  submit a music task, then poll it in the background

The pipeline exposes one :class:`PipelineState` plus the result and error
text of every stage. A stage claims its busy state before its first await
and always settles back to the state implied by the results held, whether
it succeeds, fails or is cancelled. Results of earlier stages are kept.
"""

import asyncio
import logging

from parody.config import Settings
from parody.errors import MissingInputError, ParodyError
from parody.models.instrumental import InstrumentalResult
from parody.models.lyrics import LyricsResult, SongQuery
from parody.models.music import JobStatus, MusicJob, MusicJobRequest, VocalGender
from parody.models.parody import ParodyRequest, ParodyResult
from parody.models.pipeline import PipelineSnapshot, PipelineState
from parody.services.instrumental_service import InstrumentalService
from parody.services.job_poller import JobPoller
from parody.services.llm_service import ParodyService
from parody.services.lyrics_service import LyricsService
from parody.services.music_service import MusicService

logger = logging.getLogger(__name__)

_BUSY_STATES = frozenset({
    PipelineState.SEARCHING_SOURCES,
    PipelineState.GENERATING_LYRICS,
    PipelineState.SUBMITTING_MUSIC,
})


class PipelineBusyError(ParodyError):
    status_code = 409


def _error_text(exc: BaseException) -> str:
    if isinstance(exc, ParodyError):
        return exc.message
    return "Something went wrong."


class ParodyPipeline:
    """Single-session controller over the sourcing, rewrite and music stages."""

    def __init__(
        self,
        lyrics_service: LyricsService,
        instrumental_service: InstrumentalService,
        parody_service: ParodyService,
        music_service: MusicService,
        poller: JobPoller,
    ) -> None:
        self._lyrics_service = lyrics_service
        self._instrumental_service = instrumental_service
        self._parody_service = parody_service
        self._music_service = music_service
        self._poller = poller

        self.state = PipelineState.IDLE
        self.query: SongQuery | None = None
        self.lyrics: LyricsResult | None = None
        self.lyrics_error: str | None = None
        self.instrumental: InstrumentalResult | None = None
        self.instrumental_error: str | None = None
        self.parody: ParodyResult | None = None
        self.parody_error: str | None = None
        self.music_job: MusicJob | None = None
        self.music_error: str | None = None
        self._poll_task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(cls, config: Settings) -> "ParodyPipeline":
        music_service = MusicService(config)
        return cls(
            lyrics_service=LyricsService(config),
            instrumental_service=InstrumentalService(config),
            parody_service=ParodyService(config),
            music_service=music_service,
            poller=JobPoller.from_settings(music_service, config),
        )

    def snapshot(self) -> PipelineSnapshot:
        return PipelineSnapshot(
            state=self.state,
            lyrics=self.lyrics,
            lyrics_error=self.lyrics_error,
            instrumental=self.instrumental,
            instrumental_error=self.instrumental_error,
            parody=self.parody.text if self.parody else None,
            parody_error=self.parody_error,
            music_job=self.music_job.model_copy() if self.music_job else None,
            music_error=self.music_error,
        )

    def _ensure_idle(self) -> None:
        if self.state in _BUSY_STATES:
            raise PipelineBusyError(f"Pipeline is busy ({self.state.value})")

    # ── Stage 1: sourcing ────────────────────────────────────────────────

    async def search(self, title: str, artist: str = "") -> PipelineSnapshot:
        """Look up lyrics and an instrumental for a song, concurrently.

        Both lookups are awaited; each outcome is recorded on its own, so a
        lyrics failure never hides an instrumental match or vice versa.
        """
        query = SongQuery(title=title, artist=artist)
        if not query.title:
            raise MissingInputError("Please enter a song title.")
        self._ensure_idle()
        self.state = PipelineState.SEARCHING_SOURCES
        try:
            await self._search(query)
        finally:
            self.state = self._settled_state()
        return self.snapshot()

    async def _search(self, query: SongQuery) -> None:
        await self._abandon_music()
        self.lyrics = self.instrumental = self.parody = None
        self.lyrics_error = self.instrumental_error = self.parody_error = None
        self.query = query
        logger.info("Searching sources for '%s'", query.search_text)

        lyrics_outcome, instrumental_outcome = await asyncio.gather(
            self._lyrics_service.fetch_lyrics(query),
            self._instrumental_service.find_instrumental(query),
            return_exceptions=True,
        )

        if isinstance(lyrics_outcome, BaseException):
            self._log_stage_failure("lyrics", lyrics_outcome)
            self.lyrics_error = _error_text(lyrics_outcome)
        else:
            self.lyrics = lyrics_outcome

        if isinstance(instrumental_outcome, BaseException):
            self._log_stage_failure("instrumental", instrumental_outcome)
            self.instrumental_error = _error_text(instrumental_outcome)
        else:
            self.instrumental = instrumental_outcome

    # ── Stage 2: lyric rewrite ───────────────────────────────────────────

    async def generate_parody(self, topic: str) -> PipelineSnapshot:
        lyrics_text = self.lyrics.text if self.lyrics else ""
        if not lyrics_text.strip() or not topic.strip():
            raise MissingInputError("Missing lyrics or parody topic")
        self._ensure_idle()

        request = ParodyRequest(
            song_title=self.lyrics.title,
            artist=self.query.artist if self.query else "",
            original_lyrics=lyrics_text,
            topic=topic.strip(),
        )
        self.state = PipelineState.GENERATING_LYRICS
        self.parody_error = None
        try:
            await self._rewrite(request)
        finally:
            self.state = self._settled_state()
        return self.snapshot()

    async def _rewrite(self, request: ParodyRequest) -> None:
        try:
            result = await self._parody_service.rewrite(request)
        except Exception as e:
            self._log_stage_failure("parody", e)
            self.parody_error = _error_text(e)
            return

        # New lyrics make any earlier music job stale
        await self._abandon_music()
        self.parody = result

    # ── Stage 3: music generation ────────────────────────────────────────

    async def generate_music(
        self,
        style: str = "",
        title: str = "",
        vocal_gender: VocalGender = VocalGender.ANY,
        model: str | None = None,
    ) -> PipelineSnapshot:
        """Submit the parody for music generation and start polling.

        A new submission supersedes the previous one: its poll loop is
        cancelled before the new job is created.
        """
        if not self.parody or not self.parody.text.strip():
            raise MissingInputError("Generate parody lyrics before creating music")
        self._ensure_idle()

        default_title = f"{self.lyrics.title} (Parody)" if self.lyrics else "Parody"
        request = MusicJobRequest(
            lyrics=self.parody.text,
            style=style,
            title=title.strip() or default_title,
            vocal_gender=vocal_gender,
            model=model,
        )
        self.state = PipelineState.SUBMITTING_MUSIC
        try:
            await self._submit_music(request)
        finally:
            self.state = self._settled_state()
        return self.snapshot()

    async def _submit_music(self, request: MusicJobRequest) -> None:
        await self._abandon_music()
        job = MusicJob()
        job.mark_sending()
        self.music_job = job

        try:
            task_id = await self._music_service.submit(request)
        except asyncio.CancelledError:
            self.music_job = None
            raise
        except Exception as e:
            self._log_stage_failure("music submission", e)
            self.music_job = None
            self.music_error = _error_text(e)
            return

        job.mark_polling(task_id)
        self._poll_task = asyncio.create_task(self._track(job))

    async def _track(self, job: MusicJob) -> None:
        try:
            audio_url = await self._poller.poll_until_done(job.task_id)
        except asyncio.CancelledError:
            logger.info("Stopped polling music task %s", job.task_id)
            raise
        except Exception as e:
            self._log_stage_failure("music polling", e)
            # Only the current job may write pipeline state
            if self.music_job is job:
                job.mark_failed(_error_text(e))
                self.music_error = job.error
                self._settle()
            return

        if self.music_job is job:
            job.mark_success(audio_url)
            self._settle()

    def _settled_state(self) -> PipelineState:
        """Derive the resting state from the results held by each stage."""
        job = self.music_job
        if job is not None:
            if job.status == JobStatus.SUCCESS:
                return PipelineState.COMPLETE
            if job.status == JobStatus.FAILED:
                return PipelineState.FAILED
            return PipelineState.POLLING_MUSIC
        if self.parody:
            return PipelineState.LYRICS_READY
        if self.query:
            return PipelineState.READY
        return PipelineState.IDLE

    def _settle(self) -> None:
        # A stage in progress owns the state until it finishes
        if self.state not in _BUSY_STATES:
            self.state = self._settled_state()

    async def wait_for_music(self) -> PipelineSnapshot:
        """Block until the current poll loop finishes."""
        if self._poll_task is not None:
            await asyncio.wait({self._poll_task})
        return self.snapshot()

    async def cancel_music(self) -> PipelineSnapshot:
        """Stop tracking the current music job; the remote task keeps running."""
        self._ensure_idle()
        if self.music_job is None:
            return self.snapshot()
        await self._abandon_music()
        self.state = self._settled_state()
        return self.snapshot()

    async def reset(self) -> PipelineSnapshot:
        self._ensure_idle()
        await self._abandon_music()
        self.lyrics = self.instrumental = self.parody = None
        self.lyrics_error = self.instrumental_error = self.parody_error = None
        self.music_error = None
        self.query = None
        self.state = PipelineState.IDLE
        return self.snapshot()

    async def _abandon_music(self) -> None:
        task, self._poll_task = self._poll_task, None
        self.music_job = None
        self.music_error = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})

    async def close(self) -> None:
        await self._abandon_music()
        for service in (self._lyrics_service, self._instrumental_service, self._music_service):
            await service.close()

    @staticmethod
    def _log_stage_failure(stage: str, exc: BaseException) -> None:
        if isinstance(exc, ParodyError):
            logger.warning("%s stage failed: %s", stage, exc.message)
        else:
            logger.error("%s stage failed unexpectedly", stage, exc_info=exc)


pipeline_session: ParodyPipeline | None = None


def get_pipeline(config: Settings) -> ParodyPipeline:
    """Return the process-wide pipeline session, creating it on first use."""
    global pipeline_session
    if pipeline_session is None:
        pipeline_session = ParodyPipeline.from_settings(config)
    return pipeline_session

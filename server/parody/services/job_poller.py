"""Polls an asynchronous music task until it finishes or the budget runs out."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from parody.config import Settings
from parody.errors import JobFailedError, PollTimeoutError
from parody.models.music import MusicStatus

logger = logging.getLogger(__name__)


class StatusSource(Protocol):
    async def fetch_status(self, task_id: str) -> MusicStatus: ...


class JobPoller:
    """Fixed-interval poll loop over a :class:`StatusSource`.

    Each tick sleeps for ``interval`` seconds then queries the task once.
    The loop is a plain coroutine, so cancelling the task that awaits it
    stops further ticks. The remote job itself is never cancelled.
    """

    def __init__(
        self,
        source: StatusSource,
        interval: float = 10.0,
        max_attempts: int = 60,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._source = source
        self.interval = interval
        self.max_attempts = max_attempts
        self._sleep = sleep

    @classmethod
    def from_settings(cls, source: StatusSource, config: Settings) -> "JobPoller":
        return cls(
            source,
            interval=config.poll_interval_seconds,
            max_attempts=config.poll_max_attempts,
        )

    async def poll_until_done(self, task_id: str) -> str:
        """Return the first track's audio URL once the task succeeds.

        Raises JobFailedError on a terminal remote failure and
        PollTimeoutError when ``max_attempts`` ticks pass without one.
        """
        for attempt in range(1, self.max_attempts + 1):
            await self._sleep(self.interval)
            status = await self._source.fetch_status(task_id)

            if status.is_success:
                logger.info("Music task %s succeeded after %d polls", task_id, attempt)
                return status.tracks[0].audio_url

            if status.is_failure:
                message = status.error or f"Music generation failed ({status.status})"
                logger.warning("Music task %s failed: %s", task_id, message)
                raise JobFailedError(message, details=status.status)

            logger.debug("Music task %s still %s (poll %d/%d)",
                         task_id, status.status, attempt, self.max_attempts)

        logger.error("Music task %s timed out after %d polls", task_id, self.max_attempts)
        raise PollTimeoutError(
            "Music generation timed out. The track may still finish; check the provider later.",
            details={"taskId": task_id},
        )

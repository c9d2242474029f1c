"""Error taxonomy shared by the adapters, the pipeline and the HTTP layer.

Each error carries the HTTP status it maps to so routes can let them
propagate and the app-level handler renders ``{"error", "details"}``.
"""

from typing import Any


class ParodyError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class MissingInputError(ParodyError):
    """Client-side validation failure, raised before any network call."""

    status_code = 400


class ConfigError(ParodyError):
    """A required credential is not configured."""

    status_code = 500


class NotFoundError(ParodyError):
    status_code = 404


class UpstreamError(ParodyError):
    """A third-party call failed at the transport or HTTP level."""

    status_code = 500


class UpstreamRejectedError(ParodyError):
    """A third-party call returned an error payload (remote validation)."""

    status_code = 400


class JobFailedError(ParodyError):
    """The music job reached a terminal failure state."""

    status_code = 502


class PollTimeoutError(ParodyError):
    """The poll budget ran out before the job reached a terminal state.

    The remote job may still complete out-of-band.
    """

    status_code = 504

class ScrobblerError(Exception):
    """Base class for errors raised by album-scrobbler."""


class ConfigMissing(ScrobblerError):
    """Required credentials are not configured."""


class NotFound(ScrobblerError):
    """The catalog has no tracks for the requested album."""


class ValidationError(ScrobblerError):
    """User input failed validation."""


class MissingInput(ScrobblerError):
    """A required input was not provided."""


class ScrobbleError(ScrobblerError):
    """A single submission attempt failed."""


class HttpError(ScrobbleError):
    """The submission endpoint answered with a non-2xx status."""

    def __init__(self, status: int, reason: str = "") -> None:
        self.status = status
        self.reason = reason
        super().__init__(f"Scrobble request failed: {status} {reason}".rstrip())


class DailyLimitReached(ScrobbleError):
    """The 24h scrobble quota is exhausted (error 29 in the response body)."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from albumscrobbler.config import Settings
from albumscrobbler.lastfm import Track
from albumscrobbler.retry import RetryPolicy


class FakeResponse:
    def __init__(self, status_code: int = 200, data: Any = None, reason: str = "OK", text: str | None = None):
        self.status_code = status_code
        self.reason = reason
        self._data = data
        self._text = text

    def json(self) -> Any:
        if self._text is not None:
            raise ValueError(f"Expecting value: {self._text!r}")
        return self._data


class FakeSession:
    """Stand-in for requests.Session that records calls and answers from a handler."""

    def __init__(self, handler: Callable[..., FakeResponse]):
        self.handler = handler
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": "GET", "url": url, **kwargs})
        return self.handler("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": "POST", "url": url, **kwargs})
        return self.handler("POST", url, **kwargs)


class CapturingReporter:
    def __init__(self) -> None:
        self.lines: list[tuple[str, str]] = []

    def info(self, msg: str) -> None:
        self.lines.append(("info", msg))

    def success(self, msg: str) -> None:
        self.lines.append(("success", msg))

    def error(self, msg: str) -> None:
        self.lines.append(("error", msg))

    def tracklist(self, tracks: list[Track]) -> None:
        for i, t in enumerate(tracks, start=1):
            self.lines.append(("track", f"{i}. {t.name}"))

    def of(self, kind: str) -> list[str]:
        return [msg for k, msg in self.lines if k == kind]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key="test-key",
        session_id="test-session",
        success_delay=0.0,
        rejected_delay=0.0,
        rate_limit_delay=0.0,
        error_delay=0.0,
    )


@pytest.fixture
def reporter() -> CapturingReporter:
    return CapturingReporter()


@pytest.fixture
def fast_policy() -> RetryPolicy:
    return RetryPolicy(success_delay=0.0, rejected_delay=0.0, rate_limit_delay=0.0, error_delay=0.0)


def accepted_body(n: int = 1) -> dict[str, Any]:
    return {"scrobbles": {"@attr": {"accepted": str(n), "ignored": "0"}}}

from __future__ import annotations

import requests

from albumscrobbler.errors import DailyLimitReached, HttpError
from albumscrobbler.retry import AttemptOutcome, LoopState, RetryPolicy, classify, run_scrobble_loop

from .conftest import accepted_body

REJECTED = {"scrobbles": {"@attr": {"accepted": "0", "ignored": "3"}}}


class ScriptedSubmit:
    """Return or raise the scripted items in order, then keep accepting."""

    def __init__(self, *script):
        self.script = list(script)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        item = self.script.pop(0) if self.script else accepted_body()
        if isinstance(item, Exception):
            raise item
        return item


def test_all_accepted_runs_requested_times(reporter, fast_policy) -> None:
    submit = ScriptedSubmit()

    result = run_scrobble_loop(submit, 3, reporter, fast_policy)

    assert result.state is LoopState.DONE
    assert result.accepted == 3
    assert submit.calls == 3
    assert len(reporter.of("success")) == 3
    assert reporter.of("error") == []


def test_429_does_not_consume_an_attempt(reporter, fast_policy) -> None:
    submit = ScriptedSubmit(accepted_body(), HttpError(429, "Too Many Requests"), accepted_body(), accepted_body())

    result = run_scrobble_loop(submit, 3, reporter, fast_policy)

    assert result.state is LoopState.DONE
    assert result.accepted == 3
    assert submit.calls == 4
    assert result.outcomes[AttemptOutcome.RATE_LIMITED] == 1
    infos = reporter.of("info")
    assert infos == [
        "Attempting scrobbling #1",
        "Attempting scrobbling #2",
        "Attempting scrobbling #2",
        "Attempting scrobbling #3",
    ]


def test_daily_limit_stops_immediately(reporter, fast_policy) -> None:
    submit = ScriptedSubmit(accepted_body(), DailyLimitReached("Rate Limit Exceeded - 24h"))
    sleeps: list[float] = []

    result = run_scrobble_loop(submit, 10, reporter, fast_policy, sleep=sleeps.append)

    assert result.state is LoopState.STOPPED_BY_LIMIT
    assert result.stopped_by_limit
    assert result.accepted == 1
    assert submit.calls == 2
    assert "Daily scrobble limit reached at attempt #2" in reporter.of("error")[-1]


def test_rejected_zero_retries_slot_by_default(reporter, fast_policy) -> None:
    submit = ScriptedSubmit(REJECTED, accepted_body())

    result = run_scrobble_loop(submit, 1, reporter, fast_policy)

    assert result.accepted == 1
    assert submit.calls == 2
    errors = reporter.of("error")
    assert len(errors) == 1
    assert errors[0].startswith("Scrobble #1 failed: ")
    assert '"ignored": "3"' in errors[0]


def test_rejected_zero_can_consume_attempt(reporter) -> None:
    policy = RetryPolicy(0, 0, 0, 0, count_rejected_as_attempt=True)
    submit = ScriptedSubmit(REJECTED, accepted_body())

    result = run_scrobble_loop(submit, 2, reporter, policy)

    assert result.state is LoopState.DONE
    assert result.accepted == 1
    assert submit.calls == 2


def test_other_errors_consume_attempt(reporter, fast_policy) -> None:
    submit = ScriptedSubmit(
        requests.exceptions.ConnectionError("connection reset"),
        HttpError(502, "Bad Gateway"),
        accepted_body(),
    )

    result = run_scrobble_loop(submit, 3, reporter, fast_policy)

    assert result.state is LoopState.DONE
    assert result.accepted == 1
    assert submit.calls == 3
    assert result.outcomes[AttemptOutcome.TRANSIENT_ERROR] == 2
    assert reporter.of("error")[0] == "Scrobble #1 error: connection reset"


def test_delays_follow_policy(reporter) -> None:
    policy = RetryPolicy(success_delay=1, rejected_delay=2, rate_limit_delay=5, error_delay=3)
    submit = ScriptedSubmit(HttpError(429), REJECTED, ValueError("bad"), accepted_body(), accepted_body())
    sleeps: list[float] = []

    run_scrobble_loop(submit, 3, reporter, policy, sleep=sleeps.append)

    # no sleep after the final attempt
    assert sleeps == [5, 2, 3, 1]


def test_max_rate_limit_retries_consumes_slot(reporter) -> None:
    policy = RetryPolicy(0, 0, 0, 0, max_rate_limit_retries=2)
    submit = ScriptedSubmit(HttpError(429), HttpError(429), HttpError(429), accepted_body())

    result = run_scrobble_loop(submit, 2, reporter, policy)

    assert submit.calls == 4
    assert result.accepted == 1
    assert result.outcomes[AttemptOutcome.RATE_LIMITED] == 3


def test_zero_repeat_makes_no_calls(reporter, fast_policy) -> None:
    submit = ScriptedSubmit()

    result = run_scrobble_loop(submit, 0, reporter, fast_policy)

    assert result.state is LoopState.DONE
    assert submit.calls == 0


def test_classify() -> None:
    assert classify(lambda: accepted_body(2))[0] is AttemptOutcome.ACCEPTED
    assert classify(lambda: {"error": 9, "message": "x"})[0] is AttemptOutcome.REJECTED_ZERO
    assert classify(ScriptedSubmit(HttpError(429)))[0] is AttemptOutcome.RATE_LIMITED
    assert classify(ScriptedSubmit(HttpError(403)))[0] is AttemptOutcome.TRANSIENT_ERROR
    assert classify(ScriptedSubmit(DailyLimitReached("x")))[0] is AttemptOutcome.DAILY_LIMIT_REACHED
    assert classify(ScriptedSubmit(RuntimeError("x")))[0] is AttemptOutcome.TRANSIENT_ERROR

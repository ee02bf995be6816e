from __future__ import annotations

import json
import logging
import time
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import DailyLimitReached, HttpError
from .openscrobbler import accepted_count

if TYPE_CHECKING:
    from .reporter import Reporter

log = logging.getLogger(__name__)

HTTP_TOO_MANY_REQUESTS = 429


class AttemptOutcome(Enum):
    ACCEPTED = "accepted"
    REJECTED_ZERO = "rejected_zero"
    RATE_LIMITED = "rate_limited"
    DAILY_LIMIT_REACHED = "daily_limit_reached"
    TRANSIENT_ERROR = "transient_error"


class LoopState(Enum):
    RUNNING = "running"
    STOPPED_BY_LIMIT = "stopped_by_limit"
    DONE = "done"


@dataclass(frozen=True)
class RetryPolicy:
    """Delays (seconds) and counting rules for the scrobble loop."""

    success_delay: float = 1.0
    rejected_delay: float = 2.0
    rate_limit_delay: float = 5.0
    error_delay: float = 2.0
    count_rejected_as_attempt: bool = False
    max_rate_limit_retries: int | None = None


@dataclass
class LoopResult:
    state: LoopState
    accepted: int = 0
    calls: int = 0
    outcomes: Counter = field(default_factory=Counter)

    @property
    def stopped_by_limit(self) -> bool:
        return self.state is LoopState.STOPPED_BY_LIMIT


def classify(submit: Callable[[], Any]) -> tuple[AttemptOutcome, Any]:
    """Run one submission and map its result or failure to an outcome.

    Returns the outcome together with the response body or the exception.
    """
    try:
        result = submit()
    except DailyLimitReached as e:
        return AttemptOutcome.DAILY_LIMIT_REACHED, e
    except HttpError as e:
        if e.status == HTTP_TOO_MANY_REQUESTS:
            return AttemptOutcome.RATE_LIMITED, e
        return AttemptOutcome.TRANSIENT_ERROR, e
    except Exception as e:
        return AttemptOutcome.TRANSIENT_ERROR, e

    if accepted_count(result) > 0:
        return AttemptOutcome.ACCEPTED, result
    return AttemptOutcome.REJECTED_ZERO, result


def _dump(result: Any) -> str:
    try:
        return json.dumps(result, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(result)


def run_scrobble_loop(
    submit: Callable[[], Any],
    repeat: int,
    reporter: Reporter,
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> LoopResult:
    """Submit the batch until `repeat` attempts are used up or the daily limit hits.

    Only accepted attempts and unexpected errors consume an attempt slot;
    HTTP 429 retries the same slot, and zero-accepted responses do too unless
    the policy counts them.
    """
    policy = policy or RetryPolicy()
    result = LoopResult(state=LoopState.RUNNING)
    attempt = 0
    consecutive_429 = 0

    while attempt < repeat and result.state is LoopState.RUNNING:
        number = attempt + 1
        reporter.info(f"Attempting scrobbling #{number}")

        outcome, payload = classify(submit)
        result.calls += 1
        result.outcomes[outcome] += 1
        log.debug("Attempt #%d (call %d) classified as %s", number, result.calls, outcome.value)

        if outcome is AttemptOutcome.RATE_LIMITED:
            consecutive_429 += 1
            if policy.max_rate_limit_retries is not None and consecutive_429 > policy.max_rate_limit_retries:
                log.warning("Giving up on slot #%d after %d rate limited retries", number, consecutive_429 - 1)
                outcome = AttemptOutcome.TRANSIENT_ERROR
        if outcome is not AttemptOutcome.RATE_LIMITED:
            consecutive_429 = 0

        if outcome is AttemptOutcome.ACCEPTED:
            reporter.success(f"Attempt #{number} completed ({accepted_count(payload)} accepted)")
            result.accepted += 1
            attempt += 1
            delay = policy.success_delay
        elif outcome is AttemptOutcome.REJECTED_ZERO:
            reporter.error(f"Scrobble #{number} failed: {_dump(payload)}")
            if policy.count_rejected_as_attempt:
                attempt += 1
            delay = policy.rejected_delay
        elif outcome is AttemptOutcome.RATE_LIMITED:
            reporter.error(f"Ratelimit hit at attempt #{number}, retrying in {policy.rate_limit_delay:g}s")
            delay = policy.rate_limit_delay
        elif outcome is AttemptOutcome.DAILY_LIMIT_REACHED:
            reporter.error(f"Daily scrobble limit reached at attempt #{number}: {payload}")
            result.state = LoopState.STOPPED_BY_LIMIT
            break
        else:
            reporter.error(f"Scrobble #{number} error: {payload}")
            attempt += 1
            delay = policy.error_delay

        if attempt < repeat and delay > 0:
            sleep(delay)

    if result.state is LoopState.RUNNING:
        result.state = LoopState.DONE
    return result

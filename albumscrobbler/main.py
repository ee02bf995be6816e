from __future__ import annotations

import argparse
import functools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from rich.prompt import IntPrompt, Prompt

from .config import Settings, configure_logging
from .context import RuntimeContext
from .errors import MissingInput, ScrobblerError, ValidationError
from .lastfm import lookup_album_tracks
from .openscrobbler import submit_scrobbles
from .reporter import ConsoleReporter, Reporter
from .retry import run_scrobble_loop

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_DAILY_LIMIT = 2
EXIT_INTERRUPTED = 130

REPEAT_VALIDATION_MESSAGE = "Must be a positive number"


@dataclass(frozen=True)
class RunInputs:
    artist: str
    album: str
    repeat: int


def _require_text(value: str | None) -> str:
    value = (value or "").strip()
    if not value:
        raise MissingInput("All inputs are required")
    return value


def collect_inputs(
    reporter: Reporter,
    artist: str | None = None,
    album: str | None = None,
    repeat: int | None = None,
    ask: Callable[..., str] | None = None,
    ask_int: Callable[..., int] | None = None,
) -> RunInputs:
    """Gather artist, album and repeat count, prompting for anything not given.

    A repeat count passed in directly is validated without prompting; a
    prompted one is asked again until it is positive.

    Raises:
        ValidationError: if a given repeat count is not positive
        MissingInput: if any input is empty or the prompt is closed
    """
    ask = ask or Prompt.ask
    ask_int = ask_int or IntPrompt.ask

    if repeat is not None and repeat <= 0:
        raise ValidationError(REPEAT_VALIDATION_MESSAGE)

    try:
        if artist is None:
            artist = ask("Enter artist name")
        if album is None:
            album = ask("Enter album name")
        while repeat is None:
            value = ask_int("How many times to scrobble?")
            if value is not None and value > 0:
                repeat = value
            else:
                reporter.error(REPEAT_VALIDATION_MESSAGE)
    except EOFError as e:
        raise MissingInput("All inputs are required") from e

    return RunInputs(artist=_require_text(artist), album=_require_text(album), repeat=repeat)


def run(
    ctx: RuntimeContext,
    inputs: RunInputs,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Look up the album, run the scrobble loop and report the summary."""
    reporter = ctx.reporter

    reporter.info(f'Fetching tracks for "{inputs.album}" by {inputs.artist}')
    try:
        tracks = lookup_album_tracks(ctx.settings, inputs.artist, inputs.album, session=ctx.session)
    except ScrobblerError as e:
        reporter.error(str(e))
        return EXIT_FAILURE

    reporter.info(f"Found {len(tracks)} track(s)")
    reporter.tracklist(tracks)

    submit = functools.partial(
        submit_scrobbles,
        ctx.settings,
        inputs.artist,
        inputs.album,
        tracks,
        session=ctx.session,
    )
    result = run_scrobble_loop(submit, inputs.repeat, reporter, ctx.settings.policy, sleep=sleep)
    log.info("Loop finished: state=%s accepted=%d calls=%d", result.state.value, result.accepted, result.calls)

    if result.stopped_by_limit:
        reporter.error(f"Stopped due to daily limit after {result.accepted} accepted attempt(s)")
        return EXIT_DAILY_LIMIT

    reporter.success("Scrobbling done")
    return EXIT_OK


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="album-scrobbler",
        description="Scrobble every track of an album to Open Scrobbler, several times over",
    )
    p.add_argument("--artist", default=None, help="Artist name (prompted if omitted)")
    p.add_argument("--album", default=None, help="Album name (prompted if omitted)")
    p.add_argument("--repeat", type=int, default=None, help="How many times to scrobble the album")
    return p.parse_args(argv)


def main(argv: list[str] | None = None, reporter: Reporter | None = None) -> int:
    """Command-line entry point. Returns the process exit code."""
    reporter = reporter or ConsoleReporter()
    args = parse_args(argv)

    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        inputs = collect_inputs(reporter, args.artist, args.album, args.repeat)
        return run(RuntimeContext(settings=settings, reporter=reporter), inputs)
    except ScrobblerError as e:
        reporter.error(str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        reporter.error("Interrupted")
        return EXIT_INTERRUPTED
    except Exception as e:
        log.debug("Unhandled error", exc_info=True)
        reporter.error(str(e) or "Unknown error occurred")
        return EXIT_FAILURE

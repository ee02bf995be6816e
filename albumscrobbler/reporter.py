from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from .lastfm import Track

log = logging.getLogger(__name__)


class Reporter(Protocol):
    """Sink for the human-readable run transcript."""

    def info(self, msg: str) -> None: ...

    def success(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...

    def tracklist(self, tracks: list[Track]) -> None: ...


class ConsoleReporter:
    """Write color-tagged status lines: info/success to stdout, errors to stderr."""

    def __init__(self, out: Console | None = None, err: Console | None = None) -> None:
        self.out = out or Console(highlight=False, soft_wrap=True)
        self.err = err or Console(stderr=True, highlight=False, soft_wrap=True)

    def _emit(self, console: Console, tag: str, style: str, msg: str) -> None:
        try:
            console.print(f"[{style}]\\[{tag}]:[/{style}] [bright_white]{escape(str(msg))}[/bright_white]")
        except Exception as e:
            log.debug("Could not write %s line: %s", tag, e)

    def info(self, msg: str) -> None:
        self._emit(self.out, "INFO", "cyan", msg)

    def success(self, msg: str) -> None:
        self._emit(self.out, "SUCCESS", "green", msg)

    def error(self, msg: str) -> None:
        self._emit(self.err, "ERROR", "red", msg)

    def tracklist(self, tracks: list[Track]) -> None:
        """Print the resolved tracklist, 1-indexed."""
        for i, t in enumerate(tracks, start=1):
            try:
                self.out.print(f"[yellow]{i}.[/yellow] [bright_white]{escape(t.name)}[/bright_white]")
            except Exception as e:
                log.debug("Could not write tracklist line: %s", e)

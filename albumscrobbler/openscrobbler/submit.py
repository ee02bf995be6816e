from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import requests

from ..errors import DailyLimitReached, HttpError, ScrobbleError

if TYPE_CHECKING:
    from ..config import Settings
    from ..lastfm import Track

log = logging.getLogger(__name__)

SCROBBLE_URL = "https://openscrobbler.com/api/v2/scrobble.php"

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:138.0) Gecko/20100101 Firefox/138.0",
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.5",
    "Content-Type": "application/x-www-form-urlencoded",
}

DAILY_LIMIT_ERROR_CODE = 29


def build_scrobble_form(
    artist: str,
    album: str,
    tracks: list[Track],
    base_ts: int,
) -> list[tuple[str, str]]:
    """Build the indexed form fields for one batch; track i is stamped base_ts + i."""
    fields: list[tuple[str, str]] = []
    for i, t in enumerate(tracks):
        fields.append((f"artist[{i}]", artist))
        fields.append((f"track[{i}]", t.name))
        fields.append((f"album[{i}]", album))
        fields.append((f"timestamp[{i}]", str(base_ts + i)))
    return fields


def accepted_count(result: Any) -> int:
    """Return scrobbles.@attr.accepted as an int, 0 when absent or malformed."""
    if not isinstance(result, dict):
        return 0
    scrobbles = result.get("scrobbles")
    if not isinstance(scrobbles, dict):
        return 0
    attr = scrobbles.get("@attr")
    if not isinstance(attr, dict):
        return 0
    try:
        return max(0, int(attr.get("accepted", 0)))
    except (TypeError, ValueError):
        return 0


def _is_daily_limit(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    try:
        code = int(data.get("error"))
    except (TypeError, ValueError):
        return False
    message = str(data.get("message") or "")
    return code == DAILY_LIMIT_ERROR_CODE and "rate limit" in message.lower()


def submit_scrobbles(
    settings: Settings,
    artist: str,
    album: str,
    tracks: list[Track],
    session: requests.Session | None = None,
    now: int | None = None,
) -> dict[str, Any]:
    """Send one scrobble batch covering the whole tracklist.

    Raises:
        HttpError: on a non-2xx status (429 signals short-lived throttling)
        DailyLimitReached: when the body carries error 29 / rate limit
        ScrobbleError: when the body is not valid JSON
    """
    session = session or requests.Session()
    base_ts = int(time.time()) if now is None else now
    form = build_scrobble_form(artist, album, tracks, base_ts)

    headers = dict(BROWSER_HEADERS)
    headers["Cookie"] = f"PHPSESSID={settings.session_id}"

    log.debug("Submitting %d scrobble(s) starting at ts=%d", len(tracks), base_ts)
    resp = session.post(SCROBBLE_URL, data=form, headers=headers, timeout=settings.http_timeout)

    if not 200 <= resp.status_code < 300:
        raise HttpError(resp.status_code, resp.reason or "")

    try:
        data = resp.json()
    except ValueError as e:
        raise ScrobbleError(f"Invalid JSON in scrobble response: {e}") from e

    if _is_daily_limit(data):
        raise DailyLimitReached(str(data.get("message")))

    return data

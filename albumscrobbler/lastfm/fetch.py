from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import requests

from ..errors import NotFound
from ..normalization import candidate_encodings, encode_component
from .track import Track

if TYPE_CHECKING:
    from ..config import Settings

log = logging.getLogger(__name__)

LASTFM_API_URL = "https://ws.audioscrobbler.com/2.0/"


def build_album_url(api_key: str, artist: str, encoded_album: str) -> str:
    """Build an album.getinfo URL for an already-encoded album title."""
    # album is pre-encoded, so the query string cannot go through requests' params
    return (
        f"{LASTFM_API_URL}?method=album.getinfo"
        f"&api_key={encode_component(api_key)}"
        f"&artist={encode_component(artist)}"
        f"&album={encoded_album}"
        f"&format=json"
    )


def parse_album_tracks(data: Any) -> list[Track]:
    """Extract the ordered tracklist from an album.getinfo response body."""
    if not isinstance(data, dict):
        return []
    album = data.get("album")
    if not isinstance(album, dict):
        return []
    tracks_obj = album.get("tracks")
    if not isinstance(tracks_obj, dict):
        return []

    raw = tracks_obj.get("track")
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        return []

    tracks: list[Track] = []
    for t in raw:
        if not isinstance(t, dict):
            continue
        name = t.get("name")
        if isinstance(name, str) and name.strip():
            tracks.append(Track(name=name))
    return tracks


def _try_candidate(
    session: requests.Session,
    url: str,
    timeout: float,
) -> list[Track]:
    try:
        resp = session.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        log.debug("Catalog request failed: %s", e)
        return []

    if not 200 <= resp.status_code < 300:
        log.debug("Catalog returned HTTP %d", resp.status_code)
        return []

    try:
        data = resp.json()
    except ValueError as e:
        log.debug("Catalog returned invalid JSON: %s", e)
        return []

    return parse_album_tracks(data)


def lookup_album_tracks(
    settings: Settings,
    artist: str,
    album: str,
    session: requests.Session | None = None,
) -> list[Track]:
    """Resolve an artist/album pair to its tracklist.

    Each encoding of the album title is tried in turn until the catalog
    returns a non-empty tracklist.

    Raises:
        NotFound: if no encoding yields any tracks
    """
    session = session or requests.Session()
    tried: set[str] = set()

    for index, candidate in enumerate(candidate_encodings(album), start=1):
        if candidate in tried:
            continue
        tried.add(candidate)

        log.debug("Catalog lookup candidate %d: album=%s", index, candidate)
        url = build_album_url(settings.api_key, artist, candidate)
        tracks = _try_candidate(session, url, settings.http_timeout)
        if tracks:
            log.debug("Candidate %d matched %d track(s)", index, len(tracks))
            return tracks

    raise NotFound("Album or tracks not found")

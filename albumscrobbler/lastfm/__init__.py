from .fetch import LASTFM_API_URL, build_album_url, lookup_album_tracks, parse_album_tracks
from .track import Track

__all__ = [
    "LASTFM_API_URL",
    "Track",
    "build_album_url",
    "lookup_album_tracks",
    "parse_album_tracks",
]

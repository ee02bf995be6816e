from .lastfm import Track, lookup_album_tracks
from .openscrobbler import submit_scrobbles
from .retry import AttemptOutcome, LoopResult, LoopState, RetryPolicy, run_scrobble_loop

__all__ = [
    "Track",
    "lookup_album_tracks",
    "submit_scrobbles",
    "AttemptOutcome",
    "LoopResult",
    "LoopState",
    "RetryPolicy",
    "run_scrobble_loop",
]

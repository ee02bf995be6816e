from .submit import (
    SCROBBLE_URL,
    accepted_count,
    build_scrobble_form,
    submit_scrobbles,
)

__all__ = [
    "SCROBBLE_URL",
    "accepted_count",
    "build_scrobble_form",
    "submit_scrobbles",
]

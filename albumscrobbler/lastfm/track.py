from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Track:
    """A single album track as listed by the Last.fm catalog."""

    name: str

"""
Track and catalog domain models.

Contains immutable data structures for playlist tracks, authoritative
key/tempo records and the result of resolving one against the other.
"""

from dataclasses import dataclass
from typing import Literal, NamedTuple, Optional, Union

Modality = Literal["major", "minor"]

MAJOR: Modality = "major"
MINOR: Modality = "minor"


@dataclass(frozen=True)
class CatalogEntry:
    """Authoritative key/tempo record from the local catalog or a remote lookup.

    The key may be a pitch class (0-11, paired with modality), a Camelot
    label ("8A") or a raw key name ("F♯m"); it is interpreted lazily by
    the key translator.
    """

    title: str
    artist: str
    tempo: Optional[float] = None  # BPM
    key: Optional[Union[int, str]] = None
    modality: Optional[Modality] = None
    duration_ms: Optional[int] = None


@dataclass(frozen=True)
class InputTrack:
    """A playlist track as read from the playlist host."""

    track_id: str  # Stable handle used for write-back
    title: str
    artist: str  # Primary artist only
    duration_ms: Optional[int] = None
    position: int = 0  # Index in the original playlist order


class KeyInfo(NamedTuple):
    """Canonical musical key: pitch class (C=0 ... B=11) plus modality."""

    pitch_class: int
    modality: Modality


@dataclass(frozen=True)
class ResolvedTrack:
    """An input track with its (possibly absent) key and tempo resolution."""

    track: InputTrack
    key: Optional[KeyInfo] = None
    tempo: Optional[float] = None
    camelot: Optional[str] = None
    source: Optional[str] = None  # "local", "getsongbpm", ...

    @property
    def is_resolved(self) -> bool:
        """True only when both key and a positive tempo are known."""
        return self.key is not None and self.tempo is not None and self.tempo > 0

    @property
    def position(self) -> int:
        return self.track.position

    @classmethod
    def unresolved(cls, track: InputTrack) -> "ResolvedTrack":
        return cls(track=track)

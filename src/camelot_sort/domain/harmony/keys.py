"""
Musical key parsing and Camelot wheel translation.

Two notations are supported:
- Pitch class + modality: C=0, C#/Db=1, ... B=11, major or minor
- Camelot wheel: 1A-12B, where adjacent numbers are a perfect fifth apart,
  A is minor and B is its relative major

Usage:
    >>> to_camelot(0, "major")
    '8B'
    >>> from_camelot("8A")
    KeyInfo(pitch_class=9, modality='minor')
    >>> parse_key("F♯m")
    KeyInfo(pitch_class=6, modality='minor')
"""

import re
from typing import Dict, Tuple

from ...errors import KeyParseError
from ..library.models import MAJOR, MINOR, CatalogEntry, KeyInfo, Modality
from ..library.normalize import normalize_accidentals

# (pitch_class, modality) -> Camelot label
CAMELOT_WHEEL: Dict[Tuple[int, Modality], str] = {
    (11, MAJOR): "1B",  # B
    (8, MINOR): "1A",  # G#m / Abm
    (6, MAJOR): "2B",  # F# / Gb
    (3, MINOR): "2A",  # D#m / Ebm
    (1, MAJOR): "3B",  # Db
    (10, MINOR): "3A",  # Bbm
    (8, MAJOR): "4B",  # Ab
    (5, MINOR): "4A",  # Fm
    (3, MAJOR): "5B",  # Eb
    (0, MINOR): "5A",  # Cm
    (10, MAJOR): "6B",  # Bb
    (7, MINOR): "6A",  # Gm
    (5, MAJOR): "7B",  # F
    (2, MINOR): "7A",  # Dm
    (0, MAJOR): "8B",  # C
    (9, MINOR): "8A",  # Am
    (7, MAJOR): "9B",  # G
    (4, MINOR): "9A",  # Em
    (2, MAJOR): "10B",  # D
    (11, MINOR): "10A",  # Bm
    (9, MAJOR): "11B",  # A
    (6, MINOR): "11A",  # F#m
    (4, MAJOR): "12B",  # E
    (1, MINOR): "12A",  # C#m / Dbm
}

CAMELOT_TO_KEY: Dict[str, KeyInfo] = {
    label: KeyInfo(pitch, mode) for (pitch, mode), label in CAMELOT_WHEEL.items()
}

_NATURALS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
_ACCIDENTAL_OFFSET = {"": 0, "#": 1, "b": -1}

# Root letter, optional accidental, optional modality word; nothing else
_KEY_PATTERN = re.compile(
    r"^\s*([A-Ga-g])([#b]?)[\s\-_]*((?i:m|min|minor|maj|major)?)\s*$"
)
_MINOR_WORDS = ("m", "min", "minor")
_CAMELOT_PATTERN = re.compile(r"^\s*(\d{1,2})\s*([AaBb])\s*$")


def parse_key(raw: str) -> KeyInfo:
    """Parse a key name such as "Am", "F♯ minor", "Eb", "C major".

    Args:
        raw: Key text from an external source

    Returns:
        Canonical KeyInfo

    Raises:
        KeyParseError: If the text is not a root note (A-G with optional #/b)
            followed by at most a modality word
    """
    if not isinstance(raw, str):
        raise KeyParseError(raw)

    match = _KEY_PATTERN.match(normalize_accidentals(raw))
    if not match:
        raise KeyParseError(raw)

    letter, accidental, mode_word = match.groups()
    pitch_class = (_NATURALS[letter.upper()] + _ACCIDENTAL_OFFSET[accidental]) % 12
    modality = MINOR if mode_word.lower() in _MINOR_WORDS else MAJOR
    return KeyInfo(pitch_class, modality)


def to_camelot(pitch_class: int, modality: Modality) -> str:
    """Translate pitch class + modality to its Camelot label.

    Raises:
        KeyParseError: If pitch class is outside 0-11 or modality is unknown
    """
    try:
        return CAMELOT_WHEEL[(pitch_class, modality)]
    except (KeyError, TypeError):
        raise KeyParseError((pitch_class, modality)) from None


def from_camelot(label: str) -> KeyInfo:
    """Translate a Camelot label ("1A"-"12B", case-insensitive) to KeyInfo.

    Raises:
        KeyParseError: If label is not a valid Camelot label
    """
    if not isinstance(label, str):
        raise KeyParseError(label)

    match = _CAMELOT_PATTERN.match(label)
    if not match:
        raise KeyParseError(label, f"Not a Camelot label: {label!r}")

    number, letter = match.groups()
    canonical = f"{int(number)}{letter.upper()}"
    if canonical not in CAMELOT_TO_KEY:
        raise KeyParseError(label, f"Camelot number out of range: {label!r}")
    return CAMELOT_TO_KEY[canonical]


def split_camelot(label: str) -> Tuple[int, str]:
    """Split a valid Camelot label into (number, letter)."""
    key = from_camelot(label)
    canonical = CAMELOT_WHEEL[key]
    return int(canonical[:-1]), canonical[-1]


def resolve_entry_key(entry: CatalogEntry) -> KeyInfo:
    """Interpret a catalog entry's key field.

    Integer keys are pitch classes and need the entry's modality. Text keys
    are tried as Camelot labels first, then as key names; for key names the
    entry's modality, when present, overrides the one in the text.

    Raises:
        KeyParseError: If the key is missing or cannot be interpreted
    """
    key = entry.key
    if key is None:
        raise KeyParseError(key, "Key unknown")

    if isinstance(key, bool):
        raise KeyParseError(key)

    if isinstance(key, int):
        if not 0 <= key <= 11 or entry.modality not in (MAJOR, MINOR):
            raise KeyParseError((key, entry.modality))
        return KeyInfo(key, entry.modality)

    try:
        return from_camelot(key)
    except KeyParseError:
        parsed = parse_key(key)

    # An explicit modality field wins over one inferred from the key name
    if entry.modality in (MAJOR, MINOR):
        return KeyInfo(parsed.pitch_class, entry.modality)
    return parsed


NOTE_NAMES = ("C", "C#", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B")


def key_name(key: KeyInfo) -> str:
    """Short display name, e.g. KeyInfo(9, "minor") -> "Am"."""
    suffix = "m" if key.modality == MINOR else ""
    return f"{NOTE_NAMES[key.pitch_class]}{suffix}"

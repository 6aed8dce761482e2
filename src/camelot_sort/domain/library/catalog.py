"""
Local key/tempo catalog.

Loads a JSON array of track records (by default ``local_db.json``) and
answers candidate queries by normalized title. Both the legacy record
format and the full one are accepted:

    {"name": "Song", "artist": "Drake", "bpm": 120, "key_camelot": "8A"}
    {"title": "Song", "artist": "Drake", "tempo": 120, "key": 9, "mode": "minor",
     "duration_ms": 200000}
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from ...errors import CatalogError
from .models import MAJOR, MINOR, CatalogEntry
from .normalize import normalize
from .provider import parse_duration_ms, parse_tempo

_TITLE_FIELDS = ("title", "name")
_TEMPO_FIELDS = ("tempo", "bpm")
_KEY_FIELDS = ("key", "key_camelot", "key_of")
_MODE_FIELDS = ("mode", "modality")
_DURATION_FIELDS = ("duration_ms", "duration")


def _first(record: Mapping[str, Any], fields: Tuple[str, ...]) -> Any:
    for name in fields:
        if record.get(name) not in (None, ""):
            return record[name]
    return None


def _parse_modality(value: Any) -> Optional[str]:
    """Accept "major"/"minor", "maj"/"min" and the 1/0 convention."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return {1: MAJOR, 0: MINOR}.get(int(value))
    text = str(value).strip().lower()
    if text in ("major", "maj"):
        return MAJOR
    if text in ("minor", "min"):
        return MINOR
    return None


def entry_from_record(record: Any) -> Optional[CatalogEntry]:
    """Build a CatalogEntry from one JSON record.

    Returns:
        CatalogEntry, or None if the record lacks a text title or artist
    """
    if not isinstance(record, dict):
        return None

    title = _first(record, _TITLE_FIELDS)
    artist = record.get("artist")
    if not isinstance(title, str) or not isinstance(artist, str):
        return None
    if not title.strip():
        return None

    key = _first(record, _KEY_FIELDS)
    if not isinstance(key, (int, str)) or isinstance(key, bool):
        key = None

    return CatalogEntry(
        title=title,
        artist=artist.strip(),
        tempo=parse_tempo(_first(record, _TEMPO_FIELDS)),
        key=key.strip() if isinstance(key, str) else key,
        modality=_parse_modality(_first(record, _MODE_FIELDS)),
        duration_ms=parse_duration_ms(_first(record, _DURATION_FIELDS)),
    )


class LocalCatalog:
    """Read-only catalog indexed by normalized title."""

    name = "local"

    def __init__(self, entries: Sequence[CatalogEntry]):
        self._entries: Tuple[CatalogEntry, ...] = tuple(entries)
        index: Dict[str, List[CatalogEntry]] = {}
        for entry in self._entries:
            index.setdefault(normalize(entry.title), []).append(entry)
        self._by_title = {title: tuple(items) for title, items in index.items()}

    def __len__(self) -> int:
        return len(self._entries)

    def __call__(self, title: str, artist: str) -> Sequence[CatalogEntry]:
        return self._by_title.get(normalize(title), ())

    @property
    def entries(self) -> Tuple[CatalogEntry, ...]:
        return self._entries


def load_catalog(path: Path) -> LocalCatalog:
    """Load the local catalog file.

    A missing file yields an empty catalog. Malformed records are skipped.

    Args:
        path: Path to the JSON catalog

    Returns:
        LocalCatalog

    Raises:
        CatalogError: If the file exists but is not a JSON array
    """
    path = Path(path).expanduser()
    if not path.exists():
        logger.warning(f"Catalog file not found: {path}, continuing with empty catalog")
        return LocalCatalog([])

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e

    if not isinstance(data, list):
        raise CatalogError(f"Catalog {path} must contain a JSON array of tracks")

    entries = []
    skipped = 0
    for i, record in enumerate(data):
        entry = entry_from_record(record)
        if entry is None:
            skipped += 1
            logger.warning(f"Skipping malformed catalog record #{i}: {record!r}")
            continue
        entries.append(entry)

    logger.info(f"Loaded {len(entries)} catalog entries from {path} ({skipped} skipped)")
    return LocalCatalog(entries)

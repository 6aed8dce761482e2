"""Tests for the local key/tempo catalog."""

import json
from pathlib import Path

import pytest

from camelot_sort.domain.library.catalog import LocalCatalog, entry_from_record, load_catalog
from camelot_sort.domain.library.models import CatalogEntry
from camelot_sort.errors import CatalogError, SetupError


def _write(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestEntryFromRecord:
    """Tests for entry_from_record field handling."""

    def test_legacy_record(self) -> None:
        entry = entry_from_record(
            {"name": "Hotline Bling", "artist": "Drake", "bpm": 135, "key_camelot": "4A"}
        )
        assert entry == CatalogEntry(title="Hotline Bling", artist="Drake", tempo=135.0, key="4A")

    def test_full_record(self) -> None:
        entry = entry_from_record(
            {
                "title": "Song",
                "artist": "Artist",
                "tempo": "120.5",
                "key": 9,
                "mode": "minor",
                "duration_ms": 200000,
            }
        )
        assert entry.tempo == 120.5
        assert entry.key == 9
        assert entry.modality == "minor"
        assert entry.duration_ms == 200000

    def test_title_kept_verbatim(self) -> None:
        """The exact-title bonus compares original text, so titles are not trimmed."""
        entry = entry_from_record({"name": "Song ", "artist": " Drake ", "bpm": 120})
        assert entry.title == "Song "
        assert entry.artist == "Drake"

    def test_numeric_modality(self) -> None:
        assert entry_from_record({"title": "a", "artist": "b", "mode": 1}).modality == "major"
        assert entry_from_record({"title": "a", "artist": "b", "mode": 0}).modality == "minor"

    def test_duration_in_seconds(self) -> None:
        entry = entry_from_record({"title": "a", "artist": "b", "duration": 215})
        assert entry.duration_ms == 215000

    def test_invalid_tempo_becomes_none(self) -> None:
        assert entry_from_record({"title": "a", "artist": "b", "bpm": "fast"}).tempo is None
        assert entry_from_record({"title": "a", "artist": "b", "bpm": 0}).tempo is None

    @pytest.mark.parametrize(
        "record",
        [
            None,
            [],
            "Song",
            {"artist": "Drake"},
            {"name": "Song"},
            {"name": "  ", "artist": "Drake"},
            {"name": 42, "artist": "Drake"},
        ],
    )
    def test_malformed_records(self, record) -> None:
        assert entry_from_record(record) is None


class TestLocalCatalog:
    """Tests for LocalCatalog lookups."""

    def test_lookup_by_normalized_title(self) -> None:
        entry = CatalogEntry(title="Maldición", artist="X", tempo=100, key="1A")
        catalog = LocalCatalog([entry])

        assert catalog("MALDICION", "anyone") == (entry,)
        assert catalog("Other", "X") == ()

    def test_duplicate_titles_keep_file_order(self) -> None:
        first = CatalogEntry(title="Song", artist="A")
        second = CatalogEntry(title="song", artist="B")
        catalog = LocalCatalog([first, second])

        assert catalog("Song", "") == (first, second)
        assert len(catalog) == 2
        assert catalog.name == "local"


class TestLoadCatalog:
    """Tests for load_catalog file handling."""

    def test_loads_valid_records(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "local_db.json",
            [
                {"name": "A", "artist": "X", "bpm": 120, "key_camelot": "8A"},
                {"name": "B", "artist": "Y", "bpm": 128, "key_camelot": "9B"},
            ],
        )
        catalog = load_catalog(path)
        assert len(catalog) == 2
        assert catalog.entries[1].title == "B"

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        catalog = load_catalog(tmp_path / "nope.json")
        assert len(catalog) == 0

    def test_malformed_records_skipped(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "db.json",
            [{"name": "A", "artist": "X"}, {"artist": "no title"}, 5, {"name": "B", "artist": "Y"}],
        )
        catalog = load_catalog(path)
        assert [e.title for e in catalog.entries] == ["A", "B"]

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "db.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_top_level_must_be_array(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "db.json", {"name": "A", "artist": "X"})
        with pytest.raises(SetupError):
            load_catalog(path)

"""Tests for title/artist normalization."""

import pytest

from camelot_sort.domain.library.normalize import normalize, normalize_accidentals, strip_marks


class TestNormalize:
    """Tests for normalize function."""

    def test_accents_removed(self) -> None:
        """Accented letters fold to their base letter."""
        assert normalize("Maldición") == "maldicion"
        assert normalize("Beyoncé") == "beyonce"

    def test_case_folded(self) -> None:
        """Case differences disappear."""
        assert normalize("HOTLINE Bling") == "hotline bling"
        assert normalize("Straße") == "strasse"

    def test_whitespace_collapsed_and_trimmed(self) -> None:
        """Runs of whitespace collapse to one space; ends are trimmed."""
        assert normalize("  Song \t  Name\n ") == "song name"

    def test_curly_quotes_become_ascii(self) -> None:
        """Typographic quotes compare equal to ASCII ones."""
        assert normalize("Don’t Stop") == normalize("Don't Stop")
        assert normalize("“Quoted”") == '"quoted"'

    def test_parentheticals_kept(self) -> None:
        """Remix markers distinguish tracks, so they are preserved."""
        assert normalize("Song (Remix)") == "song (remix)"
        assert normalize("Song (Remix)") != normalize("Song")

    def test_accidentals_become_ascii(self) -> None:
        """Sharp and flat glyphs become # and b."""
        assert normalize("F♯ Minor") == "f# minor"
        assert normalize("E♭") == "eb"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_input(self, value) -> None:
        """None, empty and blank input normalize to an empty string."""
        assert normalize(value) == ""

    @pytest.mark.parametrize(
        "value",
        ["Maldición", "İstanbul", "Don’t  Stop", "Ｆｕｌｌｗｉｄｔｈ", "Sigur Rós", "«Ça»"],
    )
    def test_idempotent(self, value) -> None:
        """Normalizing twice gives the same result as normalizing once."""
        once = normalize(value)
        assert normalize(once) == once

    def test_unknown_characters_pass_through(self) -> None:
        """Scripts without a decomposition are left alone."""
        assert normalize("日本語") == "日本語"


class TestHelpers:
    """Tests for the building-block helpers."""

    def test_strip_marks(self) -> None:
        assert strip_marks("Café") == "Cafe"

    def test_normalize_accidentals_keeps_case(self) -> None:
        assert normalize_accidentals("C♯m") == "C#m"
        assert normalize_accidentals("B♭") == "Bb"

"""
Text normalization for track matching.

Folds titles and artist names into a canonical form so that noisy
metadata from different sources compares equal:

    >>> normalize("  Maldición  ")
    'maldicion'
    >>> normalize("Song (Remix)")
    'song (remix)'

Parenthetical content is kept on purpose; "(Remix)" distinguishes tracks.
"""

import re
import unicodedata
from typing import Optional

# Unicode accidentals -> ASCII
_ACCIDENTALS = str.maketrans({"♯": "#", "♭": "b"})

# Quote-style characters -> ASCII equivalents
_QUOTES = str.maketrans(
    {
        "‘": "'",  # left single quote
        "’": "'",  # right single quote / apostrophe
        "‚": "'",  # single low-9 quote
        "‛": "'",  # single high-reversed-9 quote
        "′": "'",  # prime
        "`": "'",
        "“": '"',  # left double quote
        "”": '"',  # right double quote
        "„": '"',  # double low-9 quote
        "″": '"',  # double prime
        "«": '"',  # left guillemet
        "»": '"',  # right guillemet
    }
)

_WHITESPACE = re.compile(r"\s+")


def normalize_accidentals(text: str) -> str:
    """Replace Unicode sharp/flat glyphs with '#' and 'b'."""
    return text.translate(_ACCIDENTALS)


def strip_marks(text: str) -> str:
    """Decompose accented characters and drop the combining marks."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(text: Optional[str]) -> str:
    """Normalize a title or artist name for comparison.

    Pipeline: strip accents, ASCII accidentals, casefold, collapse
    whitespace, ASCII quotes. Never raises; unknown characters pass through.

    Args:
        text: Raw title or artist (None is treated as empty)

    Returns:
        Normalized string
    """
    if not text:
        return ""

    s = strip_marks(text)
    s = normalize_accidentals(s)
    # casefold can reintroduce combining marks (e.g. "İ")
    s = strip_marks(s.casefold())
    s = _WHITESPACE.sub(" ", s).strip()
    return s.translate(_QUOTES)

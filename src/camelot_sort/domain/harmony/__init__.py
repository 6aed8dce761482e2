"""Musical key notation: pitch class + modality and the Camelot wheel."""

from .keys import (
    CAMELOT_WHEEL,
    from_camelot,
    key_name,
    parse_key,
    resolve_entry_key,
    to_camelot,
)

__all__ = [
    "CAMELOT_WHEEL",
    "from_camelot",
    "key_name",
    "parse_key",
    "resolve_entry_key",
    "to_camelot",
]

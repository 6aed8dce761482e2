"""camelot-sort: reorder playlists by Camelot key and tempo."""

__version__ = "0.1.0"

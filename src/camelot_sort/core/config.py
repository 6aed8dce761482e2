"""
Configuration management for camelot-sort
"""

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

VALID_SORT_MODES = ("camelot", "pitch")


@dataclass
class SpotifyConfig:
    """Configuration for the Spotify playlist host."""

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = "http://localhost:8080/callback"


@dataclass
class GetSongBPMConfig:
    """Configuration for the GetSongBPM remote lookup."""

    enabled: bool = True
    api_key: str = ""
    base_url: str = "https://api.getsong.co"
    timeout: float = 30.0
    limit: int = 5


@dataclass
class CatalogConfig:
    """Configuration for the local key/tempo catalog."""

    path: str = "local_db.json"


@dataclass
class LookupConfig:
    """Configuration for per-track lookups."""

    max_workers: int = 1  # >1 runs lookups in a thread pool

    def validate(self) -> None:
        """Raises ValueError if max_workers is not a positive integer."""
        if not isinstance(self.max_workers, int) or self.max_workers < 1:
            raise ValueError(f"max_workers must be a positive integer, got {self.max_workers!r}")


@dataclass
class SortingConfig:
    """Configuration for playlist ordering."""

    mode: str = "camelot"  # camelot or pitch

    def validate(self) -> None:
        """Raises ValueError if mode is unknown."""
        if self.mode not in VALID_SORT_MODES:
            raise ValueError(
                f"Invalid sort mode: {self.mode!r}. Valid modes are: {VALID_SORT_MODES}"
            )


@dataclass
class MatchingConfig:
    """Scoring weights for catalog matching (defaults are the documented policy)."""

    exact_artist: int = 100
    partial_artist: int = 80
    duration_match: int = 50
    duration_mismatch: int = -50
    exact_title: int = 20
    duration_tolerance_ms: int = 5000


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # Default: ~/.local/share/camelot-sort/camelot-sort.log
    console_output: bool = False  # Also log to stderr


@dataclass
class Config:
    """Main configuration object."""

    spotify: SpotifyConfig = field(default_factory=SpotifyConfig)
    getsongbpm: GetSongBPMConfig = field(default_factory=GetSongBPMConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)
    sorting: SortingConfig = field(default_factory=SortingConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "camelot-sort"
    return Path.home() / ".config" / "camelot-sort"


def get_data_dir() -> Path:
    """Get the data directory path (logs, tokens)."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "camelot-sort"
    return Path.home() / ".local" / "share" / "camelot-sort"


def _find_project_config() -> Optional[Path]:
    """Find config.toml next to pyproject.toml when running from a checkout."""
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            return config_path if config_path.exists() else None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. XDG_CONFIG_HOME/camelot-sort (or ~/.config/camelot-sort)
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def _section(cls, data: Dict[str, Any], default):
    """Build a section dataclass from TOML data, ignoring unknown keys."""
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        logger.warning(f"Ignoring unknown {cls.__name__} keys: {sorted(unknown)}")
    values = {name: data.get(name, getattr(default, name)) for name in known}
    return cls(**values)


def _apply_env_overrides(config: Config) -> None:
    """Environment variables override TOML values.

    - SPOTIFY_CLIENT_ID / RSPOTIFY_CLIENT_ID
    - SPOTIFY_CLIENT_SECRET / RSPOTIFY_CLIENT_SECRET
    - SPOTIFY_REDIRECT_URI / RSPOTIFY_REDIRECT_URI
    - GETSONGBPM_API_KEY
    """
    overrides = {
        "client_id": ("SPOTIFY_CLIENT_ID", "RSPOTIFY_CLIENT_ID"),
        "client_secret": ("SPOTIFY_CLIENT_SECRET", "RSPOTIFY_CLIENT_SECRET"),
        "redirect_uri": ("SPOTIFY_REDIRECT_URI", "RSPOTIFY_REDIRECT_URI"),
    }
    for attr, names in overrides.items():
        for name in names:
            value = os.environ.get(name)
            if value:
                setattr(config.spotify, attr, value)
                break

    api_key = os.environ.get("GETSONGBPM_API_KEY")
    if api_key:
        config.getsongbpm.api_key = api_key


def _load_env_files() -> None:
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    # .env in the working directory
    load_dotenv(Path.cwd() / ".env")


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    Args:
        config_path: Explicit config file (default: see get_config_path)

    Returns:
        Config with environment overrides applied
    """
    _load_env_files()

    config_path = Path(config_path) if config_path else get_config_path()
    config = Config()

    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Error loading configuration from {config_path}: {e}")
            toml_data = {}

        for name in ("spotify", "getsongbpm", "catalog", "lookup", "sorting", "matching", "logging"):
            if not isinstance(toml_data.get(name), dict):
                continue
            default = getattr(config, name)
            setattr(config, name, _section(type(default), toml_data[name], default))

        if config.catalog.path:
            config.catalog.path = str(Path(config.catalog.path).expanduser())
        if config.logging.log_file:
            config.logging.log_file = str(Path(config.logging.log_file).expanduser())
        config.logging.level = str(config.logging.level).upper()
    else:
        logger.debug(f"No configuration file at {config_path}, using defaults")

    for name in ("sorting", "lookup"):
        section = getattr(config, name)
        try:
            section.validate()
        except ValueError as e:
            logger.warning(f"Invalid {name} configuration: {e}. Using defaults.")
            setattr(config, name, type(section)())

    _apply_env_overrides(config)
    return config


"""Core infrastructure layer - no domain dependencies.

This module provides foundation-level services:
- Configuration management (TOML + .env)
- Logging and user-facing output (Loguru)
- Console tables (Rich)
"""

from .config import Config, get_config_dir, get_config_path, get_data_dir, load_config
from .output import log, setup_loguru

__all__ = [
    "Config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "load_config",
    "log",
    "setup_loguru",
]

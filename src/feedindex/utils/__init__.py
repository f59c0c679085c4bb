"""Utility functions and helpers for feedindex."""

from feedindex.utils.errors import (
    ConfigError,
    EpisodeLoadError,
    FeedIndexError,
    InvalidConfigError,
    InvalidYearRangeError,
    QueryError,
    UnknownGroupingError,
)
from feedindex.utils.paths import get_config_dir, get_config_file

__all__ = [
    # Errors
    "FeedIndexError",
    "ConfigError",
    "InvalidConfigError",
    "QueryError",
    "InvalidYearRangeError",
    "UnknownGroupingError",
    "EpisodeLoadError",
    # Paths
    "get_config_dir",
    "get_config_file",
]

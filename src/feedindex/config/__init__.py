"""Configuration loading, schema and logging setup."""

from feedindex.config.logging import setup_logging
from feedindex.config.manager import ConfigManager
from feedindex.config.schema import GlobalConfig, IndexConfig

__all__ = ["ConfigManager", "GlobalConfig", "IndexConfig", "setup_logging"]

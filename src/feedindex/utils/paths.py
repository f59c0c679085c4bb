"""XDG-compliant path helpers."""

from pathlib import Path

import platformdirs

APP_NAME = "feedindex"


def get_config_dir() -> Path:
    """Get the user configuration directory for feedindex."""
    return Path(platformdirs.user_config_dir(APP_NAME))


def get_config_file() -> Path:
    """Get the path to the global config file."""
    return get_config_dir() / "config.yaml"

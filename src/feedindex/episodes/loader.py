"""Load already-decoded episode descriptors from JSON or YAML files.

The file holds either a list of descriptors or an object with optional
``metadata`` and an ``episodes`` list. Descriptor values are expected to be
decoded already; no feed markup is parsed here.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from feedindex.episodes.models import EpisodeRecord, FeedMetadata
from feedindex.utils.errors import EpisodeLoadError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def _read_document(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise EpisodeLoadError(f"Cannot read episode file {path}: {e}") from e

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise EpisodeLoadError(f"Invalid episode file {path}: {e}") from e


def load_episodes(path: Path) -> tuple[FeedMetadata, list[EpisodeRecord]]:
    """Load feed metadata and episode records from ``path``.

    Args:
        path: JSON (default) or YAML file

    Returns:
        Tuple of (metadata, episodes in file order)

    Raises:
        EpisodeLoadError: If the file is missing, unparsable, or has no
            episode list
    """
    document = _read_document(path)

    if isinstance(document, list):
        metadata_data: Any = {}
        descriptors = document
    elif isinstance(document, dict) and isinstance(document.get("episodes"), list):
        metadata_data = document.get("metadata") or {}
        descriptors = document["episodes"]
    else:
        raise EpisodeLoadError(
            f"{path} must contain a list of episodes or an object with an 'episodes' list"
        )

    if not isinstance(metadata_data, dict):
        logger.warning("Ignoring non-object metadata in %s", path)
        metadata_data = {}

    metadata = FeedMetadata.model_validate(metadata_data)
    episodes = [EpisodeRecord.from_descriptor(item) for item in descriptors]

    logger.debug("Loaded %d episode descriptors from %s", len(episodes), path)
    return metadata, episodes

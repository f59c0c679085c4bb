"""Tag normalization and tag-based grouping.

Tags are compared by a folded key: lowercase, trimmed, with one plural "s"
removed. Tags that are too rare to deserve their own bucket are pooled into a
single "Misc Tags" bucket.
"""

import logging
from collections.abc import Iterable
from typing import Any

from feedindex.episodes.models import EpisodeRecord

logger = logging.getLogger(__name__)

MISC_TAGS_KEY = "Misc Tags"


def normalize_tag(tag: Any) -> str:
    """Fold a tag into its comparison key.

    Rules:
    - Non-string or empty input -> ""
    - Lowercase and trim surrounding whitespace
    - Remove one trailing "s" unless the tag is a single character, ends in
      "ss", or the "s" stands alone after whitespace

    Examples:
        "Tags" -> "tag"
        " Sci-Fi " -> "sci-fi"
        "Glass" -> "glass"
    """
    if not isinstance(tag, str) or not tag:
        return ""

    normalized = tag.lower().strip()

    if (
        len(normalized) > 1
        and normalized.endswith("s")
        and not normalized.endswith("ss")
        and not normalized[-2].isspace()
    ):
        normalized = normalized[:-1]

    return normalized


def episode_tag_keys(episode: EpisodeRecord) -> list[str]:
    """Distinct non-empty normalized tags of an episode, in first-seen order."""
    keys: list[str] = []
    for tag in episode.tags:
        key = normalize_tag(tag)
        if key and key not in keys:
            keys.append(key)
    return keys


def _bucket_by_tag(
    episodes: Iterable[EpisodeRecord],
) -> dict[str, list[EpisodeRecord]]:
    buckets: dict[str, list[EpisodeRecord]] = {}
    for episode in episodes:
        for key in episode_tag_keys(episode):
            buckets.setdefault(key, []).append(episode)
    return buckets


def explicit_tag_keys(
    episodes: Iterable[EpisodeRecord], min_threshold: int
) -> set[str]:
    """Normalized tags carried by at least ``min_threshold`` episodes."""
    return {
        key
        for key, bucket in _bucket_by_tag(episodes).items()
        if len(bucket) >= min_threshold
    }


def group_by_tag(
    episodes: Iterable[EpisodeRecord], min_threshold: int
) -> dict[str, list[EpisodeRecord]]:
    """Group episodes by normalized tag.

    An episode lands in one bucket per distinct normalized tag. Buckets
    smaller than ``min_threshold`` are merged into a single "Misc Tags"
    bucket where each episode appears at most once.

    Args:
        episodes: Episodes to group
        min_threshold: Minimum bucket size for a tag to keep its own key

    Returns:
        Ordered mapping: explicit tags by descending size then name,
        followed by "Misc Tags" when it is non-empty
    """
    episodes = list(episodes)
    buckets = _bucket_by_tag(episodes)

    explicit = [
        (key, bucket) for key, bucket in buckets.items() if len(bucket) >= min_threshold
    ]
    pooled_keys = {key for key, bucket in buckets.items() if len(bucket) < min_threshold}

    explicit.sort(key=lambda item: (-len(item[1]), item[0]))
    grouped = dict(explicit)

    # Ingest order, one entry per episode
    misc = [
        episode
        for episode in episodes
        if any(key in pooled_keys for key in episode_tag_keys(episode))
    ]
    if misc:
        grouped[MISC_TAGS_KEY] = misc

    logger.debug(
        "Grouped %d episodes into %d tag buckets (%d pooled tags)",
        len(episodes),
        len(explicit),
        len(pooled_keys),
    )
    return grouped

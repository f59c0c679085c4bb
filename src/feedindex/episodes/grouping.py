"""Exact-value grouping for single-valued episode fields."""

from collections.abc import Callable, Iterable

from feedindex.episodes.models import EpisodeRecord

CATEGORICAL_FIELDS = ("model", "origin", "zone", "locale", "region")

FieldSelector = str | Callable[[EpisodeRecord], str | None]


def _selector(field: FieldSelector) -> Callable[[EpisodeRecord], str | None]:
    if callable(field):
        return field
    return lambda episode: getattr(episode, field)


def group_by_field(
    episodes: Iterable[EpisodeRecord], field: FieldSelector
) -> dict[str, list[EpisodeRecord]]:
    """Group episodes by the exact value of a field.

    Unlike tag grouping there is no pooling: a value seen once still gets
    its own bucket. Episodes with an empty value are left out.

    Args:
        episodes: Episodes to group
        field: Attribute name or a callable returning the grouping value

    Returns:
        Ordered mapping from value to episodes (ingest order within a
        bucket), buckets sorted by descending size then ascending value
    """
    select = _selector(field)
    buckets: dict[str, list[EpisodeRecord]] = {}

    for episode in episodes:
        value = select(episode)
        if value:
            buckets.setdefault(value, []).append(episode)

    ordered = sorted(buckets.items(), key=lambda item: (-len(item[1]), item[0]))
    return dict(ordered)


def distinct_values(episodes: Iterable[EpisodeRecord], field: str) -> list[str]:
    """Distinct non-empty values of a field, sorted ascending."""
    return sorted({value for episode in episodes if (value := getattr(episode, field))})

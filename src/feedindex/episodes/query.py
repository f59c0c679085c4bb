"""Ad-hoc filtering and sorting of episode lists.

A query never aborts because of a bad criterion: an unparsable year range is
dropped and an unknown sort key leaves the order unchanged. Both cases are
logged at WARNING level.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from feedindex.episodes.grouping import CATEGORICAL_FIELDS
from feedindex.episodes.models import EpisodeRecord
from feedindex.episodes.tags import (
    MISC_TAGS_KEY,
    episode_tag_keys,
    explicit_tag_keys,
    normalize_tag,
)
from feedindex.episodes.years import YearSpan
from feedindex.utils.errors import InvalidYearRangeError

logger = logging.getLogger(__name__)

ALL_YEARS = "All Years"
_ALL_YEARS_SENTINELS = {"all years", "all"}

DEFAULT_SORT_KEY = "published"


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _published_key(episode: EpisodeRecord) -> float:
    """Seconds since the epoch; naive values are read as UTC."""
    published = episode.published
    if published is None:
        return 0.0
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return (published - EPOCH).total_seconds()


SORT_KEYS: dict[str, Callable[[EpisodeRecord], Any]] = {
    "published": _published_key,
    "date": _published_key,
    "title": lambda episode: episode.title.casefold(),
    "duration": lambda episode: episode.duration,
    "integrity": lambda episode: episode.integrity,
}


class QueryCriteria(BaseModel):
    """Filtering and sorting instructions for a single query.

    All filters are optional and combined with AND.

    Attributes:
        search_query: Case-insensitive text matched against title,
            description, location and (normalized) tags
        tag: Normalized tag to match, or "Misc Tags" for pooled tags
        model, origin, zone, locale, region: Exact-match filters
        year: "YYYY", "YYYY-YYYY", or "All Years" for no year filter
        sort_by: published (default), date, title, duration or integrity
        sort_ascending: Sort direction, descending by default
    """

    model_config = ConfigDict(frozen=True)

    search_query: str | None = Field(
        default=None, validation_alias=AliasChoices("search_query", "searchQuery")
    )
    tag: str | None = None
    model: str | None = None
    origin: str | None = None
    zone: str | None = None
    locale: str | None = None
    region: str | None = None
    year: str | None = None
    sort_by: str = Field(
        default=DEFAULT_SORT_KEY, validation_alias=AliasChoices("sort_by", "sortBy")
    )
    sort_ascending: bool = Field(
        default=False,
        validation_alias=AliasChoices("sort_ascending", "sortAscending"),
    )

    @classmethod
    def from_mapping(cls, criteria: Mapping[str, Any] | None) -> "QueryCriteria":
        """Build criteria from a plain mapping (snake_case or camelCase keys)."""
        if not criteria:
            return cls()
        return cls.model_validate(dict(criteria))

    @field_validator(
        "search_query", "tag", "model", "origin", "zone", "locale", "region", "year",
        mode="before",
    )
    @classmethod
    def _coerce_optional_text(cls, v: Any) -> str | None:
        if isinstance(v, str):
            return v or None
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return None

    @field_validator("sort_by", mode="before")
    @classmethod
    def _coerce_sort_by(cls, v: Any) -> str:
        return v if isinstance(v, str) and v else DEFAULT_SORT_KEY

    @field_validator("sort_ascending", mode="before")
    @classmethod
    def _coerce_sort_ascending(cls, v: Any) -> bool:
        if isinstance(v, str):
            return False
        return bool(v)


def resolve_year_filter(year: str | None) -> YearSpan | None:
    """Turn a year criterion into a span, or None for "no year filter"."""
    if year is None or year.strip().lower() in _ALL_YEARS_SENTINELS or not year.strip():
        return None
    try:
        return YearSpan.parse(year)
    except InvalidYearRangeError:
        logger.warning("Ignoring invalid year filter %r", year)
        return None


def _matches_search(episode: EpisodeRecord, query: str, tag_query: str) -> bool:
    if query in episode.title.lower():
        return True
    if query in episode.description.lower():
        return True
    if query in episode.location.lower():
        return True
    return any(tag_query in normalize_tag(tag) for tag in episode.tags)


def sort_episodes(
    episodes: Iterable[EpisodeRecord],
    sort_by: str = DEFAULT_SORT_KEY,
    ascending: bool = False,
) -> list[EpisodeRecord]:
    """Return a sorted copy; an unknown key keeps the incoming order."""
    items = list(episodes)
    key = SORT_KEYS.get(sort_by)
    if key is None:
        logger.warning("Unknown sort key %r, leaving order unchanged", sort_by)
        return items
    return sorted(items, key=key, reverse=not ascending)


def filter_and_sort(
    episodes: Iterable[EpisodeRecord],
    criteria: QueryCriteria,
    min_category_threshold: int,
) -> list[EpisodeRecord]:
    """Apply ``criteria`` to ``episodes`` without modifying the input.

    Args:
        episodes: Episodes in ingest order
        criteria: Filters and sort order
        min_category_threshold: Tag bucket size below which tags count as
            "Misc Tags" for the tag filter

    Returns:
        New list of matching episodes in the requested order
    """
    all_episodes = list(episodes)
    result = all_episodes

    # 1. Free-text search
    query = (criteria.search_query or "").strip().lower()
    if query:
        tag_query = normalize_tag(query)
        result = [ep for ep in result if _matches_search(ep, query, tag_query)]

    # 2. Tag filter
    if criteria.tag:
        selected = normalize_tag(criteria.tag)
        if criteria.tag == MISC_TAGS_KEY or selected == normalize_tag(MISC_TAGS_KEY):
            explicit = explicit_tag_keys(all_episodes, min_category_threshold)
            result = [
                ep
                for ep in result
                if any(key not in explicit for key in episode_tag_keys(ep))
            ]
        else:
            result = [ep for ep in result if selected in episode_tag_keys(ep)]

    # 3. Exact-match categorical filters
    for field in CATEGORICAL_FIELDS:
        value = getattr(criteria, field)
        if value:
            result = [ep for ep in result if getattr(ep, field) == value]

    # 4. Year filter
    span = resolve_year_filter(criteria.year)
    if span is not None:
        result = [ep for ep in result if span.contains(ep.recording_year)]

    logger.debug(
        "Query matched %d of %d episodes", len(result), len(all_episodes)
    )

    # 5. Sort
    return sort_episodes(result, criteria.sort_by, criteria.sort_ascending)

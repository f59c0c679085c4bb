"""Episode records, groupings and the feed index."""

from feedindex.episodes.grouping import group_by_field
from feedindex.episodes.index import GROUPING_FIELDS, FeedIndex
from feedindex.episodes.loader import load_episodes
from feedindex.episodes.models import EpisodeRecord, FeedMetadata
from feedindex.episodes.query import ALL_YEARS, QueryCriteria, filter_and_sort
from feedindex.episodes.tags import MISC_TAGS_KEY, group_by_tag, normalize_tag
from feedindex.episodes.years import YearSpan, bucket_episode_years, bucket_years

__all__ = [
    "ALL_YEARS",
    "EpisodeRecord",
    "FeedIndex",
    "FeedMetadata",
    "GROUPING_FIELDS",
    "MISC_TAGS_KEY",
    "QueryCriteria",
    "YearSpan",
    "bucket_episode_years",
    "bucket_years",
    "filter_and_sort",
    "group_by_field",
    "group_by_tag",
    "load_episodes",
    "normalize_tag",
]

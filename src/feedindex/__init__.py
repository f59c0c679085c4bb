"""feedindex - in-memory episode index with groupings and ad-hoc queries."""

__version__ = "0.1.0"

from feedindex.config.schema import IndexConfig
from feedindex.episodes import EpisodeRecord, FeedIndex, FeedMetadata, QueryCriteria

__all__ = [
    "EpisodeRecord",
    "FeedIndex",
    "FeedMetadata",
    "IndexConfig",
    "QueryCriteria",
    "__version__",
]

"""In-memory episode index serving grouped and filtered views.

The index keeps every derived structure in one immutable snapshot. Replacing
the episode set builds a complete new snapshot and publishes it with a single
reference assignment, so concurrent readers see either the old state or the
new one, never a mix.
"""

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from feedindex.config.schema import IndexConfig
from feedindex.episodes.grouping import CATEGORICAL_FIELDS, distinct_values, group_by_field
from feedindex.episodes.models import EpisodeRecord, FeedMetadata
from feedindex.episodes.query import QueryCriteria, filter_and_sort, sort_episodes
from feedindex.episodes.tags import group_by_tag
from feedindex.episodes.years import YearSpan, bucket_episode_years
from feedindex.utils.errors import UnknownGroupingError

logger = logging.getLogger(__name__)

GROUPING_FIELDS = ("tag", *CATEGORICAL_FIELDS, "year")


@dataclass(frozen=True)
class _Snapshot:
    """Episodes plus everything derived from them."""

    episodes: tuple[EpisodeRecord, ...] = ()
    metadata: FeedMetadata = field(default_factory=FeedMetadata)
    by_year: Mapping[int, tuple[EpisodeRecord, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    year_spans: tuple[YearSpan, ...] = ()
    # Tag threshold the available tags were built with
    min_category_threshold: int = 2
    available: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({name: () for name in GROUPING_FIELDS})
    )


class FeedIndex:
    """Episode collection with derived groupings and an ad-hoc query.

    Example:
        >>> index = FeedIndex(config=IndexConfig(min_year_group_threshold=3))
        >>> index.set_all_episodes(episodes)
        >>> index.get_available_years()
        ['2019-2021', '2023']
        >>> index.get_filtered_and_sorted_list({"tag": "sci-fi", "sortBy": "title"})
    """

    def __init__(
        self,
        episodes: Iterable[EpisodeRecord | Mapping[str, Any]] | None = None,
        config: IndexConfig | None = None,
        metadata: FeedMetadata | None = None,
    ) -> None:
        """Initialize the index.

        Args:
            episodes: Initial episodes (records or decoded descriptors)
            config: Grouping thresholds
            metadata: Feed-level metadata
        """
        self.config = config or IndexConfig()
        self._write_lock = threading.Lock()
        self._snapshot = _Snapshot(
            metadata=metadata or FeedMetadata(),
            min_category_threshold=self.config.min_category_threshold,
        )

        self._group_accessors: dict[str, Callable[[], dict[str, list[EpisodeRecord]]]] = {
            "tag": self.get_episodes_by_tag,
            "model": self.get_episodes_by_model,
            "origin": self.get_episodes_by_origin,
            "zone": self.get_episodes_by_zone,
            "locale": self.get_episodes_by_locale,
            "region": self.get_episodes_by_region,
            "year": self.get_episodes_by_year,
        }

        self.set_all_episodes(episodes or [])

    # --- Ingestion ---

    def set_all_episodes(
        self, episodes: Iterable[EpisodeRecord | Mapping[str, Any]]
    ) -> None:
        """Replace the episode set and rebuild every derived index.

        Args:
            episodes: Records or decoded descriptors, in ingest order
        """
        records = tuple(EpisodeRecord.from_descriptor(ep) for ep in episodes)

        with self._write_lock:
            snapshot = self._build_snapshot(records, self._snapshot.metadata)
            self._snapshot = snapshot

        logger.info(
            "Indexed %d episodes (%d tags, %d models, year spans: %s)",
            len(records),
            len(snapshot.available["tag"]),
            len(snapshot.available["model"]),
            ", ".join(snapshot.available["year"]) or "none",
        )

    def _build_snapshot(
        self, records: tuple[EpisodeRecord, ...], metadata: FeedMetadata
    ) -> _Snapshot:
        category_threshold = self.config.min_category_threshold
        by_year: dict[int, list[EpisodeRecord]] = {}
        for episode in records:
            if episode.recording_year is not None:
                by_year.setdefault(episode.recording_year, []).append(episode)

        spans = tuple(
            bucket_episode_years(records, self.config.min_year_group_threshold)
        )

        available: dict[str, tuple[str, ...]] = {
            "tag": tuple(group_by_tag(records, category_threshold)),
            "year": tuple(span.label for span in spans),
        }
        for name in CATEGORICAL_FIELDS:
            available[name] = tuple(distinct_values(records, name))

        return _Snapshot(
            episodes=records,
            metadata=metadata.model_copy(update={"total": len(records)}),
            by_year=MappingProxyType(
                {year: tuple(eps) for year, eps in by_year.items()}
            ),
            year_spans=spans,
            min_category_threshold=category_threshold,
            available=MappingProxyType(available),
        )

    # --- Basic accessors ---

    @property
    def episodes(self) -> list[EpisodeRecord]:
        """All episodes in ingest order (a copy)."""
        return list(self._snapshot.episodes)

    @property
    def metadata(self) -> FeedMetadata:
        return self._snapshot.metadata

    def __len__(self) -> int:
        return len(self._snapshot.episodes)

    def get_episode_by_id(self, episode_id: str) -> EpisodeRecord | None:
        """Find an episode by identifier."""
        for episode in self._snapshot.episodes:
            if episode.id == episode_id:
                return episode
        return None

    def get_episodes_for_year(self, year: int) -> list[EpisodeRecord]:
        """Episodes recorded in ``year``, in ingest order."""
        return list(self._snapshot.by_year.get(year, ()))

    # --- Available filter values ---

    def get_available(self, field_name: str) -> list[str]:
        """Available values for a grouping field.

        Raises:
            UnknownGroupingError: If ``field_name`` is not a grouping field
        """
        available = self._snapshot.available
        if field_name not in available:
            raise UnknownGroupingError(field_name, GROUPING_FIELDS)
        return list(available[field_name])

    def get_available_tags(self) -> list[str]:
        return self.get_available("tag")

    def get_available_models(self) -> list[str]:
        return self.get_available("model")

    def get_available_origins(self) -> list[str]:
        return self.get_available("origin")

    def get_available_zones(self) -> list[str]:
        return self.get_available("zone")

    def get_available_locales(self) -> list[str]:
        return self.get_available("locale")

    def get_available_regions(self) -> list[str]:
        return self.get_available("region")

    def get_available_years(self) -> list[str]:
        return self.get_available("year")

    # --- Groupings ---

    def get_episodes_by(self, field_name: str) -> dict[str, list[EpisodeRecord]]:
        """Grouping for a field name such as "tag", "model" or "year".

        Raises:
            UnknownGroupingError: If no grouping is registered for ``field_name``
        """
        accessor = self._group_accessors.get(field_name)
        if accessor is None:
            raise UnknownGroupingError(field_name, GROUPING_FIELDS)
        return accessor()

    def get_episodes_by_tag(self) -> dict[str, list[EpisodeRecord]]:
        snapshot = self._snapshot
        return group_by_tag(snapshot.episodes, snapshot.min_category_threshold)

    def get_episodes_by_model(self) -> dict[str, list[EpisodeRecord]]:
        return group_by_field(self._snapshot.episodes, "model")

    def get_episodes_by_origin(self) -> dict[str, list[EpisodeRecord]]:
        return group_by_field(self._snapshot.episodes, "origin")

    def get_episodes_by_zone(self) -> dict[str, list[EpisodeRecord]]:
        return group_by_field(self._snapshot.episodes, "zone")

    def get_episodes_by_locale(self) -> dict[str, list[EpisodeRecord]]:
        return group_by_field(self._snapshot.episodes, "locale")

    def get_episodes_by_region(self) -> dict[str, list[EpisodeRecord]]:
        return group_by_field(self._snapshot.episodes, "region")

    def get_episodes_by_year(self) -> dict[str, list[EpisodeRecord]]:
        """Year span label -> episodes in that span, newest publication first.

        Labels are in ascending chronological order.
        """
        snapshot = self._snapshot
        grouped: dict[str, list[EpisodeRecord]] = {}

        for span in snapshot.year_spans:
            members = [
                episode
                for episode in snapshot.episodes
                if span.contains(episode.recording_year)
            ]
            if members:
                grouped[span.label] = sort_episodes(members, "published", ascending=False)

        return grouped

    # --- Ad-hoc query ---

    def get_filtered_and_sorted_list(
        self, criteria: QueryCriteria | Mapping[str, Any] | None = None
    ) -> list[EpisodeRecord]:
        """Filter and sort episodes without touching the index state.

        Args:
            criteria: QueryCriteria or a mapping with the same keys
                (camelCase such as ``searchQuery`` and ``sortBy`` accepted)

        Returns:
            New list of matching episodes
        """
        if not isinstance(criteria, QueryCriteria):
            criteria = QueryCriteria.from_mapping(criteria)

        snapshot = self._snapshot
        return filter_and_sort(
            snapshot.episodes, criteria, snapshot.min_category_threshold
        )

"""Tests for episode and feed metadata models."""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from feedindex.episodes.models import (
    DEFAULT_TITLE,
    UNKNOWN_MODEL,
    EpisodeRecord,
    FeedMetadata,
    coerce_timestamp,
)


class TestEpisodeDefaults:
    """Malformed or missing input degrades to defaults."""

    def test_empty_record(self) -> None:
        """A record built from nothing has every documented default."""
        episode = EpisodeRecord()

        assert episode.id is None
        assert episode.title == DEFAULT_TITLE
        assert episode.recording_time is None
        assert episode.published is None
        assert episode.model == UNKNOWN_MODEL
        assert episode.integrity == 0.0
        assert episode.tags == ()
        assert episode.location == ""
        assert episode.audio_url is None
        assert episode.duration == 0.0
        assert episode.size == 0

    def test_from_descriptor_non_mapping(self) -> None:
        """Non-mapping descriptors produce a default record instead of raising."""
        episode = EpisodeRecord.from_descriptor(["not", "a", "mapping"])
        assert episode.title == DEFAULT_TITLE

    def test_from_descriptor_passes_records_through(self) -> None:
        """Existing records are returned as-is."""
        episode = EpisodeRecord(id="x")
        assert EpisodeRecord.from_descriptor(episode) is episode

    def test_blank_title_uses_placeholder(self) -> None:
        """Whitespace-only titles fall back to the placeholder."""
        assert EpisodeRecord(title="   ").title == DEFAULT_TITLE

    def test_none_model_is_unknown(self) -> None:
        """Missing model uses the sentinel value."""
        assert EpisodeRecord(model=None).model == UNKNOWN_MODEL

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("87.5", 87.5),
            ("87.5%", 87.5),
            (42, 42.0),
            ("corrupted", 0.0),
            (None, 0.0),
            (float("nan"), 0.0),
            (150, 100.0),
            (-3, 0.0),
        ],
    )
    def test_integrity_coercion(self, raw, expected) -> None:
        """Integrity parses numbers and percentages, defaulting to 0."""
        assert EpisodeRecord(integrity=raw).integrity == expected

    def test_unparsable_timestamps_are_absent(self) -> None:
        """Unparsable dates become None rather than epoch zero."""
        episode = EpisodeRecord(date="sometime last spring", published={"bad": 1})
        assert episode.recording_time is None
        assert episode.published is None
        assert episode.recording_year is None

    def test_tags_drop_non_strings(self) -> None:
        """Non-string tag items are discarded, duplicates kept."""
        episode = EpisodeRecord(tags=["Horror", 3, None, "Horror"])
        assert episode.tags == ("Horror", "Horror")

    def test_tags_non_list(self) -> None:
        """A non-list tag value becomes an empty tuple."""
        assert EpisodeRecord(tags="Horror").tags == ()

    def test_numeric_fields(self) -> None:
        """Duration and size accept numeric strings and ignore junk."""
        episode = EpisodeRecord(duration="90.5", size="2048")
        assert episode.duration == 90.5
        assert episode.size == 2048

        junk = EpisodeRecord(duration="long", size=[1])
        assert junk.duration == 0.0
        assert junk.size == 0

    def test_numeric_id_is_stringified(self) -> None:
        """Numeric identifiers become strings."""
        assert EpisodeRecord(id=17).id == "17"


class TestEpisodeAliases:
    """Descriptor keys from the ingestion collaborator."""

    def test_camel_case_keys(self) -> None:
        """date and audioUrl map to snake_case fields."""
        episode = EpisodeRecord.from_descriptor(
            {"date": "2021-02-03", "audioUrl": "https://example.com/a.mp3"}
        )
        assert episode.recording_time == datetime(2021, 2, 3)
        assert episode.audio_url == "https://example.com/a.mp3"

    def test_snake_case_keys(self) -> None:
        """Field names are accepted directly."""
        episode = EpisodeRecord(recording_time="2021-02-03T04:05:06+00:00")
        assert episode.recording_year == 2021

    def test_unknown_keys_ignored(self) -> None:
        """Extra descriptor keys do not break construction."""
        episode = EpisodeRecord.from_descriptor({"rawTitle": "RAW", "title": "Clean"})
        assert episode.title == "Clean"


class TestEpisodeDerived:
    """Derived properties."""

    def test_location_skips_empty_segments(self) -> None:
        """Only non-empty hierarchy fields appear, in hierarchy order."""
        episode = EpisodeRecord(origin="Harbor", region="Coastal", planet="Earth")
        assert episode.location == "Harbor, Coastal, Earth"

    def test_location_full_hierarchy(self) -> None:
        """All five fields joined in order."""
        episode = EpisodeRecord(
            origin="Station", locale="Shelf", region="North", zone="Outer", planet="Europa"
        )
        assert episode.location == "Station, Shelf, North, Outer, Europa"

    def test_date_labels(self) -> None:
        """Short and long recording date labels."""
        episode = EpisodeRecord(date="2024-03-05T10:00:00")
        assert episode.date_label == "03/05/2024"
        assert episode.long_date_label == "Tuesday, March 5, 2024"

    def test_date_labels_absent(self) -> None:
        """Labels are empty without a recording date."""
        episode = EpisodeRecord()
        assert episode.date_label == ""
        assert episode.long_date_label == ""

    def test_integrity_label(self) -> None:
        """Integrity renders as a percentage string."""
        assert EpisodeRecord(integrity=87.5).integrity_label == "87.5%"
        assert EpisodeRecord(integrity=100).integrity_label == "100%"

    def test_to_dict(self) -> None:
        """JSON representation includes derived fields."""
        episode = EpisodeRecord(id="a", origin="Harbor", published="2020-01-01T00:00:00")
        data = episode.to_dict()
        assert data["id"] == "a"
        assert data["location"] == "Harbor"
        assert data["published"] == "2020-01-01T00:00:00"
        assert data["tags"] == []

    def test_record_is_immutable(self) -> None:
        """Records cannot be modified after construction."""
        episode = EpisodeRecord(title="Fixed")
        with pytest.raises(ValidationError):
            episode.title = "Changed"  # type: ignore[misc]


class TestCoerceTimestamp:
    """Tests for timestamp coercion."""

    def test_datetime_passthrough(self) -> None:
        value = datetime(2020, 1, 1, tzinfo=timezone.utc)
        assert coerce_timestamp(value) is value

    def test_date_becomes_midnight(self) -> None:
        assert coerce_timestamp(date(2020, 1, 2)) == datetime(2020, 1, 2)

    def test_iso_with_z_suffix(self) -> None:
        result = coerce_timestamp("2020-01-02T03:04:05Z")
        assert result == datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_epoch_seconds(self) -> None:
        assert coerce_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", True, 1e20, object()])
    def test_unusable_values(self, value) -> None:
        assert coerce_timestamp(value) is None


class TestFeedMetadata:
    """Tests for FeedMetadata."""

    def test_defaults(self) -> None:
        metadata = FeedMetadata()
        assert metadata.title == "Episode Feed"
        assert metadata.total == 0
        assert metadata.author is None

    def test_blank_title_defaults(self) -> None:
        assert FeedMetadata(title="").title == "Episode Feed"

"""Tests for tag normalization and tag grouping."""

import pytest

from feedindex.episodes.tags import (
    MISC_TAGS_KEY,
    episode_tag_keys,
    explicit_tag_keys,
    group_by_tag,
    normalize_tag,
)


class TestNormalizeTag:
    """Test normalize_tag."""

    def test_plural_and_case_fold_together(self):
        """Plural and case variants share one key."""
        assert normalize_tag("Tags") == normalize_tag("tag") == "tag"

    def test_trims_whitespace(self):
        """Surrounding whitespace is removed before folding."""
        assert normalize_tag("  Sci-Fi  ") == "sci-fi"

    def test_double_s_kept(self):
        """Words ending in "ss" are not de-pluralized."""
        assert normalize_tag("Glass") == "glass"
        assert normalize_tag("BOSS") == "boss"

    def test_single_s_kept(self):
        """A lone "s" is not stripped to nothing."""
        assert normalize_tag("S") == "s"

    def test_only_one_s_removed(self):
        """Exactly one trailing "s" is removed."""
        assert normalize_tag("Bus") == "bu"
        assert normalize_tag("Oceans") == "ocean"

    @pytest.mark.parametrize("value", [None, "", 42, ["tags"], "   "])
    def test_non_string_or_empty(self, value):
        """Non-string and empty input yield an empty key."""
        assert normalize_tag(value) == ""

    @pytest.mark.parametrize(
        "value",
        ["Tags", "glass", "s", "Bus", "  Horror ", "type s", "abs s", "Sci-Fis", "ss", "X"],
    )
    def test_idempotent(self, value):
        """Normalizing twice equals normalizing once."""
        once = normalize_tag(value)
        assert normalize_tag(once) == once


class TestEpisodeTagKeys:
    """Test per-episode key extraction."""

    def test_distinct_keys_in_order(self, make_episode):
        """Duplicates after folding are collapsed, first-seen order kept."""
        episode = make_episode("a", tags=["Horror", "Sci-Fi", "horrors", ""])
        assert episode_tag_keys(episode) == ["horror", "sci-fi"]


class TestGroupByTag:
    """Test group_by_tag."""

    def test_sci_fi_bucket_and_misc_pool(self, make_episode):
        """Variant spellings merge; a lone tag is pooled into Misc Tags."""
        episodes = [
            make_episode("1", tags=["Sci-Fi"]),
            make_episode("2", tags=["sci-fi"]),
            make_episode("3", tags=["Horror"]),
        ]

        groups = group_by_tag(episodes, min_threshold=2)

        assert list(groups) == ["sci-fi", MISC_TAGS_KEY]
        assert [ep.id for ep in groups["sci-fi"]] == ["1", "2"]
        assert [ep.id for ep in groups[MISC_TAGS_KEY]] == ["3"]

    def test_episode_counted_once_per_tag(self, make_episode):
        """An episode repeating a tag appears once in that bucket."""
        episodes = [
            make_episode("1", tags=["Drone", "drones"]),
            make_episode("2", tags=["drone"]),
        ]

        groups = group_by_tag(episodes, min_threshold=2)

        assert [ep.id for ep in groups["drone"]] == ["1", "2"]

    def test_episode_in_multiple_buckets(self, make_episode):
        """An episode with N distinct tags appears in N buckets."""
        episodes = [
            make_episode("1", tags=["A", "B"]),
            make_episode("2", tags=["A", "B"]),
        ]

        groups = group_by_tag(episodes, min_threshold=1)

        assert set(groups) == {"a", "b"}
        assert all(len(bucket) == 2 for bucket in groups.values())

    def test_ordering_by_size_then_name(self, make_episode):
        """Explicit buckets: descending size, ties alphabetical, misc last."""
        episodes = [
            make_episode("1", tags=["zeta", "beta", "alpha"]),
            make_episode("2", tags=["zeta", "beta", "alpha"]),
            make_episode("3", tags=["zeta", "rare"]),
        ]

        groups = group_by_tag(episodes, min_threshold=2)

        assert list(groups) == ["zeta", "alpha", "beta", MISC_TAGS_KEY]

    def test_misc_holds_each_episode_once(self, make_episode):
        """An episode with several rare tags appears once in Misc Tags."""
        episodes = [
            make_episode("1", tags=["rare-one", "rare-two"]),
            make_episode("2", tags=["common"]),
            make_episode("3", tags=["common", "rare-three"]),
        ]

        groups = group_by_tag(episodes, min_threshold=2)

        assert [ep.id for ep in groups[MISC_TAGS_KEY]] == ["1", "3"]

    def test_no_misc_when_everything_explicit(self, make_episode):
        """Misc Tags is omitted when empty."""
        episodes = [make_episode("1", tags=["x"]), make_episode("2", tags=["x"])]
        assert MISC_TAGS_KEY not in group_by_tag(episodes, min_threshold=2)

    def test_untagged_episodes_ignored(self, make_episode):
        """Episodes without tags contribute to no bucket."""
        assert group_by_tag([make_episode("1")], min_threshold=1) == {}

    def test_input_not_modified(self, make_episode):
        """Grouping does not reorder the caller's list."""
        episodes = [make_episode("2", tags=["b"]), make_episode("1", tags=["a"])]
        group_by_tag(episodes, min_threshold=1)
        assert [ep.id for ep in episodes] == ["2", "1"]


class TestExplicitTagKeys:
    """Test explicit_tag_keys."""

    def test_threshold(self, make_episode):
        episodes = [
            make_episode("1", tags=["Oceans", "Harbor"]),
            make_episode("2", tags=["ocean"]),
        ]
        assert explicit_tag_keys(episodes, 2) == {"ocean"}
